"""Test configuration and fixtures."""

from contextlib import contextmanager
from datetime import datetime, timedelta, UTC

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from gradebook.database import Base
import gradebook.models  # noqa: F401  registers tables on Base.metadata


# Use in-memory SQLite for testing
TEST_DATABASE_URL = "sqlite:///:memory:"

SAMPLE_RUBRIC = [
    {"criteria": "Clarity", "weight": 50, "description": "Clear and well organized"},
    {"criteria": "Examples", "weight": 50, "description": "Concrete supporting examples"},
]


class FakeCompletionClient:
    """Stands in for CompletionClient; replays canned responses in order.

    An Exception instance in ``responses`` is raised instead of returned.
    """

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    async def complete(self, system_prompt: str, prompt: str) -> str:
        self.calls.append({"system_prompt": system_prompt, "prompt": prompt})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def engine():
    """Fresh in-memory database per test."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    """Create test database session."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def session_scope(session_factory):
    """Session context manager shaped like gradebook.database.get_db_session."""
    @contextmanager
    def scope():
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
    return scope


@pytest.fixture
def fake_client_factory():
    return FakeCompletionClient


def _make_user(db_session, email, role, full_name):
    from gradebook.models import User
    user = User(email=email, full_name=full_name, role=role)
    user.set_password("TestPass123!")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def teacher(db_session):
    from gradebook.models import UserRole
    return _make_user(db_session, "teacher@example.com", UserRole.teacher, "Test Teacher")


@pytest.fixture
def other_teacher(db_session):
    from gradebook.models import UserRole
    return _make_user(db_session, "other.teacher@example.com", UserRole.teacher, "Other Teacher")


@pytest.fixture
def admin(db_session):
    from gradebook.models import UserRole
    return _make_user(db_session, "admin@example.com", UserRole.admin, "Admin")


@pytest.fixture
def student(db_session):
    from gradebook.models import UserRole
    return _make_user(db_session, "jane@example.com", UserRole.student, "Jane Doe")


@pytest.fixture
def outsider_student(db_session):
    from gradebook.models import UserRole
    return _make_user(db_session, "outsider@example.com", UserRole.student, "Not Enrolled")


@pytest.fixture
def course(db_session, teacher, student):
    """Course taught by ``teacher`` with ``student`` enrolled."""
    from gradebook.models import Course
    course = Course(title="English 101", description="Essay writing", teacher_id=teacher.id)
    course.students.append(student)
    db_session.add(course)
    db_session.commit()
    db_session.refresh(course)
    return course


@pytest.fixture
def assignment(db_session, course):
    """Open assignment worth 100 points with a two-item rubric."""
    from gradebook.models import Assignment
    assignment = Assignment(
        course_id=course.id,
        title="Persuasive Essay",
        description="Argue for or against school uniforms",
        due_date=datetime.now(UTC) + timedelta(days=7),
        total_points=100,
        rubric=[dict(item) for item in SAMPLE_RUBRIC],
        ai_grading_enabled=True,
    )
    db_session.add(assignment)
    db_session.commit()
    db_session.refresh(assignment)
    return assignment


@pytest.fixture
def submission(db_session, assignment, student):
    """Ungraded submission by ``student``."""
    from gradebook.grading import create_submission
    submission = create_submission(assignment, student, "Uniforms reduce distraction. For example, ...")
    db_session.add(submission)
    db_session.commit()
    db_session.refresh(submission)
    return submission
