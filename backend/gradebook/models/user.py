"""User and Course models."""

import secrets
import string
import uuid

import bcrypt
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Table, Text, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base
from .enums import UserRole


course_enrollments = Table(
    "course_enrollments",
    Base.metadata,
    Column("course_id", String(36), ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True),
    Column("student_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    """Application user: student, teacher or admin."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(100), nullable=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(SQLEnum(UserRole), nullable=False, default=UserRole.student)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    taught_courses = relationship("Course", back_populates="teacher")
    enrolled_courses = relationship("Course", secondary=course_enrollments, back_populates="students")
    submissions = relationship("Submission", back_populates="student")

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role={self.role.value if self.role else None})>"

    def set_password(self, password: str) -> None:
        """Hash and set the user's password."""
        salt = bcrypt.gensalt()
        self.hashed_password = bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')

    def verify_password(self, password: str) -> bool:
        """Verify the provided password against the stored hash."""
        return bcrypt.checkpw(password.encode('utf-8'), self.hashed_password.encode('utf-8'))

    @property
    def is_student(self) -> bool:
        return self.role == UserRole.student

    @property
    def is_teacher(self) -> bool:
        return self.role == UserRole.teacher

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin


class Course(Base):
    """Course owned by a teacher, with enrolled students."""
    __tablename__ = "courses"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    description = Column(Text)
    code = Column(String(12), unique=True, index=True, nullable=False, default=lambda: Course.generate_code())
    teacher_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    teacher = relationship("User", back_populates="taught_courses")
    students = relationship("User", secondary=course_enrollments, back_populates="enrolled_courses")
    assignments = relationship("Assignment", back_populates="course", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Course(id={self.id}, title='{self.title}', code='{self.code}')>"

    @classmethod
    def generate_code(cls, length: int = 6) -> str:
        """Generate a random join code."""
        alphabet = string.ascii_uppercase + string.digits
        return ''.join(secrets.choice(alphabet) for _ in range(length))

    def is_enrolled(self, user: User) -> bool:
        return any(student.id == user.id for student in self.students)

    def is_taught_by(self, user: User) -> bool:
        return self.teacher_id == user.id
