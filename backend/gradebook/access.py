"""Lookup and permission helpers shared by services and routers."""

from sqlalchemy.orm import Session

from .errors import AuthorizationError, NotFoundError
from .models import Assignment, Course, Submission


def get_course(db: Session, course_id: str) -> Course:
    course = db.get(Course, course_id)
    if course is None:
        raise NotFoundError("Course")
    return course


def get_assignment(db: Session, assignment_id: str) -> Assignment:
    assignment = db.get(Assignment, assignment_id)
    if assignment is None:
        raise NotFoundError("Assignment")
    return assignment


def get_submission(db: Session, submission_id: str) -> Submission:
    submission = db.get(Submission, submission_id)
    if submission is None:
        raise NotFoundError("Submission")
    return submission


def ensure_course_teacher(user, course: Course, action: str = "manage this course") -> None:
    """Require the course's teacher or an admin."""
    if user.is_admin:
        return
    if not user.is_teacher or not course.is_taught_by(user):
        raise AuthorizationError(f"Not authorized to {action}")


def ensure_course_member(user, course: Course) -> None:
    """Require the teacher, an enrolled student or an admin."""
    if user.is_admin or course.is_taught_by(user) or course.is_enrolled(user):
        return
    raise AuthorizationError("Not authorized to access this course")
