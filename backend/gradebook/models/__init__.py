"""SQLAlchemy models for the gradebook."""

from .enums import UserRole, SubmissionStatus, GradedBy, BulkJobStatus
from .user import User, Course, course_enrollments
from .rubric import RubricItem, validate_rubric
from .assignment import Assignment
from .submission import Submission
from .grading import BulkGradingJob

__all__ = [
    "UserRole",
    "SubmissionStatus",
    "GradedBy",
    "BulkJobStatus",
    "User",
    "Course",
    "course_enrollments",
    "RubricItem",
    "validate_rubric",
    "Assignment",
    "Submission",
    "BulkGradingJob",
]
