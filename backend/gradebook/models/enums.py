"""Shared enums for models and auth."""
import enum


class UserRole(enum.Enum):
    student = "student"
    teacher = "teacher"
    admin = "admin"


class SubmissionStatus(enum.Enum):
    """Grading status of a submission.

    `returned` is reserved; no transition produces it yet.
    """
    submitted = "submitted"
    graded = "graded"
    returned = "returned"


class GradedBy(enum.Enum):
    """Provenance of a submission's grade."""
    none = "none"
    ai = "ai"
    teacher = "teacher"


class BulkJobStatus(enum.Enum):
    """Lifecycle of a bulk grading job; `failed` means the run aborted part way."""
    pending = "pending"
    running = "running"
    completed = "completed"
    failed = "failed"
