"""Submission grading transitions.

Transitions mutate the ORM object in memory only; committing is the caller's
job so that every grading field lands in a single write. Guards run before
any field is assigned, so a rejected transition leaves the submission as it
was.
"""

import logging
import math
from datetime import datetime, UTC
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from ..errors import AuthorizationError, ValidationError
from ..models import GradedBy, Submission, SubmissionStatus
from .extractor import GradingExtraction, RubricGrade

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def create_submission(assignment, student, content: str, existing: Optional[Submission] = None,
                      now: Optional[datetime] = None) -> Submission:
    """Build a new submission for ``student``.

    Args:
        existing: Submission already stored for this (assignment, student)
            pair, if any.
        now: Current time; defaults to ``datetime.now(UTC)``.

    Raises:
        ValidationError: Empty content, a duplicate submission, or the
            assignment is past due.
        AuthorizationError: The user is not a student enrolled in the course.
    """
    if not student.is_student:
        raise AuthorizationError("Only students can submit assignments")
    if not content or not content.strip():
        raise ValidationError("Content is required")
    if not assignment.course.is_enrolled(student):
        raise AuthorizationError("Not enrolled in this course")

    now = now or datetime.now(UTC)
    if now > _as_utc(assignment.due_date):
        raise ValidationError("Assignment is past due")

    if existing is not None:
        raise ValidationError("You have already submitted this assignment")

    return Submission(
        assignment_id=assignment.id,
        student_id=student.id,
        content=content,
        submitted_at=now,
        grade=None,
        feedback="",
        graded_by=GradedBy.none,
        graded_at=None,
        status=SubmissionStatus.submitted,
        rubric_grades=[],
    )


def apply_ai_grade(submission: Submission, extraction: GradingExtraction,
                   total_points: Optional[float] = None) -> Submission:
    """Record an AI grading result.

    Allowed from any status. The extracted grade is stored as-is, including
    ``None`` and values above ``total_points``; the latter only logs a
    warning. Rubric grades replace the stored ones only when some were found.
    """
    grade = extraction.overall_grade
    if grade is None:
        logger.info(f"No overall grade found in AI response for submission {submission.id}")
    elif total_points is not None and grade > total_points:
        logger.warning(
            f"AI grade {grade} exceeds total points {total_points} for submission {submission.id}"
        )

    submission.grade = grade
    submission.feedback = extraction.feedback
    if extraction.rubric_grades:
        submission.rubric_grades = [rg.model_dump() for rg in extraction.rubric_grades]
    submission.graded_by = GradedBy.ai
    submission.graded_at = datetime.now(UTC)
    submission.status = SubmissionStatus.graded
    return submission


def apply_teacher_grade(submission: Submission, assignment, grade, feedback: str,
                        rubric_grades=None) -> Submission:
    """Record a teacher's grade.

    Raises:
        ValidationError: Missing, non-numeric or non-finite grade, empty
            feedback, a grade outside ``0..total_points``, or a rubric grade
            for a criterion the rubric does not define. The submission is not
            modified.
    """
    if grade is None or isinstance(grade, bool) or not isinstance(grade, (int, float)):
        raise ValidationError("Grade is required")
    if not math.isfinite(grade):
        raise ValidationError("Grade must be a finite number")
    if not feedback or not feedback.strip():
        raise ValidationError("Feedback is required")
    if grade > assignment.total_points:
        raise ValidationError(f"Grade cannot exceed total points ({assignment.total_points:g})")
    if grade < 0:
        raise ValidationError("Grade cannot be negative")

    entries = None
    if rubric_grades is not None:
        entries = []
        for entry in rubric_grades:
            if not isinstance(entry, RubricGrade):
                try:
                    entry = RubricGrade(**entry)
                except (TypeError, PydanticValidationError) as e:
                    raise ValidationError(f"Invalid rubric grade: {entry}") from e
            if assignment.get_criterion_by_name(entry.criteria) is None:
                raise ValidationError(f"Unknown rubric criteria: {entry.criteria}")
            entries.append(entry.model_dump())

    submission.grade = float(grade)
    submission.feedback = feedback
    if entries is not None:
        submission.rubric_grades = entries
    submission.graded_by = GradedBy.teacher
    submission.graded_at = datetime.now(UTC)
    submission.status = SubmissionStatus.graded
    return submission
