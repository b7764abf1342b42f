"""Grading service: submission lifecycle backed by the database."""

import logging
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..access import ensure_course_teacher, get_assignment, get_submission
from ..errors import AuthorizationError, ValidationError
from ..models import Submission
from .client import CompletionClient
from .extractor import extract_grading
from .prompt import FEEDBACK_SYSTEM_PROMPT, GRADING_SYSTEM_PROMPT, build_feedback_prompt, build_grading_prompt
from .state import apply_ai_grade, apply_teacher_grade, create_submission

logger = logging.getLogger(__name__)


class GradingService:
    def __init__(self, db: Session, client: Optional[CompletionClient] = None):
        self.db = db
        self.client = client

    def _commit(self, submission: Submission) -> Submission:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to save submission {submission.id}: {e}")
            self.db.rollback()
            raise
        self.db.refresh(submission)
        return submission

    def submit(self, student, assignment_id: str, content: str) -> Submission:
        """Create a student's submission (the ``create`` transition)."""
        assignment = get_assignment(self.db, assignment_id)
        existing = self.db.query(Submission).filter(
            Submission.assignment_id == assignment.id,
            Submission.student_id == student.id,
        ).first()

        submission = create_submission(assignment, student, content, existing=existing)
        self.db.add(submission)
        try:
            self.db.commit()
        except IntegrityError as e:
            # Lost a race with a concurrent submit for the same pair
            self.db.rollback()
            raise ValidationError("You have already submitted this assignment") from e
        self.db.refresh(submission)
        logger.info(f"Student {student.id} submitted assignment {assignment.id}")
        return submission

    def list_submissions(self, user, assignment_id: str):
        """Teachers see every submission; students only their own."""
        assignment = get_assignment(self.db, assignment_id)
        query = self.db.query(Submission).filter(Submission.assignment_id == assignment.id)
        if user.is_student:
            return query.filter(Submission.student_id == user.id).all()
        ensure_course_teacher(user, assignment.course, "view these submissions")
        return query.order_by(Submission.submitted_at).all()

    def view_submission(self, user, submission_id: str) -> Submission:
        submission = get_submission(self.db, submission_id)
        if user.is_student:
            if submission.student_id != user.id:
                raise AuthorizationError("Not authorized to view this submission")
        else:
            ensure_course_teacher(user, submission.assignment.course, "view this submission")
        return submission

    async def grade_with_ai(self, user, submission_id: str) -> Tuple[Submission, str]:
        """Grade one submission with the completion model (``ai_grade``).

        Nothing is written unless the model call succeeds.

        Returns:
            The updated submission and the raw model output.
        """
        submission = get_submission(self.db, submission_id)
        ensure_course_teacher(user, submission.assignment.course, "grade this submission")
        raw = await self.grade_submission(submission)
        return submission, raw

    async def grade_submission(self, submission: Submission) -> str:
        """Run the AI grading transition on an already loaded submission."""
        assignment = submission.assignment
        prompt = build_grading_prompt(assignment, submission.content)
        raw = await self.client.complete(GRADING_SYSTEM_PROMPT, prompt)

        extraction = extract_grading(raw, assignment.rubric or [], assignment.total_points)
        apply_ai_grade(submission, extraction, assignment.total_points)
        self._commit(submission)
        logger.info(
            f"AI graded submission {submission.id}: grade={submission.grade}, "
            f"{len(extraction.rubric_grades)} rubric grade(s)"
        )
        return raw

    def grade_by_teacher(self, user, submission_id: str, grade, feedback: str,
                         rubric_grades=None) -> Submission:
        """Record a teacher's grade (``teacher_grade``)."""
        submission = get_submission(self.db, submission_id)
        assignment = submission.assignment
        ensure_course_teacher(user, assignment.course, "grade this submission")

        apply_teacher_grade(submission, assignment, grade, feedback, rubric_grades)
        self._commit(submission)
        logger.info(f"Teacher {user.id} graded submission {submission.id}: grade={submission.grade}")
        return submission

    async def generate_feedback(self, user, submission_id: str) -> dict:
        """Ask the model for personalized feedback. Nothing is persisted."""
        submission = get_submission(self.db, submission_id)
        assignment = submission.assignment
        ensure_course_teacher(user, assignment.course, "provide feedback for this submission")

        student_name = submission.student.full_name or submission.student.email
        prompt = build_feedback_prompt(submission, assignment, student_name)
        personalized = await self.client.complete(FEEDBACK_SYSTEM_PROMPT, prompt)
        return {
            "original_feedback": submission.feedback,
            "personalized_feedback": personalized,
        }
