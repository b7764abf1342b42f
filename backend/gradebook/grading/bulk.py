"""Bulk AI grading of an assignment's ungraded submissions.

Scheduling returns as soon as the job record exists; the grading itself runs
later as a background task with its own database session. Submissions are
graded one at a time with a fixed pause between model calls, and a failure
on one submission never stops the rest. The caller gets no completion
signal: progress is read back from the job record or the submissions.
"""

import asyncio
import logging
from datetime import datetime, UTC
from typing import Callable, ContextManager, Optional

from sqlalchemy.orm import Session

from ..database import get_db_session
from ..errors import NotFoundError
from ..models import Assignment, BulkGradingJob, BulkJobStatus, Submission, SubmissionStatus
from .client import CompletionClient
from .service import GradingService

logger = logging.getLogger(__name__)


class BulkGradingOrchestrator:
    """
    Sequential, paced AI grading over one assignment.

    Args:
        client: Completion client shared by every grading call.
        session_scope: Factory for a session context manager used by the
            background run; defaults to :func:`gradebook.database.get_db_session`.
        delay_seconds: Pause between consecutive model calls.
        sleep: Awaitable sleep function, replaceable in tests.
    """

    def __init__(
        self,
        client: CompletionClient,
        session_scope: Callable[[], ContextManager[Session]] = get_db_session,
        delay_seconds: float = 1.0,
        sleep=asyncio.sleep,
    ):
        self.client = client
        self.session_scope = session_scope
        self.delay_seconds = delay_seconds
        self.sleep = sleep

    def schedule(self, db: Session, assignment: Assignment, requested_by=None) -> Optional[BulkGradingJob]:
        """Record a job for every submission currently awaiting a grade.

        Returns:
            The pending job, or None when there is nothing to grade.
        """
        submission_ids = [
            row.id for row in db.query(Submission.id).filter(
                Submission.assignment_id == assignment.id,
                Submission.status == SubmissionStatus.submitted,
            ).order_by(Submission.submitted_at, Submission.id)
        ]
        if not submission_ids:
            return None

        job = BulkGradingJob(
            assignment_id=assignment.id,
            requested_by=getattr(requested_by, "id", None),
            submission_ids=submission_ids,
            status=BulkJobStatus.pending,
            processed_count=0,
            failed_count=0,
        )
        db.add(job)
        db.commit()
        db.refresh(job)
        logger.info(f"Scheduled bulk grading job {job.id}: {len(submission_ids)} submission(s) "
                    f"for assignment {assignment.id}")
        return job

    async def run(self, job_id: str) -> dict:
        """Grade every submission of a scheduled job.

        A job that aborts part way is closed as ``failed`` so its record never
        stays ``running``.

        Returns:
            Dict with ``processed`` and ``failed`` counts.
        """
        try:
            with self.session_scope() as db:
                return await self._run(db, job_id)
        except Exception as e:
            # Runs detached from any request, so there is nobody to raise to
            logger.error(f"Bulk grading job {job_id} aborted: {e}", exc_info=True)
            return self._close_aborted(job_id)

    def _close_aborted(self, job_id: str) -> dict:
        try:
            with self.session_scope() as db:
                job = db.get(BulkGradingJob, job_id)
                if job is None:
                    return {"processed": 0, "failed": 0}
                if not job.is_finished:
                    job.status = BulkJobStatus.failed
                    job.finished_at = datetime.now(UTC)
                return {"processed": job.processed_count, "failed": job.failed_count}
        except Exception as e:
            logger.error(f"Could not close bulk grading job {job_id}: {e}")
            return {"processed": 0, "failed": 0}

    async def _run(self, db: Session, job_id: str) -> dict:
        job = db.get(BulkGradingJob, job_id)
        if job is None:
            raise NotFoundError("Bulk grading job")

        job.status = BulkJobStatus.running
        job.started_at = datetime.now(UTC)
        db.commit()

        service = GradingService(db, self.client)
        submission_ids = list(job.submission_ids or [])

        for index, submission_id in enumerate(submission_ids):
            if index > 0 and self.delay_seconds:
                await self.sleep(self.delay_seconds)

            try:
                submission = db.get(Submission, submission_id)
                if submission is None:
                    raise NotFoundError("Submission")
                await service.grade_submission(submission)
                job.processed_count += 1
            except Exception as e:
                db.rollback()
                logger.error(f"Error grading submission {submission_id}: {e}")
                job.failed_count += 1
            db.commit()

        job.status = BulkJobStatus.completed
        job.finished_at = datetime.now(UTC)
        db.commit()
        logger.info(f"Bulk grading job {job.id} finished: {job.processed_count} graded, "
                    f"{job.failed_count} failed")
        return {"processed": job.processed_count, "failed": job.failed_count}
