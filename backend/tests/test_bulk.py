"""Tests for bulk AI grading."""

from unittest.mock import AsyncMock, patch

import pytest

from gradebook.errors import ExternalServiceError
from gradebook.grading import BulkGradingOrchestrator, create_submission
from gradebook.models import BulkGradingJob, BulkJobStatus, GradedBy, Submission, SubmissionStatus, User, UserRole


@pytest.fixture
def three_submissions(db_session, course, assignment):
    """Three ungraded submissions from three enrolled students."""
    submissions = []
    for i in range(3):
        student = User(email=f"student{i}@example.com", full_name=f"Student {i}", role=UserRole.student)
        student.set_password("TestPass123!")
        course.students.append(student)
        db_session.add(student)
        db_session.commit()

        submission = create_submission(assignment, student, f"Essay number {i}")
        db_session.add(submission)
        db_session.commit()
        submissions.append(submission)
    return submissions


def make_orchestrator(client, session_scope, sleep=None):
    return BulkGradingOrchestrator(
        client=client,
        session_scope=session_scope,
        delay_seconds=1.0,
        sleep=sleep or AsyncMock(),
    )


class TestSchedule:
    def test_no_ungraded_submissions(self, db_session, assignment, session_scope, fake_client_factory):
        orchestrator = make_orchestrator(fake_client_factory([]), session_scope)
        assert orchestrator.schedule(db_session, assignment) is None
        assert db_session.query(BulkGradingJob).count() == 0

    def test_schedules_only_submitted(self, db_session, assignment, teacher, three_submissions,
                                      session_scope, fake_client_factory):
        three_submissions[0].status = SubmissionStatus.graded
        three_submissions[0].grade = 50
        three_submissions[0].graded_by = GradedBy.teacher
        db_session.commit()

        job = make_orchestrator(fake_client_factory([]), session_scope).schedule(
            db_session, assignment, requested_by=teacher)

        assert job.status == BulkJobStatus.pending
        assert job.scheduled_count == 2
        assert three_submissions[0].id not in job.submission_ids
        assert job.requested_by == teacher.id


class TestRun:
    @pytest.mark.asyncio
    async def test_failure_is_isolated(self, db_session, assignment, three_submissions,
                                       session_scope, fake_client_factory):
        client = fake_client_factory([
            "Grade: 81. Clarity: 40 points.",
            ExternalServiceError("rate limited"),
            "Grade: 67. Examples: 30 points.",
        ])
        orchestrator = make_orchestrator(client, session_scope)
        job = orchestrator.schedule(db_session, assignment)

        result = await orchestrator.run(job.id)

        assert result == {"processed": 2, "failed": 1}
        assert len(client.calls) == 3

        db_session.expire_all()
        by_id = {s.id: s for s in db_session.query(Submission).all()}
        first, second, third = (by_id[sid] for sid in job.submission_ids)
        assert first.status == SubmissionStatus.graded
        assert first.grade == 81
        assert second.status == SubmissionStatus.submitted
        assert second.grade is None
        assert third.status == SubmissionStatus.graded
        assert third.grade == 67
        assert third.graded_by == GradedBy.ai

        stored_job = db_session.get(BulkGradingJob, job.id)
        assert stored_job.status == BulkJobStatus.completed
        assert stored_job.processed_count == 2
        assert stored_job.failed_count == 1
        assert stored_job.finished_at is not None

    @pytest.mark.asyncio
    async def test_paced_between_calls(self, db_session, assignment, three_submissions,
                                       session_scope, fake_client_factory):
        sleep = AsyncMock()
        client = fake_client_factory(["Grade: 70"] * 3)
        orchestrator = make_orchestrator(client, session_scope, sleep=sleep)
        job = orchestrator.schedule(db_session, assignment)

        await orchestrator.run(job.id)

        # One pause between each pair of consecutive calls
        assert sleep.await_count == 2
        sleep.assert_awaited_with(1.0)

    @pytest.mark.asyncio
    async def test_unexpected_error_does_not_stop_job(self, db_session, assignment, three_submissions,
                                                      session_scope, fake_client_factory):
        client = fake_client_factory([RuntimeError("boom"), "Grade: 90", "Grade: 91"])
        orchestrator = make_orchestrator(client, session_scope)
        job = orchestrator.schedule(db_session, assignment)

        assert await orchestrator.run(job.id) == {"processed": 2, "failed": 1}

    @pytest.mark.asyncio
    async def test_deleted_submission_counts_as_failure(self, db_session, assignment, three_submissions,
                                                        session_scope, fake_client_factory):
        client = fake_client_factory(["Grade: 90", "Grade: 91"])
        orchestrator = make_orchestrator(client, session_scope)
        job = orchestrator.schedule(db_session, assignment)
        db_session.delete(db_session.get(Submission, job.submission_ids[0]))
        db_session.commit()

        assert await orchestrator.run(job.id) == {"processed": 2, "failed": 1}

    @pytest.mark.asyncio
    async def test_unknown_job_is_logged_not_raised(self, session_scope, fake_client_factory):
        orchestrator = make_orchestrator(fake_client_factory([]), session_scope)
        assert await orchestrator.run("missing") == {"processed": 0, "failed": 0}

    @pytest.mark.asyncio
    async def test_aborted_job_is_closed_as_failed(self, db_session, assignment, three_submissions,
                                                  session_scope, fake_client_factory):
        orchestrator = make_orchestrator(fake_client_factory([]), session_scope)
        job = orchestrator.schedule(db_session, assignment)

        # Fails after the job row has been marked running
        with patch("gradebook.grading.bulk.GradingService", side_effect=RuntimeError("db gone")):
            result = await orchestrator.run(job.id)

        assert result == {"processed": 0, "failed": 0}
        db_session.expire_all()
        stored_job = db_session.get(BulkGradingJob, job.id)
        assert stored_job.status == BulkJobStatus.failed
        assert stored_job.started_at is not None
        assert stored_job.finished_at is not None
        assert stored_job.is_finished
