"""AI grading endpoints."""
from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from ..access import ensure_course_teacher, get_assignment
from ..auth import get_current_active_user
from ..database import get_db
from ..dependencies import get_bulk_orchestrator, get_grading_service
from ..errors import AuthorizationError, NotFoundError
from ..grading import BulkGradingOrchestrator, GradingService
from ..models import BulkGradingJob, User
from ..schemas import AIGradeResponse, BulkGradeResponse, BulkJobResponse, FeedbackResponse, SubmissionResponse

router = APIRouter(prefix="/ai", tags=["AI Grading"])


def require_grader(current_user: User = Depends(get_current_active_user)) -> User:
    """Only teachers and admins may use AI grading."""
    if not (current_user.is_teacher or current_user.is_admin):
        raise AuthorizationError("Not authorized to use AI grading")
    return current_user


@router.post("/grade-submission/{submission_id}", response_model=AIGradeResponse)
async def grade_submission_with_ai(
    submission_id: str,
    current_user: User = Depends(require_grader),
    service: GradingService = Depends(get_grading_service),
):
    """Grade one submission with the model and store the result."""
    submission, raw = await service.grade_with_ai(current_user, submission_id)
    return AIGradeResponse(
        submission=SubmissionResponse.model_validate(submission),
        ai_grading_result=raw,
    )


@router.post("/bulk-grade/{assignment_id}", response_model=BulkGradeResponse)
async def bulk_grade_assignment(
    assignment_id: str,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(require_grader),
    db: Session = Depends(get_db),
    orchestrator: BulkGradingOrchestrator = Depends(get_bulk_orchestrator),
):
    """Start grading every ungraded submission; returns before grading begins."""
    assignment = get_assignment(db, assignment_id)
    ensure_course_teacher(current_user, assignment.course, "grade for this assignment")

    job = orchestrator.schedule(db, assignment, requested_by=current_user)
    if job is None:
        return BulkGradeResponse(msg="No ungraded submissions found", submission_count=0)

    background_tasks.add_task(orchestrator.run, job.id)
    return BulkGradeResponse(
        msg=f"Started bulk grading {job.scheduled_count} submissions. This may take some time.",
        submission_count=job.scheduled_count,
        job_id=job.id,
    )


@router.get("/bulk-grade/jobs/{job_id}", response_model=BulkJobResponse)
async def get_bulk_grading_job(
    job_id: str,
    current_user: User = Depends(require_grader),
    db: Session = Depends(get_db),
):
    job = db.get(BulkGradingJob, job_id)
    if job is None:
        raise NotFoundError("Bulk grading job")
    ensure_course_teacher(current_user, job.assignment.course, "view this job")
    return job


@router.post("/feedback/{submission_id}", response_model=FeedbackResponse)
async def generate_personalized_feedback(
    submission_id: str,
    current_user: User = Depends(require_grader),
    service: GradingService = Depends(get_grading_service),
):
    """Generate personalized feedback without changing the stored grade."""
    return await service.generate_feedback(current_user, submission_id)
