"""Submission endpoints: student submit and teacher grading."""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import get_current_active_user
from ..database import get_db
from ..grading import GradingService
from ..models import User
from ..schemas import SubmissionCreate, SubmissionResponse, TeacherGradeRequest

router = APIRouter(prefix="/submissions", tags=["Submissions"])


def get_submission_service(db: Session = Depends(get_db)) -> GradingService:
    """Grading service without a completion client; none of these routes call the model."""
    return GradingService(db)


@router.post("", response_model=SubmissionResponse)
async def create_submission(
    submission_data: SubmissionCreate,
    current_user: User = Depends(get_current_active_user),
    service: GradingService = Depends(get_submission_service),
):
    """Submit work for an open assignment."""
    return service.submit(current_user, submission_data.assignment_id, submission_data.content)


@router.get("/assignment/{assignment_id}", response_model=List[SubmissionResponse])
async def list_assignment_submissions(
    assignment_id: str,
    current_user: User = Depends(get_current_active_user),
    service: GradingService = Depends(get_submission_service),
):
    return service.list_submissions(current_user, assignment_id)


@router.get("/{submission_id}", response_model=SubmissionResponse)
async def get_submission_by_id(
    submission_id: str,
    current_user: User = Depends(get_current_active_user),
    service: GradingService = Depends(get_submission_service),
):
    return service.view_submission(current_user, submission_id)


@router.put("/{submission_id}/grade", response_model=SubmissionResponse)
async def grade_submission(
    submission_id: str,
    grade_data: TeacherGradeRequest,
    current_user: User = Depends(get_current_active_user),
    service: GradingService = Depends(get_submission_service),
):
    """Record a teacher's grade; rejected above the assignment's total points."""
    return service.grade_by_teacher(
        current_user,
        submission_id,
        grade=grade_data.grade,
        feedback=grade_data.feedback,
        rubric_grades=grade_data.rubric_grades,
    )
