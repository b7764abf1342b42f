"""Pydantic request/response schemas for the HTTP API."""
from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from .grading.extractor import RubricGrade
from .models import BulkJobStatus, GradedBy, RubricItem, SubmissionStatus, validate_rubric


def _check_rubric(rubric: List[RubricItem]) -> List[RubricItem]:
    is_valid, message = validate_rubric([item.model_dump() for item in rubric])
    if not is_valid:
        raise ValueError(message)
    return rubric


Rubric = Annotated[List[RubricItem], AfterValidator(_check_rubric)]


class CourseCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = ""


class CourseJoin(BaseModel):
    code: str = Field(..., min_length=1)


class CourseResponse(BaseModel):
    id: str
    title: str
    description: Optional[str]
    code: str
    teacher_id: str

    model_config = ConfigDict(from_attributes=True)


class AssignmentCreate(BaseModel):
    course_id: str
    title: str = Field(..., min_length=1)
    description: str = ""
    due_date: datetime
    total_points: float = Field(..., gt=0)
    rubric: Rubric = Field(default_factory=list)
    ai_grading_enabled: bool = True


class AssignmentUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    total_points: Optional[float] = Field(default=None, gt=0)
    rubric: Optional[Rubric] = None
    ai_grading_enabled: Optional[bool] = None


class AssignmentResponse(BaseModel):
    id: str
    course_id: str
    title: str
    description: str
    due_date: datetime
    total_points: float
    rubric: List[RubricItem]
    ai_grading_enabled: bool

    model_config = ConfigDict(from_attributes=True)


class SubmissionCreate(BaseModel):
    assignment_id: str
    content: str


class SubmissionResponse(BaseModel):
    id: str
    assignment_id: str
    student_id: str
    content: str
    submitted_at: Optional[datetime]
    grade: Optional[float]
    feedback: str
    graded_by: GradedBy
    graded_at: Optional[datetime]
    status: SubmissionStatus
    rubric_grades: List[RubricGrade]

    model_config = ConfigDict(from_attributes=True)


class TeacherGradeRequest(BaseModel):
    grade: float
    feedback: str
    rubric_grades: Optional[List[RubricGrade]] = None


class AIGradeResponse(BaseModel):
    submission: SubmissionResponse
    ai_grading_result: str


class BulkGradeResponse(BaseModel):
    msg: str
    submission_count: int
    job_id: Optional[str] = None


class BulkJobResponse(BaseModel):
    id: str
    assignment_id: str
    status: BulkJobStatus
    scheduled_count: int
    processed_count: int
    failed_count: int
    started_at: Optional[datetime]
    finished_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)


class FeedbackResponse(BaseModel):
    original_feedback: str
    personalized_feedback: str
