"""Assignment endpoints."""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..access import ensure_course_member, ensure_course_teacher, get_assignment, get_course
from ..auth import get_current_active_user
from ..database import get_db
from ..models import Assignment, User
from ..schemas import AssignmentCreate, AssignmentResponse, AssignmentUpdate

router = APIRouter(prefix="/assignments", tags=["Assignments"])


@router.post("", response_model=AssignmentResponse, status_code=status.HTTP_201_CREATED)
async def create_assignment(
    assignment_data: AssignmentCreate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Create an assignment in a course the caller teaches."""
    course = get_course(db, assignment_data.course_id)
    ensure_course_teacher(current_user, course, "create assignments for this course")

    assignment = Assignment(
        course_id=course.id,
        title=assignment_data.title,
        description=assignment_data.description,
        due_date=assignment_data.due_date,
        total_points=assignment_data.total_points,
        rubric=[item.model_dump() for item in assignment_data.rubric],
        ai_grading_enabled=assignment_data.ai_grading_enabled,
    )
    db.add(assignment)
    db.commit()
    db.refresh(assignment)
    return assignment


@router.get("/course/{course_id}", response_model=List[AssignmentResponse])
async def list_course_assignments(
    course_id: str,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    course = get_course(db, course_id)
    ensure_course_member(current_user, course)
    return db.query(Assignment).filter(Assignment.course_id == course.id).order_by(Assignment.due_date).all()


@router.get("/{assignment_id}", response_model=AssignmentResponse)
async def get_assignment_by_id(
    assignment_id: str,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    assignment = get_assignment(db, assignment_id)
    ensure_course_member(current_user, assignment.course)
    return assignment


@router.put("/{assignment_id}", response_model=AssignmentResponse)
async def update_assignment(
    assignment_id: str,
    assignment_data: AssignmentUpdate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Update an assignment. Existing grades are left as they are."""
    assignment = get_assignment(db, assignment_id)
    ensure_course_teacher(current_user, assignment.course, "update this assignment")

    updates = assignment_data.model_dump(exclude_unset=True)
    if "rubric" in updates and updates["rubric"] is not None:
        updates["rubric"] = [item.model_dump() for item in assignment_data.rubric]
    for field, value in updates.items():
        if value is not None:
            setattr(assignment, field, value)

    db.commit()
    db.refresh(assignment)
    return assignment


@router.delete("/{assignment_id}")
async def delete_assignment(
    assignment_id: str,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Delete an assignment together with its submissions."""
    assignment = get_assignment(db, assignment_id)
    ensure_course_teacher(current_user, assignment.course, "delete this assignment")

    db.delete(assignment)
    db.commit()
    return {"msg": "Assignment deleted"}
