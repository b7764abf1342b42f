"""Course endpoints: creation and enrollment by join code."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..access import ensure_course_member, get_course
from ..auth import get_current_active_user
from ..database import get_db
from ..errors import AuthorizationError, NotFoundError, ValidationError
from ..models import Course, User
from ..schemas import CourseCreate, CourseJoin, CourseResponse

router = APIRouter(prefix="/courses", tags=["Courses"])


@router.post("", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
async def create_course(
    course_data: CourseCreate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Create a course owned by the calling teacher."""
    if not current_user.is_teacher:
        raise AuthorizationError("Only teachers can create courses")

    course = Course(
        title=course_data.title,
        description=course_data.description,
        teacher_id=current_user.id,
    )
    db.add(course)
    db.commit()
    db.refresh(course)
    return course


@router.get("/{course_id}", response_model=CourseResponse)
async def get_course_by_id(
    course_id: str,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    course = get_course(db, course_id)
    ensure_course_member(current_user, course)
    return course


@router.post("/join", response_model=CourseResponse)
async def join_course(
    join_data: CourseJoin,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Enroll the calling student using a course join code."""
    if not current_user.is_student:
        raise AuthorizationError("Only students can join courses")

    course = db.query(Course).filter(Course.code == join_data.code.strip().upper()).first()
    if course is None:
        raise NotFoundError("Course", "Invalid course code")
    if course.is_enrolled(current_user):
        raise ValidationError("Already enrolled")

    course.students.append(current_user)
    db.commit()
    db.refresh(course)
    return course
