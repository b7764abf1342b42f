"""Submission model."""

import uuid

from sqlalchemy import Column, DateTime, Enum as SQLEnum, Float, ForeignKey, JSON, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base
from .enums import GradedBy, SubmissionStatus


class Submission(Base):
    """A student's submission for an assignment.

    Grading fields (grade, feedback, rubric_grades, graded_by, graded_at,
    status) are only written together by the transitions in
    :mod:`gradebook.grading.state`.
    """
    __tablename__ = "submissions"
    __table_args__ = (
        UniqueConstraint("assignment_id", "student_id", name="uq_submission_assignment_student"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    assignment_id = Column(String(36), ForeignKey("assignments.id", ondelete="CASCADE"), nullable=False)
    student_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    content = Column(Text, nullable=False)
    submitted_at = Column(DateTime(timezone=True), server_default=func.now())
    grade = Column(Float, nullable=True)
    feedback = Column(Text, nullable=False, default="")
    graded_by = Column(SQLEnum(GradedBy), nullable=False, default=GradedBy.none)
    graded_at = Column(DateTime(timezone=True), nullable=True)
    status = Column(SQLEnum(SubmissionStatus), nullable=False, default=SubmissionStatus.submitted)
    rubric_grades = Column(JSON, nullable=False, default=list)

    # Relationships
    assignment = relationship("Assignment", back_populates="submissions")
    student = relationship("User", back_populates="submissions")

    def __repr__(self):
        return f"<Submission(id={self.id}, status={self.status.value if self.status else None})>"
