"""Assignment model."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, JSON, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base


class Assignment(Base):
    """Assignment model.

    `rubric` is an ordered JSON list of ``{"criteria", "weight", "description"}``
    objects; order is significant for AI rubric extraction.
    """
    __tablename__ = "assignments"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    course_id = Column(String(36), ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    due_date = Column(DateTime(timezone=True), nullable=False)
    total_points = Column(Float, nullable=False)
    rubric = Column(JSON, nullable=False, default=list)
    ai_grading_enabled = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    course = relationship("Course", back_populates="assignments")
    submissions = relationship(
        "Submission",
        back_populates="assignment",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<Assignment(id={self.id}, title='{self.title}')>"

    def get_criterion_by_name(self, name: str):
        """Get a specific rubric item by its label."""
        for item in self.rubric or []:
            if item.get('criteria') == name:
                return item
        return None
