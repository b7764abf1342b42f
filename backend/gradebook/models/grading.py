"""Bulk grading job model."""

import uuid

from sqlalchemy import Column, DateTime, Enum as SQLEnum, ForeignKey, Integer, JSON, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base
from .enums import BulkJobStatus


class BulkGradingJob(Base):
    """Status record for a background bulk grading run."""
    __tablename__ = "bulk_grading_jobs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    assignment_id = Column(String(36), ForeignKey("assignments.id", ondelete="CASCADE"), nullable=False)
    requested_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    submission_ids = Column(JSON, nullable=False, default=list)
    status = Column(SQLEnum(BulkJobStatus), nullable=False, default=BulkJobStatus.pending)
    processed_count = Column(Integer, nullable=False, default=0)
    failed_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    started_at = Column(DateTime(timezone=True), nullable=True)
    finished_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    assignment = relationship("Assignment")

    def __repr__(self):
        return f"<BulkGradingJob(id={self.id}, status={self.status.value if self.status else None})>"

    @property
    def scheduled_count(self):
        return len(self.submission_ids or [])

    @property
    def is_finished(self):
        return self.status in (BulkJobStatus.completed, BulkJobStatus.failed)
