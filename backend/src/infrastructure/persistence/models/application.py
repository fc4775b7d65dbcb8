"""
Application ORM Models
Job applications and their status history
"""
import uuid
from sqlalchemy import (
    Column, String, Integer, Boolean, DateTime, Text, JSON,
    ForeignKey, UniqueConstraint, Uuid
)
from sqlalchemy.orm import relationship

from core.database import Base


class ApplicationModel(Base):
    """Job application table ORM model"""

    __tablename__ = "applications"
    __table_args__ = (
        # Cross-process backstop for one application per talent and job
        UniqueConstraint("talent_id", "job_id", name="uq_applications_talent_job"),
    )

    # Primary Key
    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)

    # Foreign Keys
    talent_id = Column(Uuid, ForeignKey("talents.id", ondelete="CASCADE"), nullable=False, index=True)
    job_id = Column(Uuid, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    company_id = Column(Uuid, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)

    # Status
    status = Column(String(20), nullable=False, default="pending", index=True)

    # Applicant form snapshot
    applicant_full_name = Column(String(255), nullable=False)
    applicant_email = Column(String(255), nullable=False)
    applicant_phone = Column(String(50), nullable=False)
    experience_years = Column(Integer, nullable=True)
    skills = Column(JSON, nullable=False, default=list)
    cover_letter = Column(Text, nullable=True)

    # Resume
    resume_url = Column(String(500), nullable=True)
    resume_file_name = Column(String(255), nullable=True)
    resume_file_size = Column(Integer, nullable=True)
    resume_file_type = Column(String(100), nullable=True)
    file_deleted = Column(Boolean, nullable=False, default=False)
    file_deleted_at = Column(DateTime(timezone=True), nullable=True)
    file_deleted_by = Column(Uuid, nullable=True)

    # Company-authored
    notes = Column(Text, nullable=True)
    feedback = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False)
    reviewed_at = Column(DateTime(timezone=True), nullable=True, index=True)
    interview_scheduled_at = Column(DateTime(timezone=True), nullable=True)

    # Optimistic concurrency token
    version = Column(Integer, nullable=False, default=1)

    history = relationship(
        "ApplicationStatusHistoryModel",
        order_by="ApplicationStatusHistoryModel.position",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    def __repr__(self):
        return f"<ApplicationModel {self.id} - {self.status}>"


class ApplicationStatusHistoryModel(Base):
    """Append-only status history rows"""

    __tablename__ = "application_status_history"
    __table_args__ = (
        UniqueConstraint("application_id", "position", name="uq_status_history_position"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    application_id = Column(
        Uuid, ForeignKey("applications.id", ondelete="CASCADE"),
        nullable=False, index=True
    )
    position = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False)
    changed_at = Column(DateTime(timezone=True), nullable=False)
    changed_by = Column(Uuid, nullable=True)
    notes = Column(Text, nullable=True)

    def __repr__(self):
        return f"<ApplicationStatusHistoryModel {self.application_id}#{self.position} {self.status}>"
