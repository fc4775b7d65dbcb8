"""
Job ORM Model
SQLAlchemy model for job postings
"""
import uuid
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, Uuid

from core.database import Base


class JobModel(Base):
    """Job posting table ORM model"""

    __tablename__ = "jobs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    company_id = Column(
        Uuid, ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False, index=True
    )
    title = Column(String(255), nullable=False)
    location = Column(String(255), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    application_deadline = Column(DateTime(timezone=True), nullable=True)
    applications_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<JobModel {self.title}>"
