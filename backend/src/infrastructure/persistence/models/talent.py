"""
Talent ORM Model
"""
import uuid
from sqlalchemy import Column, String, Integer, DateTime, JSON, ForeignKey, Uuid

from core.database import Base


class TalentModel(Base):
    """Talent profile table"""

    __tablename__ = "talents"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"),
        unique=True, nullable=False, index=True
    )
    name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    experience = Column(Integer, nullable=True)
    skills = Column(JSON, nullable=False, default=list)
    resume_url = Column(String(500), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<TalentModel {self.name}>"
