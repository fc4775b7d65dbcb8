"""
Company ORM Model
"""
import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid

from core.database import Base


class CompanyModel(Base):
    """Company profile table"""

    __tablename__ = "companies"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"),
        unique=True, nullable=False, index=True
    )
    company_name = Column(String(255), nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<CompanyModel {self.company_name}>"
