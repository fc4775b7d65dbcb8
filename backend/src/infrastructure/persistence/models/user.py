"""
User ORM Model
SQLAlchemy model for accounts
"""
import uuid
from sqlalchemy import Column, String, Boolean, DateTime, Uuid

from core.database import Base


class UserModel(Base):
    """User table ORM model"""

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    full_name = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<UserModel {self.email} ({self.role})>"
