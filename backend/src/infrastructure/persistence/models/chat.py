"""
Chat ORM Models
One chat per application, messages kept in insertion order
"""
import uuid
from sqlalchemy import Column, String, Integer, Boolean, DateTime, Text, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from core.database import Base


class ChatModel(Base):
    """Chat table ORM model"""

    __tablename__ = "chats"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    application_id = Column(
        Uuid, ForeignKey("applications.id", ondelete="CASCADE"),
        unique=True, nullable=False, index=True
    )
    talent_user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    company_user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    last_message = Column(Text, nullable=True)
    last_message_time = Column(DateTime(timezone=True), nullable=True)
    talent_unread_count = Column(Integer, nullable=False, default=0)
    company_unread_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    messages = relationship(
        "ChatMessageModel",
        order_by="ChatMessageModel.position",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    def __repr__(self):
        return f"<ChatModel {self.id} application={self.application_id}>"


class ChatMessageModel(Base):
    """Chat message rows"""

    __tablename__ = "chat_messages"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    chat_id = Column(Uuid, ForeignKey("chats.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    sender_id = Column(Uuid, nullable=False)
    sender_role = Column(String(20), nullable=False)
    message = Column(Text, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
