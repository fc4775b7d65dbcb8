"""
Chat Schemas
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from domain.entities import Chat

from .common import CamelModel


class ChatMessageItem(CamelModel):
    sender_id: UUID
    sender_role: str
    message: str
    timestamp: datetime
    is_read: bool = False


class ChatResponse(CamelModel):
    id: UUID
    application_id: UUID
    talent_user_id: UUID
    company_user_id: UUID
    messages: List[ChatMessageItem] = Field(default_factory=list)
    last_message: Optional[str] = None
    last_message_time: Optional[datetime] = None
    talent_unread_count: int = 0
    company_unread_count: int = 0
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, chat: Chat) -> "ChatResponse":
        return cls(
            id=chat.id,
            application_id=chat.application_id,
            talent_user_id=chat.talent_user_id,
            company_user_id=chat.company_user_id,
            messages=[
                ChatMessageItem(
                    sender_id=m.sender_id,
                    sender_role=m.sender_role.value,
                    message=m.message,
                    timestamp=m.timestamp,
                    is_read=m.is_read,
                )
                for m in chat.messages
            ],
            last_message=chat.last_message,
            last_message_time=chat.last_message_time,
            talent_unread_count=chat.talent_unread_count,
            company_unread_count=chat.company_unread_count,
            created_at=chat.created_at,
        )
