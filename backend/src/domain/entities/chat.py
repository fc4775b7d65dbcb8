"""
Chat Domain Entity
The conversation thread bound to one application
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from ..enums import SenderRole


@dataclass(frozen=True)
class ChatMessage:
    sender_id: UUID
    sender_role: SenderRole
    message: str
    timestamp: datetime
    is_read: bool = False


@dataclass
class Chat:
    """One chat per application"""

    id: UUID
    application_id: UUID
    talent_user_id: UUID
    company_user_id: UUID
    messages: List[ChatMessage] = field(default_factory=list)
    last_message: Optional[str] = None
    last_message_time: Optional[datetime] = None
    talent_unread_count: int = 0
    company_unread_count: int = 0
    created_at: datetime = None
    updated_at: datetime = None

    def __str__(self) -> str:
        return f"Chat({self.id}, application={self.application_id})"
