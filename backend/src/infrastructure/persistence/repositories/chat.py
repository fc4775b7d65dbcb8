"""
Chat Repository Implementation
"""
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from domain.entities import Chat, ChatMessage
from domain.enums import SenderRole
from application.repositories.interfaces import IChatRepository
from infrastructure.persistence.models.chat import ChatModel, ChatMessageModel
from core.clock import ensure_utc
from core.exceptions import RepositoryException


class SQLAlchemyChatRepository(IChatRepository):
    """SQLAlchemy implementation of chat repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_application_id(self, application_id: UUID) -> Optional[Chat]:
        result = await self.session.execute(
            select(ChatModel)
            .where(ChatModel.application_id == application_id)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create_if_absent(self, chat: Chat) -> Chat:
        """Insert inside a savepoint so a lost race leaves the outer transaction usable"""
        model = self._to_model(chat)
        try:
            async with self.session.begin_nested():
                self.session.add(model)
                await self.session.flush()
        except IntegrityError:
            # Unique application_id: another request created it first
            existing = await self.get_by_application_id(chat.application_id)
            if existing is None:
                raise RepositoryException(
                    f"Chat insert failed for application {chat.application_id}"
                )
            logger.info(f"Chat for application {chat.application_id} already existed, reusing it")
            return existing

        return self._to_entity(model)

    def _to_model(self, chat: Chat) -> ChatModel:
        return ChatModel(
            id=chat.id,
            application_id=chat.application_id,
            talent_user_id=chat.talent_user_id,
            company_user_id=chat.company_user_id,
            last_message=chat.last_message,
            last_message_time=chat.last_message_time,
            talent_unread_count=chat.talent_unread_count,
            company_unread_count=chat.company_unread_count,
            created_at=chat.created_at,
            updated_at=chat.updated_at,
            messages=[
                ChatMessageModel(
                    chat_id=chat.id,
                    position=position,
                    sender_id=m.sender_id,
                    sender_role=m.sender_role.value,
                    message=m.message,
                    timestamp=m.timestamp,
                    is_read=m.is_read,
                )
                for position, m in enumerate(chat.messages)
            ],
        )

    def _to_entity(self, model: ChatModel) -> Chat:
        return Chat(
            id=model.id,
            application_id=model.application_id,
            talent_user_id=model.talent_user_id,
            company_user_id=model.company_user_id,
            messages=[
                ChatMessage(
                    sender_id=m.sender_id,
                    sender_role=SenderRole(m.sender_role),
                    message=m.message,
                    timestamp=ensure_utc(m.timestamp),
                    is_read=m.is_read,
                )
                for m in model.messages
            ],
            last_message=model.last_message,
            last_message_time=ensure_utc(model.last_message_time),
            talent_unread_count=model.talent_unread_count,
            company_unread_count=model.company_unread_count,
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )
