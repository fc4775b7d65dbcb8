"""
Chat-Room Bootstrapper
Ensures exactly one chat exists per application
"""
import uuid
from typing import Optional

from application.repositories.interfaces import (
    IChatRepository,
    ICompanyRepository,
    ITalentRepository,
)
from domain.entities import Application, Chat, ChatMessage
from domain.enums import SenderRole
from domain.value_objects import OperationResult
from core.clock import Clock, utc_now
from core.logging_config import logger


class ChatBootstrapper:
    """Creates the chat for a new application

    Best effort: every failure comes back as a failed OperationResult and
    is never raised into application creation.
    """

    def __init__(
        self,
        chat_repo: IChatRepository,
        talent_repo: ITalentRepository,
        company_repo: ICompanyRepository,
        seed_greeting: bool = False,
        greeting_message: Optional[str] = None,
        clock: Clock = utc_now,
    ):
        self.chat_repo = chat_repo
        self.talent_repo = talent_repo
        self.company_repo = company_repo
        self.seed_greeting = seed_greeting
        self.greeting_message = greeting_message
        self.clock = clock

    async def ensure_chat(self, application: Application) -> OperationResult[Chat]:
        try:
            existing = await self.chat_repo.get_by_application_id(application.id)
            if existing is not None:
                return OperationResult.success(existing)

            talent = await self.talent_repo.get_by_id(application.talent_id)
            company = await self.company_repo.get_by_id(application.company_id)
            if talent is None or company is None:
                return OperationResult.failure(
                    f"Missing participants for application {application.id}"
                )

            chat = self._new_chat(application, talent.user_id, company.user_id)
            chat = await self.chat_repo.create_if_absent(chat)
            logger.info(f"Chat {chat.id} ready for application {application.id}")
            return OperationResult.success(chat)

        except Exception as e:
            logger.error(f"Chat bootstrap failed for application {application.id}: {e}")
            return OperationResult.failure(str(e))

    def _new_chat(self, application: Application, talent_user_id, company_user_id) -> Chat:
        now = self.clock()
        chat = Chat(
            id=uuid.uuid4(),
            application_id=application.id,
            talent_user_id=talent_user_id,
            company_user_id=company_user_id,
            created_at=now,
            updated_at=now,
        )

        if self.seed_greeting and self.greeting_message:
            chat.messages.append(
                ChatMessage(
                    sender_id=talent_user_id,
                    sender_role=SenderRole.TALENT,
                    message=self.greeting_message,
                    timestamp=now,
                )
            )
            chat.last_message = self.greeting_message
            chat.last_message_time = now
            chat.company_unread_count = 1

        return chat
