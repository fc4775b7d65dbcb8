"""
Tests for chat bootstrap on application creation
"""
from datetime import datetime, timezone
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from application.services.chat.bootstrapper import ChatBootstrapper
from domain.entities import Application, Chat, Company, Talent
from domain.enums import SenderRole
from domain.value_objects import ApplicationStatus
from infrastructure.persistence.repositories.chat import SQLAlchemyChatRepository
from infrastructure.persistence.repositories.company import SQLAlchemyCompanyRepository
from infrastructure.persistence.repositories.talent import SQLAlchemyTalentRepository

from conftest import insert_application

NOW = datetime(2026, 5, 1, 8, 30, tzinfo=timezone.utc)


@pytest.fixture
def application():
    return Application(
        id=uuid4(),
        talent_id=uuid4(),
        job_id=uuid4(),
        company_id=uuid4(),
        status=ApplicationStatus.PENDING,
        created_at=NOW,
        updated_at=NOW,
    )


@pytest.fixture
def repos(application):
    talent_user_id = uuid4()
    company_user_id = uuid4()

    chat_repo = AsyncMock()
    chat_repo.get_by_application_id.return_value = None
    chat_repo.create_if_absent.side_effect = lambda chat: chat

    talent_repo = AsyncMock()
    talent_repo.get_by_id.return_value = Talent(id=application.talent_id, user_id=talent_user_id, name="Dewi")

    company_repo = AsyncMock()
    company_repo.get_by_id.return_value = Company(
        id=application.company_id, user_id=company_user_id, company_name="Acme"
    )
    return chat_repo, talent_repo, company_repo


class TestChatBootstrapper:
    """Test suite for ChatBootstrapper.ensure_chat"""

    @pytest.mark.asyncio
    async def test_creates_empty_chat(self, application, repos):
        chat_repo, talent_repo, company_repo = repos
        bootstrapper = ChatBootstrapper(chat_repo, talent_repo, company_repo, clock=lambda: NOW)

        result = await bootstrapper.ensure_chat(application)

        assert result.ok
        chat = result.value
        assert chat.application_id == application.id
        assert chat.talent_user_id == talent_repo.get_by_id.return_value.user_id
        assert chat.company_user_id == company_repo.get_by_id.return_value.user_id
        assert chat.messages == []
        assert chat.talent_unread_count == 0
        assert chat.company_unread_count == 0
        chat_repo.create_if_absent.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_seeds_greeting(self, application, repos):
        chat_repo, talent_repo, company_repo = repos
        bootstrapper = ChatBootstrapper(
            chat_repo, talent_repo, company_repo,
            seed_greeting=True,
            greeting_message="Hi, I just applied!",
            clock=lambda: NOW,
        )

        chat = (await bootstrapper.ensure_chat(application)).value

        assert len(chat.messages) == 1
        assert chat.messages[0].sender_role == SenderRole.TALENT
        assert chat.messages[0].message == "Hi, I just applied!"
        assert chat.last_message == "Hi, I just applied!"
        assert chat.last_message_time == NOW
        assert chat.company_unread_count == 1
        assert chat.talent_unread_count == 0

    @pytest.mark.asyncio
    async def test_existing_chat_returned(self, application, repos):
        chat_repo, talent_repo, company_repo = repos
        existing = Chat(
            id=uuid4(),
            application_id=application.id,
            talent_user_id=uuid4(),
            company_user_id=uuid4(),
        )
        chat_repo.get_by_application_id.return_value = existing

        result = await ChatBootstrapper(chat_repo, talent_repo, company_repo).ensure_chat(application)

        assert result.value is existing
        chat_repo.create_if_absent.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_company_is_failure(self, application, repos):
        chat_repo, talent_repo, company_repo = repos
        company_repo.get_by_id.return_value = None

        result = await ChatBootstrapper(chat_repo, talent_repo, company_repo).ensure_chat(application)

        assert not result.ok
        chat_repo.create_if_absent.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_repository_error_is_not_raised(self, application, repos):
        chat_repo, talent_repo, company_repo = repos
        chat_repo.create_if_absent.side_effect = RuntimeError("database unavailable")

        result = await ChatBootstrapper(chat_repo, talent_repo, company_repo).ensure_chat(application)

        assert not result.ok
        assert "database unavailable" in result.error


class TestChatBootstrapperPersistence:
    """ensure_chat against the database"""

    @pytest.mark.asyncio
    async def test_second_call_reuses_chat(self, session, marketplace):
        application = await insert_application(
            session, marketplace.talent, marketplace.job_id, marketplace.company.company_id
        )
        bootstrapper = ChatBootstrapper(
            SQLAlchemyChatRepository(session),
            SQLAlchemyTalentRepository(session),
            SQLAlchemyCompanyRepository(session),
            seed_greeting=True,
            greeting_message="Hello!",
        )

        first = await bootstrapper.ensure_chat(application)
        await session.commit()
        second = await bootstrapper.ensure_chat(application)

        assert first.ok and second.ok
        assert first.value.id == second.value.id
        assert len(second.value.messages) == 1
        assert second.value.talent_user_id == marketplace.talent.user_id
        assert second.value.company_user_id == marketplace.company.user_id
