"""
Shared test fixtures
Each test gets a freshly created SQLite schema (aiosqlite) and its own upload directory
"""
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional
from uuid import UUID, uuid4

_TEST_ROOT = Path(tempfile.mkdtemp(prefix="talentmarket-tests-"))

# Must be set before core.config is imported
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_ROOT / 'test.db'}"
os.environ["UPLOAD_DIR"] = str(_TEST_ROOT / "uploads")
os.environ["LOG_TO_FILE"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["ENVIRONMENT"] = "test"
os.environ["CLEANUP_SCHEDULER_ENABLED"] = "false"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"

import pytest
import pytest_asyncio

from core.clock import utc_now
from core.database import AsyncSessionLocal, Base, engine
from domain.entities import Application, Company, Job, StatusHistoryEntry, Talent, User
from domain.enums import UserRole
from domain.value_objects import Actor, ApplicationStatus, Email
from application.services.applications.lifecycle import ApplicationLifecycleService, ApplyCommand
from application.services.applications.locks import KeyedLock
from application.services.chat.bootstrapper import ChatBootstrapper
from infrastructure.persistence import models  # noqa: F401  (registers tables)
from infrastructure.persistence.repositories.application import SQLAlchemyApplicationRepository
from infrastructure.persistence.repositories.chat import SQLAlchemyChatRepository
from infrastructure.persistence.repositories.company import SQLAlchemyCompanyRepository
from infrastructure.persistence.repositories.job import SQLAlchemyJobRepository
from infrastructure.persistence.repositories.talent import SQLAlchemyTalentRepository
from infrastructure.persistence.repositories.user import SQLAlchemyUserRepository
from infrastructure.storage.local_file_store import LocalFileStore


@dataclass
class Marketplace:
    """Seeded users, profiles and one open job"""

    talent: Actor
    other_talent: Actor
    company: Actor
    other_company: Actor
    admin: Actor
    job_id: UUID


@pytest_asyncio.fixture
async def database():
    """Recreate all tables for the test"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(database):
    async with AsyncSessionLocal() as db_session:
        yield db_session


@pytest.fixture
def file_store(tmp_path) -> LocalFileStore:
    return LocalFileStore(base_path=str(tmp_path / "uploads"))


async def _create_user(session, role: UserRole, name: str) -> User:
    return await SQLAlchemyUserRepository(session).create(
        User(id=uuid4(), email=Email(f"{name}-{uuid4().hex[:6]}@example.com"), full_name=name, role=role)
    )


async def _create_talent_actor(session, name: str) -> Actor:
    user = await _create_user(session, UserRole.TALENT, name)
    talent = await SQLAlchemyTalentRepository(session).create(
        Talent(id=uuid4(), user_id=user.id, name=name, phone="+620000000", skills=["python"])
    )
    return Actor(user_id=user.id, role=UserRole.TALENT, talent_id=talent.id)


async def _create_company_actor(session, name: str) -> Actor:
    user = await _create_user(session, UserRole.COMPANY, name)
    company = await SQLAlchemyCompanyRepository(session).create(
        Company(id=uuid4(), user_id=user.id, company_name=f"{name} Ltd")
    )
    return Actor(user_id=user.id, role=UserRole.COMPANY, company_id=company.id)


async def create_job(session, company_id: UUID, **overrides) -> Job:
    fields = dict(id=uuid4(), company_id=company_id, title="Backend Engineer", location="Jakarta")
    fields.update(overrides)
    return await SQLAlchemyJobRepository(session).create(Job(**fields))


@pytest_asyncio.fixture
async def marketplace(session) -> Marketplace:
    talent = await _create_talent_actor(session, "talent")
    other_talent = await _create_talent_actor(session, "other-talent")
    company = await _create_company_actor(session, "acme")
    other_company = await _create_company_actor(session, "globex")
    admin_user = await _create_user(session, UserRole.ADMIN, "admin")
    job = await create_job(session, company.company_id)
    await session.commit()

    return Marketplace(
        talent=talent,
        other_talent=other_talent,
        company=company,
        other_company=other_company,
        admin=Actor(user_id=admin_user.id, role=UserRole.ADMIN),
        job_id=job.id,
    )


def build_lifecycle(
    session,
    file_store,
    locks: Optional[KeyedLock] = None,
    seed_greeting: bool = False,
) -> ApplicationLifecycleService:
    talent_repo = SQLAlchemyTalentRepository(session)
    bootstrapper = ChatBootstrapper(
        SQLAlchemyChatRepository(session),
        talent_repo,
        SQLAlchemyCompanyRepository(session),
        seed_greeting=seed_greeting,
        greeting_message="Hello!",
    )
    kwargs = {"locks": locks} if locks is not None else {}
    return ApplicationLifecycleService(
        session,
        SQLAlchemyApplicationRepository(session),
        SQLAlchemyJobRepository(session),
        talent_repo,
        bootstrapper,
        file_store,
        **kwargs,
    )


def apply_command(job_id: UUID, **overrides) -> ApplyCommand:
    fields = dict(
        job_id=job_id,
        full_name="Dewi Lestari",
        email="dewi@example.com",
        phone="+62811111111",
        cover_letter="I would love to join.",
        experience_years=3,
        skills=["python", "sql"],
    )
    fields.update(overrides)
    return ApplyCommand(**fields)


async def insert_application(
    session,
    talent: Actor,
    job_id: UUID,
    company_id: UUID,
    status: ApplicationStatus = ApplicationStatus.PENDING,
    created_at: Optional[datetime] = None,
    reviewed_at: Optional[datetime] = None,
    resume_url: Optional[str] = None,
) -> Application:
    """Write an application directly, bypassing the lifecycle, with chosen timestamps"""
    created_at = created_at or utc_now()
    application = Application(
        id=uuid4(),
        talent_id=talent.talent_id,
        job_id=job_id,
        company_id=company_id,
        status=status,
        status_history=[
            StatusHistoryEntry(status=ApplicationStatus.PENDING, changed_at=created_at, notes="Application submitted")
        ],
        applicant_full_name="Seeded Applicant",
        applicant_email="seeded@example.com",
        applicant_phone="+62800000000",
        resume_url=resume_url,
        created_at=created_at,
        updated_at=reviewed_at or created_at,
        reviewed_at=reviewed_at,
    )
    await SQLAlchemyApplicationRepository(session).create(application)
    await session.commit()
    return application


def days_ago(days: float, now: Optional[datetime] = None) -> datetime:
    return (now or utc_now()) - timedelta(days=days)
