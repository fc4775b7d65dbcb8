"""
Dependency Injection Container
Manages service and repository instances
"""
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import Depends

from core.config import settings
from core.database import get_db, get_db_session
from application.repositories.interfaces import (
    IApplicationRepository,
    IChatRepository,
    ICompanyRepository,
    IJobRepository,
    ITalentRepository,
    IUserRepository,
)
from application.services.auth.interfaces import IJwtService
from application.services.applications.lifecycle import ApplicationLifecycleService
from application.services.chat.bootstrapper import ChatBootstrapper
from application.services.cleanup.engine import CleanupEngine, CleanupSummary
from application.services.cleanup.policy import CleanupPolicy
from application.services.cleanup.scheduler import (
    CleanupScheduler,
    DailySchedule,
    IntervalSchedule,
)
from application.services.storage.interfaces import IFileStore
from infrastructure.persistence.repositories.application import SQLAlchemyApplicationRepository
from infrastructure.persistence.repositories.chat import SQLAlchemyChatRepository
from infrastructure.persistence.repositories.company import SQLAlchemyCompanyRepository
from infrastructure.persistence.repositories.job import SQLAlchemyJobRepository
from infrastructure.persistence.repositories.talent import SQLAlchemyTalentRepository
from infrastructure.persistence.repositories.user import SQLAlchemyUserRepository
from infrastructure.security.jwt_service import JwtService
from infrastructure.storage.local_file_store import LocalFileStore


# Singleton instances
_jwt_service: Optional[IJwtService] = None
_file_store: Optional[IFileStore] = None
_cleanup_scheduler: Optional[CleanupScheduler] = None


def get_jwt_service() -> IJwtService:
    """Get JWT service instance (singleton)"""
    global _jwt_service
    if _jwt_service is None:
        _jwt_service = JwtService()
    return _jwt_service


def get_file_store() -> IFileStore:
    """Get file store instance (singleton)"""
    global _file_store
    if _file_store is None:
        _file_store = LocalFileStore()
    return _file_store


def get_user_repository(session: AsyncSession = Depends(get_db)) -> IUserRepository:
    """Get user repository instance (per-request)"""
    return SQLAlchemyUserRepository(session)


def get_talent_repository(session: AsyncSession = Depends(get_db)) -> ITalentRepository:
    return SQLAlchemyTalentRepository(session)


def get_company_repository(session: AsyncSession = Depends(get_db)) -> ICompanyRepository:
    return SQLAlchemyCompanyRepository(session)


def get_job_repository(session: AsyncSession = Depends(get_db)) -> IJobRepository:
    return SQLAlchemyJobRepository(session)


def get_application_repository(session: AsyncSession = Depends(get_db)) -> IApplicationRepository:
    return SQLAlchemyApplicationRepository(session)


def get_chat_repository(session: AsyncSession = Depends(get_db)) -> IChatRepository:
    return SQLAlchemyChatRepository(session)


def get_chat_bootstrapper(
    chat_repo: IChatRepository = Depends(get_chat_repository),
    talent_repo: ITalentRepository = Depends(get_talent_repository),
    company_repo: ICompanyRepository = Depends(get_company_repository),
) -> ChatBootstrapper:
    return ChatBootstrapper(
        chat_repo,
        talent_repo,
        company_repo,
        seed_greeting=settings.CHAT_SEED_GREETING,
        greeting_message=settings.CHAT_GREETING_MESSAGE,
    )


def get_lifecycle_service(
    session: AsyncSession = Depends(get_db),
    application_repo: IApplicationRepository = Depends(get_application_repository),
    job_repo: IJobRepository = Depends(get_job_repository),
    talent_repo: ITalentRepository = Depends(get_talent_repository),
    chat_bootstrapper: ChatBootstrapper = Depends(get_chat_bootstrapper),
    file_store: IFileStore = Depends(get_file_store),
) -> ApplicationLifecycleService:
    """Get lifecycle service instance (per-request)"""
    return ApplicationLifecycleService(
        session,
        application_repo,
        job_repo,
        talent_repo,
        chat_bootstrapper,
        file_store,
    )


def build_cleanup_engine(session: AsyncSession, file_store: Optional[IFileStore] = None) -> CleanupEngine:
    return CleanupEngine(
        SQLAlchemyApplicationRepository(session),
        file_store or get_file_store(),
        CleanupPolicy.from_settings(settings),
    )


def get_cleanup_engine(
    session: AsyncSession = Depends(get_db),
    file_store: IFileStore = Depends(get_file_store),
) -> CleanupEngine:
    return build_cleanup_engine(session, file_store)


async def run_scheduled_cleanup() -> CleanupSummary:
    """Cleanup run in its own session, committed when the sweep finishes"""
    async with get_db_session() as session:
        return await build_cleanup_engine(session).run()


def get_cleanup_scheduler() -> CleanupScheduler:
    """Get cleanup scheduler instance (singleton)"""
    global _cleanup_scheduler
    if _cleanup_scheduler is None:
        _cleanup_scheduler = CleanupScheduler(
            runner=run_scheduled_cleanup,
            schedules=[
                DailySchedule(hour=settings.CLEANUP_DAILY_HOUR),
                IntervalSchedule(hours=settings.CLEANUP_INTERVAL_HOURS),
            ],
            timezone=settings.CLEANUP_TIMEZONE,
        )
    return _cleanup_scheduler
