"""
Job Repository Implementation
SQLAlchemy-based job posting repository
"""
from typing import Optional
from uuid import UUID

from sqlalchemy import case, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from domain.entities import Job
from application.repositories.interfaces import IJobRepository
from infrastructure.persistence.models.job import JobModel
from core.clock import ensure_utc, utc_now
from core.exceptions import RepositoryException


class SQLAlchemyJobRepository(IJobRepository):
    """SQLAlchemy implementation of job repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, job_id: UUID) -> Optional[Job]:
        """Get job by ID"""
        try:
            result = await self.session.execute(
                select(JobModel)
                .where(JobModel.id == job_id)
                .execution_options(populate_existing=True)
            )
            model = result.scalar_one_or_none()
            return self._to_entity(model) if model else None

        except SQLAlchemyError as e:
            logger.error(f"Failed to get job by ID {job_id}: {str(e)}")
            raise RepositoryException(f"Failed to get job: {str(e)}")

    async def create(self, job: Job) -> Job:
        now = utc_now()
        model = JobModel(
            id=job.id,
            company_id=job.company_id,
            title=job.title,
            location=job.location,
            is_active=job.is_active,
            application_deadline=job.application_deadline,
            applications_count=job.applications_count,
            created_at=job.created_at or now,
            updated_at=job.updated_at or now,
        )
        self.session.add(model)
        await self.session.flush()
        return self._to_entity(model)

    async def adjust_applications_count(self, job_id: UUID, delta: int) -> None:
        """Single UPDATE so concurrent applies never lose an increment"""
        new_count = JobModel.applications_count + delta
        await self.session.execute(
            update(JobModel)
            .where(JobModel.id == job_id)
            .values(
                applications_count=case((new_count < 0, 0), else_=new_count),
                updated_at=utc_now(),
            )
            .execution_options(synchronize_session=False)
        )
        await self.session.flush()

    def _to_entity(self, model: JobModel) -> Job:
        return Job(
            id=model.id,
            company_id=model.company_id,
            title=model.title,
            location=model.location,
            is_active=model.is_active,
            application_deadline=ensure_utc(model.application_deadline),
            applications_count=model.applications_count,
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )
