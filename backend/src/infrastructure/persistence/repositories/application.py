"""
Application Repository Implementation
Writes are version-guarded; reads return entities or hydrated projections
"""
import uuid
from datetime import datetime
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from domain.entities import Application, StatusHistoryEntry
from domain.value_objects import ApplicationStatus
from application.repositories.interfaces import IApplicationRepository
from application.repositories.projections import (
    ApplicationView,
    JobSummary,
    TalentSummary,
)
from infrastructure.persistence.models import (
    ApplicationModel,
    ApplicationStatusHistoryModel,
    CompanyModel,
    JobModel,
    TalentModel,
    UserModel,
)
from core.clock import ensure_utc
from core.exceptions import (
    ConcurrencyConflictException,
    DuplicateResourceException,
    RepositoryException,
    ResourceNotFoundException,
)

# Columns a retention rule may be anchored on
AGE_COLUMNS = {
    "created_at": ApplicationModel.created_at,
    "reviewed_at": ApplicationModel.reviewed_at,
    "updated_at": ApplicationModel.updated_at,
}


class SQLAlchemyApplicationRepository(IApplicationRepository):
    """SQLAlchemy implementation of application repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, application_id: UUID) -> Optional[Application]:
        """Get application by ID"""
        result = await self.session.execute(
            select(ApplicationModel)
            .where(ApplicationModel.id == application_id)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_talent_and_job(self, talent_id: UUID, job_id: UUID) -> Optional[Application]:
        result = await self.session.execute(
            select(ApplicationModel)
            .where(
                ApplicationModel.talent_id == talent_id,
                ApplicationModel.job_id == job_id,
            )
            .execution_options(populate_existing=True)
        )
        model = result.scalars().first()
        return self._to_entity(model) if model else None

    async def create(self, application: Application) -> Application:
        """Insert application and its initial history"""
        model = self._to_model(application)
        model.history = [
            self._history_to_model(application.id, position, entry)
            for position, entry in enumerate(application.status_history)
        ]
        self.session.add(model)
        try:
            await self.session.flush()
        except IntegrityError as e:
            logger.warning(
                f"Duplicate application rejected by constraint: "
                f"talent={application.talent_id}, job={application.job_id} ({e.orig})"
            )
            raise DuplicateResourceException(
                "Application",
                "talent_id/job_id",
                f"{application.talent_id}/{application.job_id}",
            )
        return application

    async def update(self, application: Application) -> Application:
        """Persist mutable fields when the stored version still matches"""
        result = await self.session.execute(
            update(ApplicationModel)
            .where(
                ApplicationModel.id == application.id,
                ApplicationModel.version == application.version,
            )
            .values(
                status=application.status.value,
                notes=application.notes,
                feedback=application.feedback,
                reviewed_at=application.reviewed_at,
                interview_scheduled_at=application.interview_scheduled_at,
                resume_url=application.resume_url,
                file_deleted=application.file_deleted,
                file_deleted_at=application.file_deleted_at,
                file_deleted_by=application.file_deleted_by,
                updated_at=application.updated_at,
                version=application.version + 1,
            )
            .execution_options(synchronize_session=False)
        )

        if result.rowcount == 0:
            still_exists = await self.session.scalar(
                select(func.count()).select_from(ApplicationModel)
                .where(ApplicationModel.id == application.id)
            )
            if not still_exists:
                raise ResourceNotFoundException("Application", str(application.id))
            raise ConcurrencyConflictException("Application", str(application.id))

        # History is append-only: write only the entries not stored yet
        stored = await self.session.scalar(
            select(func.count()).select_from(ApplicationStatusHistoryModel)
            .where(ApplicationStatusHistoryModel.application_id == application.id)
        )
        new_rows = [
            self._history_row(application.id, position, application.status_history[position])
            for position in range(stored, len(application.status_history))
        ]
        if new_rows:
            await self.session.execute(insert(ApplicationStatusHistoryModel), new_rows)

        await self.session.flush()
        application.version += 1
        return application

    async def delete(self, application_id: UUID) -> bool:
        """Delete application, history and chat cascade in the database.

        Runs in a savepoint so a failed delete leaves the session usable
        for the next one (the cleanup sweep deletes many in one session).
        """
        try:
            async with self.session.begin_nested():
                result = await self.session.execute(
                    delete(ApplicationModel)
                    .where(ApplicationModel.id == application_id)
                    .execution_options(synchronize_session=False)
                )
            return result.rowcount > 0

        except SQLAlchemyError as e:
            logger.error(f"Failed to delete application {application_id}: {str(e)}")
            raise RepositoryException(f"Failed to delete application: {str(e)}")

    async def count_resume_references(self, resume_url: str, exclude_id: Optional[UUID] = None) -> int:
        query = (
            select(func.count()).select_from(ApplicationModel)
            .where(
                ApplicationModel.resume_url == resume_url,
                ApplicationModel.file_deleted.is_(False),
            )
        )
        if exclude_id is not None:
            query = query.where(ApplicationModel.id != exclude_id)
        count = await self.session.scalar(query)
        return count or 0

    async def find_older_than(
        self,
        statuses: Iterable[ApplicationStatus],
        timestamp_field: str,
        cutoff: datetime,
    ) -> List[Application]:
        column = self._age_column(timestamp_field)
        result = await self.session.execute(
            select(ApplicationModel)
            .where(
                ApplicationModel.status.in_([s.value for s in statuses]),
                column.is_not(None),
                column <= cutoff,
            )
            .order_by(column)
            .execution_options(populate_existing=True)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def count_older_than(
        self,
        statuses: Iterable[ApplicationStatus],
        timestamp_field: str,
        cutoff: datetime,
    ) -> int:
        column = self._age_column(timestamp_field)
        count = await self.session.scalar(
            select(func.count()).select_from(ApplicationModel)
            .where(
                ApplicationModel.status.in_([s.value for s in statuses]),
                column.is_not(None),
                column <= cutoff,
            )
        )
        return count or 0

    async def count_by_status(self) -> Dict[ApplicationStatus, int]:
        return await self._count_by_status()

    async def count_by_status_for_talent(self, talent_id: UUID) -> Dict[ApplicationStatus, int]:
        return await self._count_by_status(ApplicationModel.talent_id == talent_id)

    async def count_by_status_for_company(self, company_id: UUID) -> Dict[ApplicationStatus, int]:
        return await self._count_by_status(ApplicationModel.company_id == company_id)

    async def get_view(self, application_id: UUID) -> Optional[ApplicationView]:
        result = await self.session.execute(
            self._view_query()
            .where(ApplicationModel.id == application_id)
            .execution_options(populate_existing=True)
        )
        row = result.first()
        return self._to_view(*row) if row else None

    async def list_for_talent(
        self,
        talent_id: UUID,
        status: Optional[ApplicationStatus] = None,
    ) -> List[ApplicationView]:
        query = self._view_query().where(ApplicationModel.talent_id == talent_id)
        if status is not None:
            query = query.where(ApplicationModel.status == status.value)
        result = await self.session.execute(
            query.order_by(ApplicationModel.created_at.desc())
            .execution_options(populate_existing=True)
        )
        return [self._to_view(*row) for row in result.all()]

    async def list_for_company(
        self,
        company_id: UUID,
        status: Optional[ApplicationStatus] = None,
        job_id: Optional[UUID] = None,
    ) -> List[ApplicationView]:
        query = self._view_query().where(ApplicationModel.company_id == company_id)
        if status is not None:
            query = query.where(ApplicationModel.status == status.value)
        if job_id is not None:
            query = query.where(ApplicationModel.job_id == job_id)
        result = await self.session.execute(
            query.order_by(ApplicationModel.created_at.desc())
            .execution_options(populate_existing=True)
        )
        return [self._to_view(*row) for row in result.all()]

    async def _count_by_status(self, *criteria) -> Dict[ApplicationStatus, int]:
        query = select(ApplicationModel.status, func.count()).group_by(ApplicationModel.status)
        if criteria:
            query = query.where(*criteria)
        result = await self.session.execute(query)

        counts = {status: 0 for status in ApplicationStatus}
        for status, count in result.all():
            counts[ApplicationStatus(status)] = count
        return counts

    @staticmethod
    def _age_column(timestamp_field: str):
        try:
            return AGE_COLUMNS[timestamp_field]
        except KeyError:
            raise ValueError(f"Unsupported age column: {timestamp_field}")

    @staticmethod
    def _view_query():
        return (
            select(ApplicationModel, JobModel, CompanyModel, TalentModel, UserModel)
            .join(JobModel, ApplicationModel.job_id == JobModel.id)
            .join(CompanyModel, ApplicationModel.company_id == CompanyModel.id)
            .join(TalentModel, ApplicationModel.talent_id == TalentModel.id)
            .join(UserModel, TalentModel.user_id == UserModel.id)
        )

    def _to_view(
        self,
        application: ApplicationModel,
        job: JobModel,
        company: CompanyModel,
        talent: TalentModel,
        talent_user: UserModel,
    ) -> ApplicationView:
        return ApplicationView(
            application=self._to_entity(application),
            job=JobSummary(
                id=job.id,
                title=job.title,
                location=job.location,
                company_id=company.id,
                company_name=company.company_name,
                is_active=job.is_active,
                application_deadline=ensure_utc(job.application_deadline),
            ),
            talent=TalentSummary(
                id=talent.id,
                user_id=talent.user_id,
                name=talent.name,
                email=talent_user.email,
                phone=talent.phone,
            ),
        )

    def _to_model(self, entity: Application) -> ApplicationModel:
        return ApplicationModel(
            id=entity.id,
            talent_id=entity.talent_id,
            job_id=entity.job_id,
            company_id=entity.company_id,
            status=entity.status.value,
            applicant_full_name=entity.applicant_full_name,
            applicant_email=entity.applicant_email,
            applicant_phone=entity.applicant_phone,
            experience_years=entity.experience_years,
            skills=list(entity.skills),
            cover_letter=entity.cover_letter,
            resume_url=entity.resume_url,
            resume_file_name=entity.resume_file_name,
            resume_file_size=entity.resume_file_size,
            resume_file_type=entity.resume_file_type,
            file_deleted=entity.file_deleted,
            file_deleted_at=entity.file_deleted_at,
            file_deleted_by=entity.file_deleted_by,
            notes=entity.notes,
            feedback=entity.feedback,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
            reviewed_at=entity.reviewed_at,
            interview_scheduled_at=entity.interview_scheduled_at,
            version=entity.version,
        )

    @staticmethod
    def _history_row(application_id: UUID, position: int, entry: StatusHistoryEntry) -> dict:
        return {
            "id": uuid.uuid4(),
            "application_id": application_id,
            "position": position,
            "status": entry.status.value,
            "changed_at": entry.changed_at,
            "changed_by": entry.changed_by,
            "notes": entry.notes,
        }

    def _history_to_model(
        self, application_id: UUID, position: int, entry: StatusHistoryEntry
    ) -> ApplicationStatusHistoryModel:
        return ApplicationStatusHistoryModel(**self._history_row(application_id, position, entry))

    def _to_entity(self, model: ApplicationModel) -> Application:
        return Application(
            id=model.id,
            talent_id=model.talent_id,
            job_id=model.job_id,
            company_id=model.company_id,
            status=ApplicationStatus(model.status),
            status_history=[
                StatusHistoryEntry(
                    status=ApplicationStatus(h.status),
                    changed_at=ensure_utc(h.changed_at),
                    changed_by=h.changed_by,
                    notes=h.notes,
                )
                for h in model.history
            ],
            applicant_full_name=model.applicant_full_name,
            applicant_email=model.applicant_email,
            applicant_phone=model.applicant_phone,
            experience_years=model.experience_years,
            skills=list(model.skills or []),
            cover_letter=model.cover_letter,
            resume_url=model.resume_url,
            resume_file_name=model.resume_file_name,
            resume_file_size=model.resume_file_size,
            resume_file_type=model.resume_file_type,
            file_deleted=model.file_deleted,
            file_deleted_at=ensure_utc(model.file_deleted_at),
            file_deleted_by=model.file_deleted_by,
            notes=model.notes,
            feedback=model.feedback,
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
            reviewed_at=ensure_utc(model.reviewed_at),
            interview_scheduled_at=ensure_utc(model.interview_scheduled_at),
            version=model.version,
        )
