"""
Application Lifecycle Service
Orchestrates apply, status changes, withdrawal and deletion, and owns
the transaction boundaries around them. Side effects that may fail
without invalidating the primary change (chat creation, file removal)
run after the commit and are only logged on failure.
"""
import mimetypes
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple
from uuid import UUID

import aiofiles.os
from sqlalchemy.ext.asyncio import AsyncSession

from application.repositories.interfaces import (
    IApplicationRepository,
    IJobRepository,
    ITalentRepository,
)
from application.repositories.projections import ApplicationListing, ApplicationView
from application.services.chat.bootstrapper import ChatBootstrapper
from application.services.storage.interfaces import IFileStore
from domain.entities import Application, Chat, StatusHistoryEntry
from domain.entities.application import MAX_COVER_LETTER_LENGTH, MAX_SKILLS
from domain.value_objects import Actor, ApplicationStatus, Email, OperationResult
from core.clock import Clock, utc_now
from core.exceptions import (
    AuthorizationException,
    DuplicateResourceException,
    RepositoryException,
    ResourceNotFoundException,
    ValidationException,
)
from core.logging_config import logger

from .eligibility import EligibilityResolver
from .locks import KeyedLock, apply_locks
from .status_machine import ApplicationStatusMachine


@dataclass
class ApplyCommand:
    """Application form as submitted by a talent"""

    job_id: UUID
    full_name: str
    email: str
    phone: str
    cover_letter: Optional[str] = None
    experience_years: Optional[int] = None
    skills: List[str] = field(default_factory=list)
    resume_url: Optional[str] = None


@dataclass(frozen=True)
class ApplyResult:
    application: Application
    superseded_id: Optional[UUID]
    chat: OperationResult[Chat]


@dataclass(frozen=True)
class RemovalResult:
    application_id: UUID
    hard_deleted: bool
    application: Optional[Application] = None


class ApplicationLifecycleService:
    """Application use cases for talents, companies and admins"""

    def __init__(
        self,
        session: AsyncSession,
        application_repo: IApplicationRepository,
        job_repo: IJobRepository,
        talent_repo: ITalentRepository,
        chat_bootstrapper: ChatBootstrapper,
        file_store: IFileStore,
        status_machine: Optional[ApplicationStatusMachine] = None,
        locks: KeyedLock = apply_locks,
        clock: Clock = utc_now,
    ):
        self.session = session
        self.application_repo = application_repo
        self.job_repo = job_repo
        self.talent_repo = talent_repo
        self.chat_bootstrapper = chat_bootstrapper
        self.file_store = file_store
        self.status_machine = status_machine or ApplicationStatusMachine(clock)
        self.eligibility = EligibilityResolver(application_repo)
        self.locks = locks
        self.clock = clock

    async def apply(self, actor: Actor, command: ApplyCommand) -> ApplyResult:
        """
        Submit an application for a job

        The read-check-delete-insert sequence runs under a per (talent, job)
        lock in a single transaction. The unique constraint catches
        whatever another process slips in.

        Raises:
            AuthorizationException: caller is not a talent
            ResourceNotFoundException: job or talent profile missing
            ValidationException: closed job or bad form data
            DuplicateResourceException: an active application already exists
        """
        if not actor.is_talent or actor.talent_id is None:
            raise AuthorizationException("Only talents can apply for jobs")
        email = self._validate_command(command)

        async with self.locks.hold((actor.talent_id, command.job_id)):
            try:
                application, superseded = await self._create_application(actor, command, email)
                await self.session.commit()
            except Exception:
                await self.session.rollback()
                raise

            chat = await self.chat_bootstrapper.ensure_chat(application)
            if chat.ok:
                await self._commit_best_effort(f"chat for application {application.id}")
            else:
                logger.warning(f"Application {application.id} created without chat: {chat.error}")
                await self.session.rollback()

        if superseded is not None and superseded.has_resume():
            await self._release_resume(superseded, "superseded application")

        logger.info(
            f"Application {application.id} submitted by talent {actor.talent_id} for job {command.job_id}"
            + (f" (replaced {superseded.id})" if superseded else "")
        )
        return ApplyResult(
            application=application,
            superseded_id=superseded.id if superseded else None,
            chat=chat,
        )

    async def update_status(
        self,
        actor: Actor,
        application_id: UUID,
        status: str,
        notes: Optional[str] = None,
        feedback: Optional[str] = None,
        interview_scheduled_at: Optional[datetime] = None,
    ) -> Application:
        """Apply a transition; the resume purge runs after the status is committed"""
        application = await self._get_or_404(application_id)
        result = self.status_machine.transition(
            application,
            status,
            actor,
            notes=notes,
            feedback=feedback,
            interview_scheduled_at=interview_scheduled_at,
        )

        try:
            await self.application_repo.update(application)
            if result.new_status == ApplicationStatus.CANCELLED and actor.owns_as_talent(application.talent_id):
                await self.job_repo.adjust_applications_count(application.job_id, -1)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        if result.requires_file_purge:
            await self._purge_resume(application, actor)

        return application

    async def cancel(self, actor: Actor, application_id: UUID, notes: Optional[str] = None) -> Application:
        """Talent withdrawal"""
        return await self.update_status(
            actor,
            application_id,
            ApplicationStatus.CANCELLED.value,
            notes=notes or "Application withdrawn by talent",
        )

    async def remove(self, actor: Actor, application_id: UUID) -> RemovalResult:
        """DELETE semantics: talents withdraw, admins delete outright"""
        if actor.is_admin:
            await self.hard_delete(application_id)
            return RemovalResult(application_id=application_id, hard_deleted=True)

        application = await self._get_or_404(application_id)
        if not actor.owns_as_talent(application.talent_id):
            raise AuthorizationException("Not authorized to delete this application")
        if not application.is_cancellable():
            raise ValidationException(
                "status", f"A {application.status.value} application can no longer be withdrawn"
            )

        application = await self.cancel(actor, application_id)
        return RemovalResult(application_id=application_id, hard_deleted=False, application=application)

    async def hard_delete(self, application_id: UUID) -> None:
        """Delete the record (history and chat cascade), then its file"""
        application = await self._get_or_404(application_id)
        try:
            await self.application_repo.delete(application_id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(f"Application {application_id} deleted")
        if application.has_resume():
            await self._release_resume(application, "deleted application")

    async def get_detail(self, actor: Actor, application_id: UUID) -> ApplicationView:
        view = await self.application_repo.get_view(application_id)
        if view is None:
            raise ResourceNotFoundException("Application", str(application_id))
        self._ensure_can_view(actor, view.application)
        return view

    async def list_for_talent(self, actor: Actor, status: Optional[str] = None) -> ApplicationListing:
        if not actor.is_talent or actor.talent_id is None:
            raise AuthorizationException("Only talents have personal applications")
        status_filter = self.status_machine.parse_status(status) if status else None

        items = await self.application_repo.list_for_talent(actor.talent_id, status_filter)
        counts = await self.application_repo.count_by_status_for_talent(actor.talent_id)
        return ApplicationListing(items=items, statistics=self._statistics(counts))

    async def list_for_company(
        self,
        actor: Actor,
        status: Optional[str] = None,
        job_id: Optional[UUID] = None,
    ) -> ApplicationListing:
        if not actor.is_company or actor.company_id is None:
            raise AuthorizationException("Only companies can list received applications")
        status_filter = self.status_machine.parse_status(status) if status else None

        items = await self.application_repo.list_for_company(actor.company_id, status_filter, job_id)
        counts = await self.application_repo.count_by_status_for_company(actor.company_id)
        return ApplicationListing(items=items, statistics=self._statistics(counts))

    async def get_chat(self, actor: Actor, application_id: UUID) -> Chat:
        """Chat of the application, created on first access if apply left none"""
        application = await self._get_or_404(application_id)
        self._ensure_can_view(actor, application)

        chat = await self.chat_bootstrapper.ensure_chat(application)
        if not chat.ok:
            await self.session.rollback()
            raise RepositoryException(f"Chat unavailable for application {application_id}: {chat.error}")

        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return chat.value

    async def get_resume(self, actor: Actor, application_id: UUID) -> Tuple[Path, str, str]:
        """Path, download name and media type of the attached resume"""
        application = await self._get_or_404(application_id)
        self._ensure_can_view(actor, application)

        if not application.has_resume():
            raise ResourceNotFoundException("Resume", str(application_id))
        path = self.file_store.resolve(application.resume_url)
        if path is None:
            logger.warning(f"Resume for application {application_id} missing on disk: {application.resume_url}")
            raise ResourceNotFoundException("Resume file", application.resume_url)

        download_name = application.resume_file_name or path.name
        media_type = application.resume_file_type or mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return path, download_name, media_type

    async def _create_application(
        self, actor: Actor, command: ApplyCommand, email: Email
    ) -> Tuple[Application, Optional[Application]]:
        job = await self.job_repo.get_by_id(command.job_id)
        if job is None:
            raise ResourceNotFoundException("Job", str(command.job_id))

        now = self.clock()
        if not job.is_open(now):
            raise ValidationException("jobId", "This job is no longer accepting applications")

        talent = await self.talent_repo.get_by_id(actor.talent_id)
        if talent is None:
            raise ResourceNotFoundException("Talent profile", str(actor.user_id))

        decision = await self.eligibility.can_apply(talent.id, job.id)
        if not decision.allowed:
            logger.info(f"Apply blocked for talent {talent.id} on job {job.id}: {decision.reason}")
            raise DuplicateResourceException("Application", "status", decision.existing.status.value)

        superseded = None
        if decision.supersede:
            # Old record goes first so the new one starts with a clean history
            await self.application_repo.delete(decision.existing.id)
            superseded = decision.existing

        resume_url = command.resume_url or talent.resume_url
        file_name, file_size, file_type = await self._resume_metadata(resume_url)

        application = Application(
            id=uuid.uuid4(),
            talent_id=talent.id,
            job_id=job.id,
            company_id=job.company_id,
            status=ApplicationStatus.PENDING,
            status_history=[
                StatusHistoryEntry(
                    status=ApplicationStatus.PENDING,
                    changed_at=now,
                    changed_by=actor.user_id,
                    notes="Application submitted",
                )
            ],
            applicant_full_name=command.full_name.strip(),
            applicant_email=str(email),
            applicant_phone=command.phone.strip(),
            experience_years=command.experience_years,
            skills=list(command.skills),
            cover_letter=command.cover_letter,
            resume_url=resume_url,
            resume_file_name=file_name,
            resume_file_size=file_size,
            resume_file_type=file_type,
            created_at=now,
            updated_at=now,
        )
        await self.application_repo.create(application)

        await self.talent_repo.update_profile(
            talent.id,
            name=command.full_name.strip(),
            phone=command.phone.strip(),
            experience=command.experience_years,
            skills=command.skills or None,
        )
        await self.job_repo.adjust_applications_count(job.id, 1)
        return application, superseded

    async def _purge_resume(self, application: Application, actor: Actor) -> None:
        deletion = await self._release_resume(application, "decided application")
        if not deletion.ok:
            return

        # Recorded even when the file stays for another application
        self.status_machine.mark_file_deleted(application, actor.user_id)
        try:
            await self.application_repo.update(application)
            await self.session.commit()
        except Exception as e:
            await self.session.rollback()
            logger.warning(f"File deletion for application {application.id} not recorded: {e}")

    async def _release_resume(self, application: Application, context: str) -> OperationResult[bool]:
        """Unlink the resume unless another live application still points at it"""
        sharing = await self.application_repo.count_resume_references(
            application.resume_url, exclude_id=application.id
        )
        if sharing:
            logger.info(
                f"Resume of {context} {application.id} kept, "
                f"still referenced by {sharing} other application(s)"
            )
            return OperationResult.success(False)

        deletion = await self.file_store.delete(application.resume_url)
        if not deletion.ok:
            logger.warning(f"Resume of {context} {application.id} not deleted: {deletion.error}")
        return deletion

    async def _commit_best_effort(self, what: str) -> None:
        try:
            await self.session.commit()
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Failed to commit {what}: {e}")

    async def _get_or_404(self, application_id: UUID) -> Application:
        application = await self.application_repo.get_by_id(application_id)
        if application is None:
            raise ResourceNotFoundException("Application", str(application_id))
        return application

    async def _resume_metadata(
        self, resume_url: Optional[str]
    ) -> Tuple[Optional[str], Optional[int], Optional[str]]:
        if not resume_url:
            return None, None, None
        path = self.file_store.resolve(resume_url)
        if path is None:
            return resume_url.rsplit("/", 1)[-1], None, None
        stat = await aiofiles.os.stat(path)
        return path.name, stat.st_size, mimetypes.guess_type(path.name)[0]

    @staticmethod
    def _ensure_can_view(actor: Actor, application: Application) -> None:
        if actor.is_admin:
            return
        if actor.owns_as_talent(application.talent_id) or actor.owns_as_company(application.company_id):
            return
        raise AuthorizationException("Not authorized to view this application")

    @staticmethod
    def _validate_command(command: ApplyCommand) -> Email:
        for field_name, value in (("fullName", command.full_name), ("phone", command.phone)):
            if not value or not value.strip():
                raise ValidationException(field_name, "is required")
        try:
            email = Email(command.email)
        except ValueError:
            raise ValidationException("email", "Invalid email format")
        if len(command.skills) > MAX_SKILLS:
            raise ValidationException("skills", f"Cannot list more than {MAX_SKILLS} skills")
        if command.cover_letter and len(command.cover_letter) > MAX_COVER_LETTER_LENGTH:
            raise ValidationException(
                "coverLetter", f"Cover letter cannot exceed {MAX_COVER_LETTER_LENGTH} characters"
            )
        if command.experience_years is not None and command.experience_years < 0:
            raise ValidationException("experienceYears", "cannot be negative")
        return email

    @staticmethod
    def _statistics(counts) -> dict:
        statistics = {status.value: counts.get(status, 0) for status in ApplicationStatus}
        statistics["total"] = sum(statistics.values())
        return statistics
