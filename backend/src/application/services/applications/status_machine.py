"""
Application Status Machine
Validates and applies status transitions to an Application in memory.
Persistence and the file purge that follows a decision are the
caller's job; see ApplicationLifecycleService.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union
from uuid import UUID

from domain.entities import Application, StatusHistoryEntry
from domain.entities.application import MAX_FEEDBACK_LENGTH, MAX_NOTES_LENGTH
from domain.value_objects import Actor, ApplicationStatus, can_transition
from core.clock import Clock, ensure_utc, utc_now
from core.exceptions import (
    AuthorizationException,
    InvalidStatusException,
    InvalidTransitionException,
    ValidationException,
)
from core.logging_config import logger


@dataclass(frozen=True)
class TransitionResult:
    previous_status: ApplicationStatus
    new_status: ApplicationStatus
    requires_file_purge: bool


class ApplicationStatusMachine:
    """Status transition rules for applications"""

    def __init__(self, clock: Clock = utc_now):
        self.clock = clock

    @staticmethod
    def parse_status(value: Union[str, ApplicationStatus]) -> ApplicationStatus:
        if isinstance(value, ApplicationStatus):
            return value
        try:
            return ApplicationStatus(value)
        except ValueError:
            raise InvalidStatusException(str(value))

    def authorize(self, application: Application, new_status: ApplicationStatus, actor: Actor) -> None:
        """Admin and the owning company may move any edge, the owning talent may only cancel"""
        if actor.is_admin or actor.owns_as_company(application.company_id):
            return
        if actor.owns_as_talent(application.talent_id):
            if new_status == ApplicationStatus.CANCELLED:
                return
            raise AuthorizationException("Talents can only cancel their own applications")
        raise AuthorizationException("Not authorized to update this application")

    def transition(
        self,
        application: Application,
        new_status: Union[str, ApplicationStatus],
        actor: Actor,
        notes: Optional[str] = None,
        feedback: Optional[str] = None,
        interview_scheduled_at: Optional[datetime] = None,
    ) -> TransitionResult:
        """
        Apply one status change to the application

        Raises:
            InvalidStatusException: unknown status value
            AuthorizationException: actor may not make this change
            InvalidTransitionException: edge not in the transition graph
            ValidationException: bad notes, feedback or interview time
        """
        target = self.parse_status(new_status)
        self.authorize(application, target, actor)

        current = application.status
        if not can_transition(current, target):
            raise InvalidTransitionException(current.value, target.value)

        if notes is not None and len(notes) > MAX_NOTES_LENGTH:
            raise ValidationException("notes", f"Notes cannot exceed {MAX_NOTES_LENGTH} characters")
        if feedback is not None and len(feedback) > MAX_FEEDBACK_LENGTH:
            raise ValidationException("feedback", f"Feedback cannot exceed {MAX_FEEDBACK_LENGTH} characters")

        now = self.clock()
        scheduled_at = None
        if target == ApplicationStatus.INTERVIEW:
            scheduled_at = ensure_utc(interview_scheduled_at) or now
            if scheduled_at < now:
                raise ValidationException("interviewScheduledAt", "Interview time must be in the future")

        application.status = target
        application.status_history.append(
            StatusHistoryEntry(
                status=target,
                changed_at=now,
                changed_by=actor.user_id,
                notes=notes or f"Status changed from {current.value} to {target.value}",
            )
        )
        application.updated_at = now

        if notes is not None and not actor.is_talent:
            application.notes = notes
        if feedback is not None:
            application.feedback = feedback

        if current == ApplicationStatus.PENDING and application.reviewed_at is None:
            application.reviewed_at = now
        if scheduled_at is not None:
            application.interview_scheduled_at = scheduled_at

        logger.info(
            f"Application {application.id}: {current.value} -> {target.value} "
            f"by {actor.role.value} {actor.user_id}"
        )
        return TransitionResult(
            previous_status=current,
            new_status=target,
            requires_file_purge=application.requires_file_purge(),
        )

    def mark_file_deleted(self, application: Application, actor_id: Optional[UUID] = None) -> None:
        now = self.clock()
        application.file_deleted = True
        application.file_deleted_at = now
        application.file_deleted_by = actor_id
        application.updated_at = now
