"""
Eligibility Resolver
Decides whether a talent may apply, or re-apply, to a job
"""
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from application.repositories.interfaces import IApplicationRepository
from domain.entities import Application


@dataclass(frozen=True)
class EligibilityDecision:
    allowed: bool
    reason: str
    supersede: bool = False
    existing: Optional[Application] = None


class EligibilityResolver:
    """Looks up the talent's current application for the job

    The read is only advisory. ApplicationLifecycleService holds a keyed
    lock around check, delete and insert, and the unique constraint on
    (talent_id, job_id) rejects whatever still slips through.
    """

    def __init__(self, application_repo: IApplicationRepository):
        self.application_repo = application_repo

    async def can_apply(self, talent_id: UUID, job_id: UUID) -> EligibilityDecision:
        existing = await self.application_repo.get_by_talent_and_job(talent_id, job_id)

        if existing is None:
            return EligibilityDecision(allowed=True, reason="No previous application")

        if existing.is_supersedable():
            return EligibilityDecision(
                allowed=True,
                reason=f"Previous application was {existing.status.value} and will be replaced",
                supersede=True,
                existing=existing,
            )

        return EligibilityDecision(
            allowed=False,
            reason=f"You already have an application for this job with status '{existing.status.value}'",
            existing=existing,
        )
