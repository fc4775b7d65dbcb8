"""
Cleanup Engine
Finds applications past their retention window, removes their resume
files and deletes the records. Holds no state between runs: candidates
are recomputed from the database every time, so repeated or overlapping
runs are safe.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from application.repositories.interfaces import IApplicationRepository
from application.services.storage.interfaces import IFileStore
from domain.entities import Application
from domain.value_objects import ApplicationStatus
from core.clock import Clock, utc_now
from core.logging_config import logger

from .policy import CleanupPolicy, RetentionRule


@dataclass(frozen=True)
class CleanupSummary:
    deleted_applications: int
    deleted_files: int
    failed: int
    started_at: datetime
    finished_at: datetime


@dataclass(frozen=True)
class CleanupCandidate:
    application_id: UUID
    talent_id: UUID
    job_id: UUID
    status: ApplicationStatus
    rule: str
    created_at: datetime
    reviewed_at: Optional[datetime]
    age_days: int
    review_age_days: Optional[int]
    has_resume: bool


@dataclass(frozen=True)
class CleanupStatus:
    total_applications: int
    counts_by_status: Dict[str, int]
    pending_applications: int
    reviewed_applications: int
    counts_by_rule: Dict[str, int]
    total_to_cleanup: int
    rules: List[str]
    scheduler: Optional[Dict[str, Any]] = None
    timezone: Optional[str] = None


@dataclass
class _RunCounters:
    deleted_applications: int = 0
    deleted_files: int = 0
    failed: int = 0
    seen: set = field(default_factory=set)


class CleanupEngine:
    """Retention sweep over persisted applications"""

    def __init__(
        self,
        application_repo: IApplicationRepository,
        file_store: IFileStore,
        policy: CleanupPolicy,
        clock: Clock = utc_now,
    ):
        self.application_repo = application_repo
        self.file_store = file_store
        self.policy = policy
        self.clock = clock

    async def run(self) -> CleanupSummary:
        """Delete every current candidate; one failure never stops the batch"""
        started_at = self.clock()
        counters = _RunCounters()

        for rule, application in await self._candidates(started_at):
            if application.id in counters.seen:
                continue
            counters.seen.add(application.id)
            await self._purge(rule, application, counters)

        finished_at = self.clock()
        logger.info(
            f"Cleanup finished: {counters.deleted_applications} applications, "
            f"{counters.deleted_files} files deleted, {counters.failed} failed"
        )
        return CleanupSummary(
            deleted_applications=counters.deleted_applications,
            deleted_files=counters.deleted_files,
            failed=counters.failed,
            started_at=started_at,
            finished_at=finished_at,
        )

    async def preview(self) -> List[CleanupCandidate]:
        """Same selection as run(), without side effects"""
        now = self.clock()
        candidates = []
        seen = set()

        for rule, application in await self._candidates(now):
            if application.id in seen:
                continue
            seen.add(application.id)
            candidates.append(
                CleanupCandidate(
                    application_id=application.id,
                    talent_id=application.talent_id,
                    job_id=application.job_id,
                    status=application.status,
                    rule=rule.name,
                    created_at=application.created_at,
                    reviewed_at=application.reviewed_at,
                    age_days=(now - application.created_at).days,
                    review_age_days=(
                        (now - application.reviewed_at).days
                        if application.reviewed_at else None
                    ),
                    has_resume=application.has_resume(),
                )
            )
        return candidates

    async def status(
        self,
        scheduler: Optional[Dict[str, Any]] = None,
        timezone: Optional[str] = None,
    ) -> CleanupStatus:
        now = self.clock()
        by_status = await self.application_repo.count_by_status()

        counts_by_rule = {}
        for rule in self.policy.rules:
            counts_by_rule[rule.name] = await self.application_repo.count_older_than(
                rule.statuses, rule.anchor, rule.cutoff(now)
            )

        return CleanupStatus(
            total_applications=sum(by_status.values()),
            counts_by_status={s.value: c for s, c in by_status.items()},
            pending_applications=(
                by_status[ApplicationStatus.PENDING] + by_status[ApplicationStatus.INTERVIEW]
            ),
            reviewed_applications=(
                by_status[ApplicationStatus.HIRED] + by_status[ApplicationStatus.REJECTED]
            ),
            counts_by_rule=counts_by_rule,
            total_to_cleanup=sum(counts_by_rule.values()),
            rules=self.policy.describe(),
            scheduler=scheduler,
            timezone=timezone,
        )

    async def _candidates(self, now: datetime) -> List[tuple]:
        found = []
        for rule in self.policy.rules:
            applications = await self.application_repo.find_older_than(
                rule.statuses, rule.anchor, rule.cutoff(now)
            )
            found.extend((rule, application) for application in applications)
        return found

    async def _purge(self, rule: RetentionRule, application: Application, counters: _RunCounters) -> None:
        try:
            if application.has_resume():
                await self._delete_resume(application, counters)

            if await self.application_repo.delete(application.id):
                counters.deleted_applications += 1
                logger.info(
                    f"Cleanup deleted application {application.id} "
                    f"({application.status.value}, rule={rule.name})"
                )
            else:
                logger.debug(f"Application {application.id} already gone")

        except Exception as e:
            counters.failed += 1
            logger.error(f"Cleanup failed for application {application.id}: {e}")

    async def _delete_resume(self, application: Application, counters: _RunCounters) -> None:
        # Another live application may still be using the same upload
        sharing = await self.application_repo.count_resume_references(
            application.resume_url, exclude_id=application.id
        )
        if sharing:
            logger.info(f"Cleanup kept resume of application {application.id}, still referenced elsewhere")
            return

        result = await self.file_store.delete(application.resume_url)
        if not result.ok:
            logger.warning(
                f"Cleanup could not delete file for application {application.id}: {result.error}"
            )
        elif result.value:
            counters.deleted_files += 1
