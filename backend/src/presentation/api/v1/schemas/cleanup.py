"""
Cleanup Admin Schemas
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from application.services.cleanup.engine import (
    CleanupCandidate,
    CleanupStatus,
    CleanupSummary,
)

from .common import CamelModel


class CleanupSummaryResponse(CamelModel):
    deleted_applications: int
    deleted_files: int
    failed: int
    started_at: datetime
    finished_at: datetime

    @classmethod
    def from_summary(cls, summary: CleanupSummary) -> "CleanupSummaryResponse":
        return cls(
            deleted_applications=summary.deleted_applications,
            deleted_files=summary.deleted_files,
            failed=summary.failed,
            started_at=summary.started_at,
            finished_at=summary.finished_at,
        )


class CleanupCandidateResponse(CamelModel):
    id: UUID
    talent_id: UUID
    job_id: UUID
    status: str
    rule: str
    created_at: datetime
    reviewed_at: Optional[datetime] = None
    age_days: int
    review_age_days: Optional[int] = None
    has_resume: bool

    @classmethod
    def from_candidate(cls, candidate: CleanupCandidate) -> "CleanupCandidateResponse":
        return cls(
            id=candidate.application_id,
            talent_id=candidate.talent_id,
            job_id=candidate.job_id,
            status=candidate.status.value,
            rule=candidate.rule,
            created_at=candidate.created_at,
            reviewed_at=candidate.reviewed_at,
            age_days=candidate.age_days,
            review_age_days=candidate.review_age_days,
            has_resume=candidate.has_resume,
        )


class CleanupPreviewResponse(CamelModel):
    count: int
    candidates: List[CleanupCandidateResponse]


class CleanupStatusResponse(CamelModel):
    total_applications: int
    counts_by_status: Dict[str, int]
    pending_applications: int
    reviewed_applications: int
    counts_by_rule: Dict[str, int]
    total_to_cleanup: int
    cleanup_rules: List[str]
    scheduler_status: Optional[Dict[str, Any]] = None
    timezone: Optional[str] = None

    @classmethod
    def from_status(cls, status: CleanupStatus) -> "CleanupStatusResponse":
        return cls(
            total_applications=status.total_applications,
            counts_by_status=status.counts_by_status,
            pending_applications=status.pending_applications,
            reviewed_applications=status.reviewed_applications,
            counts_by_rule=status.counts_by_rule,
            total_to_cleanup=status.total_to_cleanup,
            cleanup_rules=status.rules,
            scheduler_status=status.scheduler,
            timezone=status.timezone,
        )
