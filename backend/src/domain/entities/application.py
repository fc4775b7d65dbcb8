"""
Application Domain Entity
A talent's application to a job, with its status audit trail
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from ..value_objects import (
    ApplicationStatus,
    CANCELLABLE_STATUSES,
    FILE_PURGE_STATUSES,
    SUPERSEDABLE_STATUSES,
)

MAX_COVER_LETTER_LENGTH = 1000
MAX_NOTES_LENGTH = 500
MAX_FEEDBACK_LENGTH = 1000
MAX_SKILLS = 20


@dataclass(frozen=True)
class StatusHistoryEntry:
    """One accepted status change, never edited after it is written"""

    status: ApplicationStatus
    changed_at: datetime
    changed_by: Optional[UUID] = None
    notes: Optional[str] = None


@dataclass
class Application:
    """Job application domain entity

    Mutable: the status machine updates it in place and the repository
    persists it with an optimistic version check.
    """

    id: UUID
    talent_id: UUID
    job_id: UUID
    company_id: UUID

    status: ApplicationStatus = ApplicationStatus.PENDING
    status_history: List[StatusHistoryEntry] = field(default_factory=list)

    # Applicant form snapshot
    applicant_full_name: str = ""
    applicant_email: str = ""
    applicant_phone: str = ""
    experience_years: Optional[int] = None
    skills: List[str] = field(default_factory=list)
    cover_letter: Optional[str] = None

    # Resume
    resume_url: Optional[str] = None
    resume_file_name: Optional[str] = None
    resume_file_size: Optional[int] = None
    resume_file_type: Optional[str] = None
    file_deleted: bool = False
    file_deleted_at: Optional[datetime] = None
    file_deleted_by: Optional[UUID] = None

    # Company-authored
    notes: Optional[str] = None
    feedback: Optional[str] = None

    # Timestamps
    created_at: datetime = None
    updated_at: datetime = None
    reviewed_at: Optional[datetime] = None
    interview_scheduled_at: Optional[datetime] = None

    version: int = 1

    def __post_init__(self):
        """Validate bounded text fields"""
        if self.cover_letter and len(self.cover_letter) > MAX_COVER_LETTER_LENGTH:
            raise ValueError(f"Cover letter cannot exceed {MAX_COVER_LETTER_LENGTH} characters")
        if len(self.skills) > MAX_SKILLS:
            raise ValueError(f"Cannot list more than {MAX_SKILLS} skills")

    @property
    def applied_at(self) -> datetime:
        return self.created_at

    def has_resume(self) -> bool:
        """Resume attached and not yet removed from storage"""
        return bool(self.resume_url) and not self.file_deleted

    def is_supersedable(self) -> bool:
        return self.status in SUPERSEDABLE_STATUSES

    def is_cancellable(self) -> bool:
        return self.status in CANCELLABLE_STATUSES

    def requires_file_purge(self) -> bool:
        return self.status in FILE_PURGE_STATUSES and self.has_resume()

    def __str__(self) -> str:
        return f"Application({self.id}, status={self.status.value})"
