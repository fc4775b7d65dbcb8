"""
Application Request/Response Schemas
Pydantic v2 models
"""
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import Field

from application.repositories.projections import (
    ApplicationListing,
    ApplicationView,
    JobSummary,
    TalentSummary,
)
from domain.entities import Application
from domain.entities.application import (
    MAX_COVER_LETTER_LENGTH,
    MAX_FEEDBACK_LENGTH,
    MAX_NOTES_LENGTH,
    MAX_SKILLS,
)

from .common import CamelModel


class ApplyRequest(CamelModel):
    """Application form"""

    job_id: UUID
    full_name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    phone: str = Field(..., min_length=1, max_length=50)
    cover_letter: Optional[str] = Field(None, max_length=MAX_COVER_LETTER_LENGTH)
    experience_years: Optional[int] = Field(None, ge=0, le=80)
    skills: List[str] = Field(default_factory=list, max_length=MAX_SKILLS)
    resume_url: Optional[str] = Field(None, max_length=500)


class StatusUpdateRequest(CamelModel):
    """Status change; status is validated against the enum by the service"""

    status: str
    notes: Optional[str] = Field(None, max_length=MAX_NOTES_LENGTH)
    feedback: Optional[str] = Field(None, max_length=MAX_FEEDBACK_LENGTH)
    interview_scheduled_at: Optional[datetime] = None


class StatusHistoryItem(CamelModel):
    status: str
    changed_at: datetime
    changed_by: Optional[UUID] = None
    notes: Optional[str] = None


class ApplicantData(CamelModel):
    full_name: str
    email: str
    phone: str
    experience_years: Optional[int] = None
    skills: List[str] = Field(default_factory=list)


class ApplicationResponse(CamelModel):
    id: UUID
    talent_id: UUID
    job_id: UUID
    company_id: UUID
    status: str
    has_resume: bool
    resume_url: Optional[str] = None
    resume_file_name: Optional[str] = None
    resume_file_size: Optional[int] = None
    resume_file_type: Optional[str] = None
    file_deleted: bool = False
    file_deleted_at: Optional[datetime] = None
    cover_letter: Optional[str] = None
    applicant: ApplicantData
    notes: Optional[str] = None
    feedback: Optional[str] = None
    applied_at: datetime
    updated_at: datetime
    reviewed_at: Optional[datetime] = None
    interview_scheduled_at: Optional[datetime] = None
    status_history: List[StatusHistoryItem] = Field(default_factory=list)
    version: int

    @classmethod
    def from_entity(cls, application: Application) -> "ApplicationResponse":
        return cls(
            id=application.id,
            talent_id=application.talent_id,
            job_id=application.job_id,
            company_id=application.company_id,
            status=application.status.value,
            has_resume=application.has_resume(),
            resume_url=application.resume_url if application.has_resume() else None,
            resume_file_name=application.resume_file_name,
            resume_file_size=application.resume_file_size,
            resume_file_type=application.resume_file_type,
            file_deleted=application.file_deleted,
            file_deleted_at=application.file_deleted_at,
            cover_letter=application.cover_letter,
            applicant=ApplicantData(
                full_name=application.applicant_full_name,
                email=application.applicant_email,
                phone=application.applicant_phone,
                experience_years=application.experience_years,
                skills=application.skills,
            ),
            notes=application.notes,
            feedback=application.feedback,
            applied_at=application.applied_at,
            updated_at=application.updated_at,
            reviewed_at=application.reviewed_at,
            interview_scheduled_at=application.interview_scheduled_at,
            status_history=[
                StatusHistoryItem(
                    status=entry.status.value,
                    changed_at=entry.changed_at,
                    changed_by=entry.changed_by,
                    notes=entry.notes,
                )
                for entry in application.status_history
            ],
            version=application.version,
        )


class ApplyResponse(CamelModel):
    """Trimmed creation result"""

    id: UUID
    job_id: UUID
    status: str
    has_resume: bool
    applied_at: datetime
    chat_id: Optional[UUID] = None
    replaced_application_id: Optional[UUID] = None


class JobSummaryResponse(CamelModel):
    id: UUID
    title: str
    location: Optional[str] = None
    company_id: UUID
    company_name: str
    is_active: bool
    application_deadline: Optional[datetime] = None

    @classmethod
    def from_summary(cls, job: JobSummary) -> "JobSummaryResponse":
        return cls(
            id=job.id,
            title=job.title,
            location=job.location,
            company_id=job.company_id,
            company_name=job.company_name,
            is_active=job.is_active,
            application_deadline=job.application_deadline,
        )


class TalentSummaryResponse(CamelModel):
    id: UUID
    name: str
    email: str
    phone: Optional[str] = None

    @classmethod
    def from_summary(cls, talent: TalentSummary) -> "TalentSummaryResponse":
        return cls(id=talent.id, name=talent.name, email=talent.email, phone=talent.phone)


class ApplicationDetailResponse(ApplicationResponse):
    job: JobSummaryResponse
    talent: TalentSummaryResponse

    @classmethod
    def from_view(cls, view: ApplicationView) -> "ApplicationDetailResponse":
        base = ApplicationResponse.from_entity(view.application)
        return cls(
            **base.model_dump(),
            job=JobSummaryResponse.from_summary(view.job),
            talent=TalentSummaryResponse.from_summary(view.talent),
        )


class ApplicationListResponse(CamelModel):
    applications: List[ApplicationDetailResponse]
    statistics: Dict[str, int]

    @classmethod
    def from_listing(cls, listing: ApplicationListing) -> "ApplicationListResponse":
        return cls(
            applications=[ApplicationDetailResponse.from_view(v) for v in listing.items],
            statistics=listing.statistics,
        )


class UploadedFileResponse(CamelModel):
    file_name: str
    original_name: str
    size: int
    type: Optional[str] = None
    url: str
