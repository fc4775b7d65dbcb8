"""
Read-side Projections
Hydrated view models returned by the named query methods of the
application repository. Presentation code shapes these, never ORM rows.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from domain.entities import Application


@dataclass(frozen=True)
class JobSummary:
    id: UUID
    title: str
    location: Optional[str]
    company_id: UUID
    company_name: str
    is_active: bool = True
    application_deadline: Optional[datetime] = None


@dataclass(frozen=True)
class TalentSummary:
    id: UUID
    user_id: UUID
    name: str
    email: str
    phone: Optional[str] = None


@dataclass(frozen=True)
class ApplicationView:
    """Application joined with its job, company and talent"""

    application: Application
    job: JobSummary
    talent: TalentSummary


@dataclass(frozen=True)
class ApplicationListing:
    """A list of views plus per-status counts over the unfiltered set"""

    items: List[ApplicationView] = field(default_factory=list)
    statistics: Dict[str, int] = field(default_factory=dict)
