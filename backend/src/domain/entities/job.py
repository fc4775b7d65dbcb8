"""
Job Domain Entity
Immutable job posting business object
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID


@dataclass(frozen=True)
class Job:
    """Job posting domain entity - immutable"""

    id: UUID
    company_id: UUID
    title: str
    location: Optional[str] = None
    is_active: bool = True
    application_deadline: Optional[datetime] = None
    applications_count: int = 0

    created_at: datetime = None
    updated_at: datetime = None

    def is_open(self, now: datetime) -> bool:
        """Check if the posting still accepts applications"""
        if not self.is_active:
            return False
        return self.application_deadline is None or self.application_deadline >= now

    def __str__(self) -> str:
        return f"Job({self.title})"
