"""
Talent Domain Entity
Job-seeker profile attached to a talent user
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional
from uuid import UUID


@dataclass(frozen=True)
class Talent:
    """Talent profile - immutable"""

    id: UUID
    user_id: UUID
    name: str
    phone: Optional[str] = None
    experience: Optional[int] = None
    skills: List[str] = field(default_factory=list)
    resume_url: Optional[str] = None

    created_at: datetime = None
    updated_at: datetime = None
