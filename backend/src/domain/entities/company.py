"""
Company Domain Entity
Employer profile attached to a company user
"""
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class Company:
    id: UUID
    user_id: UUID
    company_name: str

    created_at: datetime = None
    updated_at: datetime = None
