"""
Actor Value Object
The authenticated caller as seen by the application services
"""
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from ..enums import UserRole


@dataclass(frozen=True)
class Actor:
    """Caller identity with the marketplace profile resolved"""

    user_id: UUID
    role: UserRole
    talent_id: Optional[UUID] = None
    company_id: Optional[UUID] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_talent(self) -> bool:
        return self.role == UserRole.TALENT

    @property
    def is_company(self) -> bool:
        return self.role == UserRole.COMPANY

    def owns_as_talent(self, talent_id: UUID) -> bool:
        return self.is_talent and self.talent_id is not None and self.talent_id == talent_id

    def owns_as_company(self, company_id: UUID) -> bool:
        return self.is_company and self.company_id is not None and self.company_id == company_id
