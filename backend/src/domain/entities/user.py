"""
User Domain Entity
Immutable account business object
"""
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from ..enums import UserRole
from ..value_objects import Email


@dataclass(frozen=True)
class User:
    """User domain entity - immutable"""

    id: UUID
    email: Email
    full_name: str
    role: UserRole
    is_active: bool = True

    created_at: datetime = None
    updated_at: datetime = None

    def __post_init__(self):
        """Validate user data"""
        if not self.full_name or len(self.full_name.strip()) == 0:
            raise ValueError("Full name cannot be empty")

    def __str__(self) -> str:
        return f"User({self.email}, {self.role.value})"
