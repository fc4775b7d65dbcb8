"""Value Objects - Immutable objects defined by their attributes"""

from .email import Email
from .actor import Actor
from .operation_result import OperationResult
from .application_status import (
    ApplicationStatus,
    ALLOWED_TRANSITIONS,
    CANCELLABLE_STATUSES,
    FILE_PURGE_STATUSES,
    SUPERSEDABLE_STATUSES,
    can_transition,
)
__all__ = [
    "Email",
    "Actor",
    "OperationResult",
    "ApplicationStatus",
    "ALLOWED_TRANSITIONS",
    "CANCELLABLE_STATUSES",
    "FILE_PURGE_STATUSES",
    "SUPERSEDABLE_STATUSES",
    "can_transition",
]
