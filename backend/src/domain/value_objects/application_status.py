"""
Application Status
Status enumeration and the allowed transition graph
"""
from enum import Enum
from typing import Dict, FrozenSet


class ApplicationStatus(str, Enum):
    """Job application status"""
    PENDING = "pending"
    REVIEWED = "reviewed"
    INTERVIEW = "interview"
    HIRED = "hired"
    REJECTED = "rejected"
    CANCELLED = "cancelled"

# A talent may re-apply over these after the old record is removed
SUPERSEDABLE_STATUSES: FrozenSet[ApplicationStatus] = frozenset({
    ApplicationStatus.REJECTED,
    ApplicationStatus.CANCELLED,
})

# Statuses a talent may withdraw from
CANCELLABLE_STATUSES: FrozenSet[ApplicationStatus] = frozenset({
    ApplicationStatus.PENDING,
    ApplicationStatus.REVIEWED,
    ApplicationStatus.INTERVIEW,
})

# Reaching one of these removes the attached resume
FILE_PURGE_STATUSES: FrozenSet[ApplicationStatus] = frozenset({
    ApplicationStatus.HIRED,
    ApplicationStatus.REJECTED,
})

ALLOWED_TRANSITIONS: Dict[ApplicationStatus, FrozenSet[ApplicationStatus]] = {
    ApplicationStatus.PENDING: frozenset({
        ApplicationStatus.REVIEWED,
        ApplicationStatus.INTERVIEW,
        ApplicationStatus.REJECTED,
        ApplicationStatus.HIRED,
        ApplicationStatus.CANCELLED,
    }),
    ApplicationStatus.REVIEWED: frozenset({
        ApplicationStatus.INTERVIEW,
        ApplicationStatus.HIRED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.CANCELLED,
    }),
    ApplicationStatus.INTERVIEW: frozenset({
        ApplicationStatus.HIRED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.CANCELLED,
    }),
    ApplicationStatus.HIRED: frozenset(),
    ApplicationStatus.REJECTED: frozenset(),
    ApplicationStatus.CANCELLED: frozenset(),
}


def can_transition(current: ApplicationStatus, target: ApplicationStatus) -> bool:
    """Check whether the graph has an edge current -> target"""
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())
