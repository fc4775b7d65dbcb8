"""
Cleanup Policy
Retention rules deciding which applications the sweep removes
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import FrozenSet, Tuple

from domain.value_objects import ApplicationStatus


@dataclass(frozen=True)
class RetentionRule:
    """Applications in statuses whose anchor timestamp is older than max_age"""

    name: str
    statuses: FrozenSet[ApplicationStatus]
    anchor: str
    max_age: timedelta

    def cutoff(self, now: datetime) -> datetime:
        return now - self.max_age

    def describe(self) -> str:
        hours = int(self.max_age.total_seconds() // 3600)
        statuses = "/".join(sorted(s.value for s in self.statuses))
        return f"{statuses} applications older than {hours}h (by {self.anchor})"


@dataclass(frozen=True)
class CleanupPolicy:
    rules: Tuple[RetentionRule, ...]

    @classmethod
    def build(
        cls,
        decided_retention_hours: int = 24,
        stale_retention_hours: int = 48,
        sweep_cancelled: bool = False,
        sweep_reviewed: bool = False,
    ) -> "CleanupPolicy":
        decided = timedelta(hours=decided_retention_hours)
        stale = timedelta(hours=stale_retention_hours)

        rules = [
            RetentionRule(
                name="decided",
                statuses=frozenset({ApplicationStatus.HIRED, ApplicationStatus.REJECTED}),
                anchor="reviewed_at",
                max_age=decided,
            ),
            RetentionRule(
                name="stale",
                statuses=frozenset({ApplicationStatus.PENDING, ApplicationStatus.INTERVIEW}),
                anchor="created_at",
                max_age=stale,
            ),
        ]
        # Off by default: product has not decided how long these are kept
        if sweep_cancelled:
            rules.append(RetentionRule(
                name="cancelled",
                statuses=frozenset({ApplicationStatus.CANCELLED}),
                anchor="updated_at",
                max_age=decided,
            ))
        if sweep_reviewed:
            rules.append(RetentionRule(
                name="reviewed",
                statuses=frozenset({ApplicationStatus.REVIEWED}),
                anchor="created_at",
                max_age=stale,
            ))
        return cls(rules=tuple(rules))

    @classmethod
    def from_settings(cls, settings) -> "CleanupPolicy":
        return cls.build(
            decided_retention_hours=settings.CLEANUP_DECIDED_RETENTION_HOURS,
            stale_retention_hours=settings.CLEANUP_STALE_RETENTION_HOURS,
            sweep_cancelled=settings.CLEANUP_SWEEP_CANCELLED,
            sweep_reviewed=settings.CLEANUP_SWEEP_REVIEWED,
        )

    def describe(self) -> list:
        return [rule.describe() for rule in self.rules]
