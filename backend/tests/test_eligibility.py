"""
Tests for apply eligibility
"""
from datetime import datetime, timezone
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from application.services.applications.eligibility import EligibilityResolver
from domain.entities import Application
from domain.value_objects import ApplicationStatus


def existing_application(status: ApplicationStatus) -> Application:
    now = datetime.now(timezone.utc)
    return Application(
        id=uuid4(),
        talent_id=uuid4(),
        job_id=uuid4(),
        company_id=uuid4(),
        status=status,
        created_at=now,
        updated_at=now,
    )


class TestEligibilityResolver:
    """Test suite for EligibilityResolver.can_apply"""

    @pytest.mark.asyncio
    async def test_first_application_allowed(self):
        repo = AsyncMock()
        repo.get_by_talent_and_job.return_value = None

        decision = await EligibilityResolver(repo).can_apply(uuid4(), uuid4())

        assert decision.allowed
        assert not decision.supersede
        assert decision.existing is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [ApplicationStatus.REJECTED, ApplicationStatus.CANCELLED])
    async def test_reapply_supersedes_closed_application(self, status):
        previous = existing_application(status)
        repo = AsyncMock()
        repo.get_by_talent_and_job.return_value = previous

        decision = await EligibilityResolver(repo).can_apply(previous.talent_id, previous.job_id)

        assert decision.allowed
        assert decision.supersede
        assert decision.existing is previous

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [
        ApplicationStatus.PENDING,
        ApplicationStatus.REVIEWED,
        ApplicationStatus.INTERVIEW,
        ApplicationStatus.HIRED,
    ])
    async def test_active_application_blocks(self, status):
        previous = existing_application(status)
        repo = AsyncMock()
        repo.get_by_talent_and_job.return_value = previous

        decision = await EligibilityResolver(repo).can_apply(previous.talent_id, previous.job_id)

        assert not decision.allowed
        assert status.value in decision.reason
        assert decision.existing is previous
