"""
Tests for the retention cleanup engine
"""
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from application.services.cleanup.engine import CleanupEngine
from application.services.cleanup.policy import CleanupPolicy
from core.clock import utc_now
from domain.entities import Application
from domain.value_objects import ApplicationStatus, OperationResult
from infrastructure.persistence.repositories.application import SQLAlchemyApplicationRepository

from conftest import create_job, insert_application


@pytest.fixture
def now():
    return utc_now()


def build_engine(session, file_store, now, **policy):
    return CleanupEngine(
        SQLAlchemyApplicationRepository(session),
        file_store,
        CleanupPolicy.build(**policy),
        clock=lambda: now,
    )


async def seed(session, marketplace, now, status, age: timedelta, reviewed_age=None, resume_url=None):
    """One application per fresh job so the talent/job pair stays unique"""
    job = await create_job(session, marketplace.company.company_id)
    return await insert_application(
        session,
        marketplace.talent,
        job.id,
        marketplace.company.company_id,
        status=status,
        created_at=now - age,
        reviewed_at=(now - reviewed_age) if reviewed_age is not None else None,
        resume_url=resume_url,
    )


class TestCleanupPolicy:
    """Rule construction"""

    def test_default_rules(self):
        policy = CleanupPolicy.build()
        assert [rule.name for rule in policy.rules] == ["decided", "stale"]
        assert policy.rules[0].anchor == "reviewed_at"
        assert policy.rules[1].max_age == timedelta(hours=48)

    def test_optional_rules(self):
        policy = CleanupPolicy.build(sweep_cancelled=True, sweep_reviewed=True)
        assert [rule.name for rule in policy.rules] == ["decided", "stale", "cancelled", "reviewed"]

    def test_describe(self):
        descriptions = CleanupPolicy.build(decided_retention_hours=12).describe()
        assert descriptions[0] == "hired/rejected applications older than 12h (by reviewed_at)"


class TestCleanupEngine:
    """Test suite for CleanupEngine against the database"""

    @pytest.mark.asyncio
    async def test_stale_pending_removed(self, session, marketplace, file_store, now):
        old = await seed(session, marketplace, now, ApplicationStatus.PENDING, timedelta(days=3))
        recent = await seed(session, marketplace, now, ApplicationStatus.PENDING, timedelta(days=1))

        summary = await build_engine(session, file_store, now).run()
        await session.commit()

        repo = SQLAlchemyApplicationRepository(session)
        assert summary.deleted_applications == 1
        assert summary.failed == 0
        assert await repo.get_by_id(old.id) is None
        assert await repo.get_by_id(recent.id) is not None

    @pytest.mark.asyncio
    async def test_decided_removed_by_review_age(self, session, marketplace, file_store, now):
        old = await seed(
            session, marketplace, now, ApplicationStatus.HIRED,
            timedelta(days=5), reviewed_age=timedelta(hours=25),
        )
        recent = await seed(
            session, marketplace, now, ApplicationStatus.HIRED,
            timedelta(days=5), reviewed_age=timedelta(hours=10),
        )

        summary = await build_engine(session, file_store, now).run()
        await session.commit()

        repo = SQLAlchemyApplicationRepository(session)
        assert summary.deleted_applications == 1
        assert await repo.get_by_id(old.id) is None
        assert await repo.get_by_id(recent.id) is not None

    @pytest.mark.asyncio
    async def test_deletes_resume_files(self, session, marketplace, file_store, now):
        cv = await file_store.save("cv.pdf", b"resume")
        await seed(
            session, marketplace, now, ApplicationStatus.REJECTED,
            timedelta(days=3), reviewed_age=timedelta(days=2), resume_url=cv.url,
        )
        # Row points at a file that is already gone
        await seed(
            session, marketplace, now, ApplicationStatus.PENDING,
            timedelta(days=3), resume_url="/uploads/applications/missing.pdf",
        )

        summary = await build_engine(session, file_store, now).run()

        assert summary.deleted_applications == 2
        assert summary.deleted_files == 1
        assert file_store.resolve(cv.url) is None

    @pytest.mark.asyncio
    async def test_shared_resume_kept_for_live_application(self, session, marketplace, file_store, now):
        cv = await file_store.save("cv.pdf", b"resume")
        stale = await seed(
            session, marketplace, now, ApplicationStatus.REJECTED,
            timedelta(days=3), reviewed_age=timedelta(days=2), resume_url=cv.url,
        )
        live = await seed(session, marketplace, now, ApplicationStatus.PENDING, timedelta(hours=2), resume_url=cv.url)

        summary = await build_engine(session, file_store, now).run()

        repo = SQLAlchemyApplicationRepository(session)
        assert summary.deleted_applications == 1
        assert summary.deleted_files == 0
        assert await repo.get_by_id(stale.id) is None
        assert await repo.get_by_id(live.id) is not None
        assert file_store.resolve(cv.url) is not None

    @pytest.mark.asyncio
    async def test_shared_resume_removed_with_last_reference(self, session, marketplace, file_store, now):
        cv = await file_store.save("cv.pdf", b"resume")
        for _ in range(2):
            await seed(session, marketplace, now, ApplicationStatus.PENDING, timedelta(days=3), resume_url=cv.url)

        summary = await build_engine(session, file_store, now).run()

        assert summary.deleted_applications == 2
        assert summary.deleted_files == 1
        assert file_store.resolve(cv.url) is None

    @pytest.mark.asyncio
    async def test_second_run_finds_nothing(self, session, marketplace, file_store, now):
        await seed(session, marketplace, now, ApplicationStatus.INTERVIEW, timedelta(days=4))
        engine = build_engine(session, file_store, now)

        first = await engine.run()
        await session.commit()
        second = await engine.run()

        assert first.deleted_applications == 1
        assert second.deleted_applications == 0
        assert second.deleted_files == 0

    @pytest.mark.asyncio
    async def test_cancelled_kept_unless_enabled(self, session, marketplace, file_store, now):
        cancelled = await seed(session, marketplace, now, ApplicationStatus.CANCELLED, timedelta(days=10))

        default_run = await build_engine(session, file_store, now).run()
        assert default_run.deleted_applications == 0

        sweeping_run = await build_engine(session, file_store, now, sweep_cancelled=True).run()
        await session.commit()
        assert sweeping_run.deleted_applications == 1
        assert await SQLAlchemyApplicationRepository(session).get_by_id(cancelled.id) is None

    @pytest.mark.asyncio
    async def test_preview_has_no_side_effects(self, session, marketplace, file_store, now):
        old = await seed(session, marketplace, now, ApplicationStatus.PENDING, timedelta(days=3, hours=5))
        await seed(session, marketplace, now, ApplicationStatus.PENDING, timedelta(hours=5))

        candidates = await build_engine(session, file_store, now).preview()

        assert len(candidates) == 1
        candidate = candidates[0]
        assert candidate.application_id == old.id
        assert candidate.rule == "stale"
        assert candidate.age_days == 3
        assert candidate.review_age_days is None
        assert await SQLAlchemyApplicationRepository(session).get_by_id(old.id) is not None

    @pytest.mark.asyncio
    async def test_status_counts(self, session, marketplace, file_store, now):
        await seed(session, marketplace, now, ApplicationStatus.PENDING, timedelta(days=3))
        await seed(session, marketplace, now, ApplicationStatus.PENDING, timedelta(hours=1))
        await seed(
            session, marketplace, now, ApplicationStatus.REJECTED,
            timedelta(days=2), reviewed_age=timedelta(days=2),
        )
        await seed(session, marketplace, now, ApplicationStatus.REVIEWED, timedelta(days=9))

        status = await build_engine(session, file_store, now).status(timezone="Asia/Jakarta")

        assert status.total_applications == 4
        assert status.counts_by_status["pending"] == 2
        assert status.pending_applications == 2
        assert status.reviewed_applications == 1
        assert status.counts_by_rule == {"decided": 1, "stale": 1}
        assert status.total_to_cleanup == 2
        assert status.timezone == "Asia/Jakarta"


class TestCleanupEngineFailures:
    """Per-candidate failure isolation"""

    @staticmethod
    def stale_application() -> Application:
        created = datetime(2026, 1, 1, tzinfo=timezone.utc)
        return Application(
            id=uuid4(),
            talent_id=uuid4(),
            job_id=uuid4(),
            company_id=uuid4(),
            status=ApplicationStatus.PENDING,
            resume_url="/uploads/applications/cv.pdf",
            created_at=created,
            updated_at=created,
        )

    @pytest.mark.asyncio
    async def test_one_failure_does_not_stop_the_batch(self):
        broken, healthy = self.stale_application(), self.stale_application()

        repo = AsyncMock()
        repo.count_resume_references.return_value = 0
        repo.find_older_than.side_effect = [[], [broken, healthy]]
        repo.delete.side_effect = [RuntimeError("row locked"), True]

        file_store = AsyncMock()
        file_store.delete.return_value = OperationResult.success(True)

        engine = CleanupEngine(
            repo, file_store, CleanupPolicy.build(),
            clock=lambda: datetime(2026, 2, 1, tzinfo=timezone.utc),
        )
        summary = await engine.run()

        assert summary.failed == 1
        assert summary.deleted_applications == 1
        assert summary.deleted_files == 2
        assert repo.delete.await_count == 2

    @pytest.mark.asyncio
    async def test_file_failure_still_deletes_record(self):
        application = self.stale_application()

        repo = AsyncMock()
        repo.count_resume_references.return_value = 0
        repo.find_older_than.side_effect = [[], [application]]
        repo.delete.return_value = True

        file_store = AsyncMock()
        file_store.delete.return_value = OperationResult.failure("permission denied")

        engine = CleanupEngine(repo, file_store, CleanupPolicy.build())
        summary = await engine.run()

        assert summary.deleted_applications == 1
        assert summary.deleted_files == 0
        assert summary.failed == 0

    @pytest.mark.asyncio
    async def test_candidate_matched_twice_is_processed_once(self):
        application = self.stale_application()

        repo = AsyncMock()
        repo.count_resume_references.return_value = 0
        repo.find_older_than.side_effect = [[application], [application]]
        repo.delete.return_value = True

        file_store = AsyncMock()
        file_store.delete.return_value = OperationResult.success(True)

        summary = await CleanupEngine(repo, file_store, CleanupPolicy.build()).run()

        assert summary.deleted_applications == 1
        repo.delete.assert_awaited_once_with(application.id)
