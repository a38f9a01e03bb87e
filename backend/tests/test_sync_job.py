"""Tests for the batch GitHub sync job."""

import uuid
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from services.skill_types import LinkedAccount
from services.sync_job import GitHubSyncJob


class FakeSession:
    def __init__(self, factory):
        self.factory = factory

    async def __aenter__(self):
        self.factory.opened += 1
        return self

    async def __aexit__(self, *exc_info):
        return False

    async def commit(self):
        self.factory.commits += 1


class FakeSessionFactory:
    def __init__(self):
        self.opened = 0
        self.commits = 0

    def __call__(self):
        return FakeSession(self)


def _account(accounts, github_id, updated_at):
    account = LinkedAccount(
        id=uuid.uuid4(),
        github_id=github_id,
        username=f"user{github_id}",
        user_id=uuid.uuid4(),
        updated_at=updated_at,
    )
    accounts.rows[github_id] = account
    return account


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def session_factory():
    return FakeSessionFactory()


@pytest.fixture
def job(test_settings, accounts, session_factory, sleeps):
    async def record_sleep(seconds):
        sleeps.append(seconds)

    return GitHubSyncJob(
        session_factory=session_factory,
        sync_service=AsyncMock(),
        analysis_service=AsyncMock(),
        accounts=accounts,
        settings=test_settings,
        sleep=record_sleep,
    )


class TestFullSync:
    """Test suite for GitHubSyncJob.run_sync."""

    async def test_only_stale_accounts(self, job, accounts, session_factory, sleeps):
        now = datetime.now(UTC)
        stale_a = _account(accounts, 1, now - timedelta(days=3))
        stale_b = _account(accounts, 2, now - timedelta(hours=25))
        _account(accounts, 3, now - timedelta(hours=2))

        report = await job.run_sync()

        assert report.to_dict() == {"mode": "full", "total": 2, "succeeded": 2, "failed": 0}
        synced = [c.args[1] for c in job.sync_service.sync_user_data.await_args_list]
        assert synced == [stale_a.username, stale_b.username]
        analyzed = [c.args[1] for c in job.analysis_service.analyze_and_store_skills.await_args_list]
        assert analyzed == [stale_a.user_id, stale_b.user_id]
        assert sleeps == [1.0]
        assert session_factory.commits == 2

    async def test_failure_does_not_stop_batch(self, job, accounts, session_factory):
        old = datetime.now(UTC) - timedelta(days=2)
        _account(accounts, 1, old - timedelta(hours=1))
        second = _account(accounts, 2, old)
        job.sync_service.sync_user_data.side_effect = [RuntimeError("GitHub down"), None]

        report = await job.run_sync()

        assert report.failed == 1
        assert report.succeeded == 1
        job.analysis_service.analyze_and_store_skills.assert_awaited_once()
        assert job.analysis_service.analyze_and_store_skills.await_args.args[1] == (
            second.user_id
        )
        assert session_factory.commits == 1

    def test_naive_and_missing_timestamps_are_stale(self, job):
        now = datetime.now(UTC)
        naive = LinkedAccount(
            github_id=1,
            username="user1",
            user_id=uuid.uuid4(),
            updated_at=now.replace(tzinfo=None) - timedelta(hours=30),
        )
        never = LinkedAccount(github_id=2, username="user2", user_id=uuid.uuid4())
        fresh = LinkedAccount(
            github_id=3,
            username="user3",
            user_id=uuid.uuid4(),
            updated_at=now.replace(tzinfo=None) - timedelta(hours=1),
        )

        assert job._needs_sync(naive, now)
        assert job._needs_sync(never, now)
        assert not job._needs_sync(fresh, now)

    async def test_no_accounts(self, job, sleeps):
        report = await job.run_sync()
        assert report.total == 0
        assert sleeps == []


class TestIncrementalSync:
    """Test suite for GitHubSyncJob.run_incremental_sync."""

    async def test_recent_accounts_oldest_first(self, job, accounts, sleeps):
        now = datetime.now(UTC)
        newest = _account(accounts, 1, now - timedelta(hours=1))
        oldest = _account(accounts, 2, now - timedelta(days=2))
        _account(accounts, 3, now - timedelta(days=10))

        report = await job.run_incremental_sync()

        assert report.total == 2
        calls = job.sync_service.sync_user_repositories.await_args_list
        assert [c.args[1].github_id for c in calls] == [oldest.github_id, newest.github_id]
        assert all(c.kwargs == {"include_contributions": False} for c in calls)
        job.sync_service.sync_user_data.assert_not_awaited()
        assert job.analysis_service.analyze_and_store_skills.await_count == 2
        assert sleeps == [0.5]

    async def test_each_user_in_own_session(self, job, accounts, session_factory):
        now = datetime.now(UTC)
        _account(accounts, 1, now - timedelta(hours=3))
        _account(accounts, 2, now - timedelta(hours=2))
        job.analysis_service.analyze_and_store_skills.side_effect = [RuntimeError("boom"), None]

        report = await job.run_incremental_sync()

        assert report.failed == 1
        assert report.succeeded == 1
        # one session to list accounts plus one per user
        assert session_factory.opened == 3
        assert session_factory.commits == 1
