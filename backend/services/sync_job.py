"""Batch synchronization of every linked GitHub account.

Two modes:

- full: accounts not synced within ``sync_stale_after_hours`` get their
  profile, repositories and contributions refreshed, then re-analyzed.
- incremental: accounts synced within ``sync_incremental_window_days``
  get their repositories refreshed (no contribution statistics), then
  re-analyzed.

Each user runs in its own session and transaction. A failure for one
user is logged and the batch moves on.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config import Settings, get_settings
from app.logging_config import get_logger
from app.metrics import SYNC_JOB_USERS
from db.repositories import GitHubUserRepository
from db.session import get_session_factory
from services.github_sync import GitHubSyncService
from services.skill_types import LinkedAccount
from services.skills_analysis import SkillsAnalysisService

logger = get_logger(__name__)


@dataclass
class SyncJobReport:
    mode: str
    total: int = 0
    succeeded: int = 0
    failed: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
        }


class GitHubSyncJob:
    """Runs full and incremental sync passes over linked accounts."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        sync_service: GitHubSyncService | None = None,
        analysis_service: SkillsAnalysisService | None = None,
        accounts: GitHubUserRepository | None = None,
        settings: Settings | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self.settings = settings or get_settings()
        self._session_factory = session_factory
        self.sync_service = sync_service or GitHubSyncService()
        self.analysis_service = analysis_service or SkillsAnalysisService(self.settings)
        self.accounts = accounts or GitHubUserRepository()
        self._sleep = sleep

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            self._session_factory = get_session_factory()
        return self._session_factory

    def _needs_sync(self, account: LinkedAccount, now: datetime) -> bool:
        if account.updated_at is None:
            return True
        synced_at = account.updated_at
        if synced_at.tzinfo is None:
            synced_at = synced_at.replace(tzinfo=UTC)
        return now - synced_at >= timedelta(hours=self.settings.sync_stale_after_hours)

    async def run_sync(self) -> SyncJobReport:
        """Full sync and analysis of every stale account."""
        now = datetime.now(UTC)
        async with self.session_factory() as db:
            accounts = [a for a in await self.accounts.list_all(db) if self._needs_sync(a, now)]

        logger.info("sync_job_started", mode="full", users=len(accounts))
        report = await self._run(
            "full", accounts, self._sync_full, self.settings.sync_full_delay_seconds
        )
        logger.info("sync_job_completed", **report.to_dict())
        return report

    async def run_incremental_sync(self) -> SyncJobReport:
        """Repository-only refresh of recently active accounts, oldest first."""
        cutoff = datetime.now(UTC) - timedelta(days=self.settings.sync_incremental_window_days)
        async with self.session_factory() as db:
            accounts = await self.accounts.list_updated_since(db, cutoff)

        logger.info("sync_job_started", mode="incremental", users=len(accounts))
        report = await self._run(
            "incremental",
            accounts,
            self._sync_incremental,
            self.settings.sync_incremental_delay_seconds,
        )
        logger.info("sync_job_completed", **report.to_dict())
        return report

    async def _run(
        self,
        mode: str,
        accounts: list[LinkedAccount],
        step: Callable[[AsyncSession, LinkedAccount], Awaitable[None]],
        delay: float,
    ) -> SyncJobReport:
        report = SyncJobReport(mode=mode, total=len(accounts))

        for index, account in enumerate(accounts):
            if index and delay > 0:
                await self._sleep(delay)
            try:
                async with self.session_factory() as db:
                    await step(db, account)
                    await db.commit()
            except Exception:
                report.failed += 1
                SYNC_JOB_USERS.labels(mode=mode, outcome="failed").inc()
                logger.exception("sync_job_user_failed", mode=mode, user_id=str(account.user_id))
                continue

            report.succeeded += 1
            SYNC_JOB_USERS.labels(mode=mode, outcome="succeeded").inc()

        return report

    async def _sync_full(self, db: AsyncSession, account: LinkedAccount) -> None:
        await self.sync_service.sync_user_data(db, account.username, account.user_id)
        await self.analysis_service.analyze_and_store_skills(db, account.user_id)

    async def _sync_incremental(self, db: AsyncSession, account: LinkedAccount) -> None:
        await self.sync_service.sync_user_repositories(db, account, include_contributions=False)
        await self.analysis_service.analyze_and_store_skills(db, account.user_id)
