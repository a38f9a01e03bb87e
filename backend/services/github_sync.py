"""GitHub account synchronization.

Copies a user's GitHub profile, repositories and weekly contribution
statistics into the profile store. Repositories are processed one at a
time; a GitHub failure on one repository is logged and that repository
is skipped, while store failures propagate to the caller.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import REPOSITORY_SYNC_ERRORS
from app.logging_config import get_logger
from app.metrics import REPOSITORIES_SYNCED
from db.repositories import (
    ContributionRepository,
    GitHubRepositoryRepository,
    GitHubUserRepository,
)
from services.github_service import GitHubService
from services.skill_types import LinkedAccount, RepositoryRecord

logger = get_logger(__name__)


@dataclass
class RepositorySyncResult:
    synced: int = 0
    failed: int = 0
    contribution_weeks: int = 0


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def repository_from_payload(
    payload: dict[str, Any],
    languages: dict[str, int],
    topics: list[str],
) -> RepositoryRecord:
    """Build a RepositoryRecord from a GitHub ``repos`` list entry."""
    return RepositoryRecord(
        repo_id=payload["id"],
        name=payload.get("name", ""),
        full_name=payload.get("full_name", ""),
        description=payload.get("description"),
        html_url=payload.get("html_url"),
        language=payload.get("language"),
        languages=languages,
        topics=topics,
        stars=payload.get("stargazers_count", 0) or 0,
        forks=payload.get("forks_count", 0) or 0,
        is_fork=bool(payload.get("fork", False)),
        created_at=_parse_timestamp(payload.get("created_at")),
        updated_at=_parse_timestamp(payload.get("updated_at")),
        pushed_at=_parse_timestamp(payload.get("pushed_at")),
    )


def account_from_payload(payload: dict[str, Any], user_id: uuid.UUID) -> LinkedAccount:
    return LinkedAccount(
        user_id=user_id,
        github_id=payload["id"],
        username=payload.get("login", ""),
        avatar_url=payload.get("avatar_url"),
        bio=payload.get("bio"),
        public_repos=payload.get("public_repos", 0) or 0,
        followers=payload.get("followers", 0) or 0,
        following=payload.get("following", 0) or 0,
        html_url=payload.get("html_url"),
    )


class GitHubSyncService:
    """Synchronizes linked GitHub accounts into the profile store."""

    def __init__(
        self,
        github: GitHubService | None = None,
        accounts: GitHubUserRepository | None = None,
        repositories: GitHubRepositoryRepository | None = None,
        contributions: ContributionRepository | None = None,
    ) -> None:
        self.github = github or GitHubService()
        self.accounts = accounts or GitHubUserRepository()
        self.repositories = repositories or GitHubRepositoryRepository()
        self.contributions = contributions or ContributionRepository()

    async def sync_user_data(
        self, db: AsyncSession, username: str, user_id: uuid.UUID
    ) -> LinkedAccount:
        """Fetch and store a GitHub user, then sync all of their repositories.

        Raises GitHubUserNotFoundError when the login does not exist.
        """
        user_data = await self.github.fetch_user(username)
        account = await self.accounts.upsert(db, account_from_payload(user_data, user_id))

        result = await self.sync_user_repositories(db, account)
        logger.info(
            "github_user_synced",
            user_id=str(user_id),
            repositories_synced=result.synced,
            repositories_failed=result.failed,
        )
        return account

    async def sync_user_repositories(
        self,
        db: AsyncSession,
        account: LinkedAccount,
        include_contributions: bool = True,
    ) -> RepositorySyncResult:
        """Upsert every repository of an account, skipping ones GitHub fails on."""
        payloads = await self.github.fetch_repositories(account.username)
        result = RepositorySyncResult()

        for payload in payloads:
            full_name = payload.get("full_name") or f"{account.username}/{payload.get('name')}"
            try:
                languages = await self.github.fetch_languages(full_name)
                if "topics" in payload:
                    topics = list(payload.get("topics") or [])
                else:
                    topics = await self.github.fetch_topics(full_name)
            except REPOSITORY_SYNC_ERRORS as exc:
                result.failed += 1
                REPOSITORIES_SYNCED.labels(status="failed").inc()
                logger.warning("repository_sync_failed", repo=full_name, error_code=exc.code)
                continue

            record = repository_from_payload(payload, languages, topics)
            await self.repositories.upsert(db, account.id, record)
            result.synced += 1
            REPOSITORIES_SYNCED.labels(status="synced").inc()

            if include_contributions:
                result.contribution_weeks += await self.sync_repository_contributions(
                    db, account, record
                )

        return result

    async def sync_repository_contributions(
        self,
        db: AsyncSession,
        account: LinkedAccount,
        record: RepositoryRecord,
    ) -> int:
        """Store the account's non-empty commit weeks for one repository."""
        try:
            stats = await self.github.fetch_contributor_stats(record.full_name)
        except REPOSITORY_SYNC_ERRORS as exc:
            logger.warning("contribution_sync_failed", repo=record.full_name, error_code=exc.code)
            return 0

        login = account.username.lower()
        user_stats = next(
            (
                s
                for s in stats
                if ((s.get("author") or {}).get("login") or "").lower() == login
            ),
            None,
        )
        if not user_stats:
            return 0

        weeks = 0
        for week in user_stats.get("weeks") or []:
            commits = week.get("c", 0)
            if commits <= 0:
                continue
            await self.contributions.upsert_week(
                db,
                account.id,
                record.repo_id,
                datetime.fromtimestamp(week["w"], UTC).date(),
                commits,
                week.get("a", 0),
                week.get("d", 0),
            )
            weeks += 1
        return weeks
