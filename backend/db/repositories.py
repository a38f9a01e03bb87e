"""Data access for linked accounts, repositories and skill profiles.

Each repository takes the session per call so the caller owns the
transaction. Rows are converted to the dataclasses in
``services.skill_types`` before leaving this module.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import (
    GitHubContribution,
    GitHubRepository,
    GitHubUser,
    UserKnowledgeProfile,
    UserLearningProgress,
)
from services.skill_types import (
    ContributionSummary,
    KnowledgeProfile,
    LinkedAccount,
    ProficiencyRecord,
    RepositoryRecord,
)

# Refresh identity-mapped rows that an upsert just rewrote
_REFRESH = {"populate_existing": True}


def _to_account(row: GitHubUser) -> LinkedAccount:
    return LinkedAccount(
        id=row.id,
        user_id=row.user_id,
        github_id=row.github_id,
        username=row.username,
        avatar_url=row.avatar_url,
        bio=row.bio,
        public_repos=row.public_repos or 0,
        followers=row.followers or 0,
        following=row.following or 0,
        html_url=row.html_url,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _to_repository(row: GitHubRepository) -> RepositoryRecord:
    return RepositoryRecord(
        repo_id=row.repo_id,
        name=row.name,
        full_name=row.full_name,
        description=row.description,
        html_url=row.html_url,
        language=row.language,
        languages=dict(row.languages or {}),
        topics=list(row.topics or []),
        stars=row.stargazers_count or 0,
        forks=row.forks_count or 0,
        is_fork=bool(row.is_fork),
        created_at=row.created_at,
        updated_at=row.updated_at,
        pushed_at=row.pushed_at,
    )


def _to_profile(row: UserKnowledgeProfile) -> KnowledgeProfile:
    return KnowledgeProfile(
        user_id=row.user_id,
        skills=list(row.skills or []),
        interests=list(row.interests or []),
        experience_level=row.experience_level,
        career_goals=list(row.career_goals or []),
        learning_goals=list(row.learning_goals or []),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _to_progress(row: UserLearningProgress) -> ProficiencyRecord:
    return ProficiencyRecord(
        user_id=row.user_id,
        skill_name=row.skill_name,
        skill_id=row.skill_id,
        proficiency_level=row.proficiency_level,
        learning_status=row.learning_status,
        learning_resources=dict(row.learning_resources or {}),
        progress_notes=row.progress_notes,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class GitHubUserRepository:
    """Linked GitHub accounts, keyed by GitHub user id."""

    async def get_by_user_id(
        self, db: AsyncSession, user_id: uuid.UUID
    ) -> LinkedAccount | None:
        result = await db.execute(
            select(GitHubUser)
            .where(GitHubUser.user_id == user_id)
            .order_by(GitHubUser.updated_at.desc())
            .limit(1)
        )
        row = result.scalar_one_or_none()
        return _to_account(row) if row else None

    async def upsert(self, db: AsyncSession, account: LinkedAccount) -> LinkedAccount:
        """Insert or refresh an account; stamps ``updated_at`` as the sync time."""
        values: dict[str, Any] = {
            "user_id": account.user_id,
            "github_id": account.github_id,
            "username": account.username,
            "avatar_url": account.avatar_url,
            "bio": account.bio,
            "public_repos": account.public_repos,
            "followers": account.followers,
            "following": account.following,
            "html_url": account.html_url,
        }
        stmt = (
            pg_insert(GitHubUser)
            .values(**values)
            .on_conflict_do_update(
                index_elements=[GitHubUser.github_id],
                set_={
                    **{k: v for k, v in values.items() if k != "github_id"},
                    "updated_at": func.now(),
                },
            )
            .returning(GitHubUser)
        )
        result = await db.execute(stmt, execution_options=_REFRESH)
        return _to_account(result.scalar_one())

    async def list_all(self, db: AsyncSession) -> list[LinkedAccount]:
        result = await db.execute(select(GitHubUser).order_by(GitHubUser.updated_at.asc()))
        return [_to_account(row) for row in result.scalars().all()]

    async def list_updated_since(
        self, db: AsyncSession, cutoff: datetime
    ) -> list[LinkedAccount]:
        """Accounts synced at or after ``cutoff``, oldest first."""
        result = await db.execute(
            select(GitHubUser)
            .where(GitHubUser.updated_at >= cutoff)
            .order_by(GitHubUser.updated_at.asc())
        )
        return [_to_account(row) for row in result.scalars().all()]


class GitHubRepositoryRepository:
    """Repository snapshots, keyed by GitHub repository id."""

    async def upsert(
        self, db: AsyncSession, github_user_id: uuid.UUID, record: RepositoryRecord
    ) -> None:
        values: dict[str, Any] = {
            "github_user_id": github_user_id,
            "repo_id": record.repo_id,
            "name": record.name,
            "full_name": record.full_name,
            "description": record.description,
            "html_url": record.html_url,
            "stargazers_count": record.stars,
            "forks_count": record.forks,
            "language": record.language,
            "languages": record.languages,
            "topics": record.topics,
            "is_fork": record.is_fork,
            "created_at": record.created_at,
            "updated_at": record.updated_at,
            "pushed_at": record.pushed_at,
        }
        stmt = (
            pg_insert(GitHubRepository)
            .values(**values)
            .on_conflict_do_update(
                index_elements=[GitHubRepository.repo_id],
                set_={
                    **{k: v for k, v in values.items() if k != "repo_id"},
                    "last_synced": func.now(),
                },
            )
        )
        await db.execute(stmt)

    async def list_for_account(
        self, db: AsyncSession, github_user_id: uuid.UUID
    ) -> list[RepositoryRecord]:
        """All repositories of an account, most starred first."""
        result = await db.execute(
            select(GitHubRepository)
            .where(GitHubRepository.github_user_id == github_user_id)
            .order_by(GitHubRepository.stargazers_count.desc())
            .execution_options(**_REFRESH)
        )
        return [_to_repository(row) for row in result.scalars().all()]


class ContributionRepository:
    """Weekly contribution rows and their per-account summary."""

    async def upsert_week(
        self,
        db: AsyncSession,
        github_user_id: uuid.UUID,
        repo_id: int,
        period: date,
        commits: int,
        additions: int,
        deletions: int,
    ) -> None:
        stmt = (
            pg_insert(GitHubContribution)
            .values(
                github_user_id=github_user_id,
                repo_id=repo_id,
                contribution_period=period,
                commit_count=commits,
                additions=additions,
                deletions=deletions,
            )
            .on_conflict_do_update(
                constraint="uq_contribution_week",
                set_={
                    "commit_count": commits,
                    "additions": additions,
                    "deletions": deletions,
                    "updated_at": func.now(),
                },
            )
        )
        await db.execute(stmt)

    async def summarize(
        self, db: AsyncSession, github_user_id: uuid.UUID
    ) -> ContributionSummary:
        result = await db.execute(
            select(
                func.coalesce(func.sum(GitHubContribution.commit_count), 0),
                func.coalesce(func.sum(GitHubContribution.additions), 0),
                func.coalesce(func.sum(GitHubContribution.deletions), 0),
                func.count(func.distinct(GitHubContribution.repo_id)),
            ).where(GitHubContribution.github_user_id == github_user_id)
        )
        commits, additions, deletions, active = result.one()
        return ContributionSummary(
            total_commits=int(commits),
            total_additions=int(additions),
            total_deletions=int(deletions),
            active_repositories=int(active),
        )


class KnowledgeProfileRepository:
    """One knowledge profile per application user."""

    async def get(self, db: AsyncSession, user_id: uuid.UUID) -> KnowledgeProfile | None:
        result = await db.execute(
            select(UserKnowledgeProfile)
            .where(UserKnowledgeProfile.user_id == user_id)
            .execution_options(**_REFRESH)
        )
        row = result.scalar_one_or_none()
        return _to_profile(row) if row else None

    async def save(self, db: AsyncSession, profile: KnowledgeProfile) -> KnowledgeProfile:
        values: dict[str, Any] = {
            "user_id": profile.user_id,
            "skills": profile.skills,
            "interests": profile.interests,
            "experience_level": profile.experience_level,
            "career_goals": profile.career_goals,
            "learning_goals": profile.learning_goals,
        }
        stmt = (
            pg_insert(UserKnowledgeProfile)
            .values(**values)
            .on_conflict_do_update(
                index_elements=[UserKnowledgeProfile.user_id],
                set_={
                    **{k: v for k, v in values.items() if k != "user_id"},
                    "updated_at": func.now(),
                },
            )
            .returning(UserKnowledgeProfile)
        )
        result = await db.execute(stmt, execution_options=_REFRESH)
        return _to_profile(result.scalar_one())


class LearningProgressRepository:
    """Learning progress rows, at most one per (user, skill)."""

    async def list_skill_names(self, db: AsyncSession, user_id: uuid.UUID) -> set[str]:
        result = await db.execute(
            select(UserLearningProgress.skill_name).where(UserLearningProgress.user_id == user_id)
        )
        return set(result.scalars().all())

    async def insert_missing(self, db: AsyncSession, records: list[ProficiencyRecord]) -> int:
        """Insert records whose (user, skill) is absent; returns rows created."""
        if not records:
            return 0
        stmt = (
            pg_insert(UserLearningProgress)
            .values(
                [
                    {
                        "user_id": r.user_id,
                        "skill_name": r.skill_name,
                        "skill_id": r.skill_id,
                        "proficiency_level": r.proficiency_level,
                        "learning_status": r.learning_status,
                        "learning_resources": r.learning_resources,
                        "progress_notes": r.progress_notes,
                    }
                    for r in records
                ]
            )
            .on_conflict_do_nothing(constraint="uq_user_learning_skill")
            .returning(UserLearningProgress.id)
        )
        result = await db.execute(stmt)
        return len(result.all())

    async def update(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        skill_name: str,
        values: dict[str, Any],
    ) -> bool:
        result = await db.execute(
            update(UserLearningProgress)
            .where(
                UserLearningProgress.user_id == user_id,
                UserLearningProgress.skill_name == skill_name,
            )
            .values(**values, updated_at=func.now())
        )
        return result.rowcount > 0

    async def list_for_user(
        self, db: AsyncSession, user_id: uuid.UUID
    ) -> list[ProficiencyRecord]:
        result = await db.execute(
            select(UserLearningProgress)
            .where(UserLearningProgress.user_id == user_id)
            .order_by(UserLearningProgress.updated_at.desc())
            .execution_options(**_REFRESH)
        )
        return [_to_progress(row) for row in result.scalars().all()]
