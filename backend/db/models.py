"""Database models for linked accounts, repositories and skill profiles.

Application users live in the external auth provider; ``user_id``
columns hold their ids without a local foreign key.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime

from sqlalchemy import (
    ARRAY,
    BigInteger,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


class GitHubUser(TimestampMixin, Base):
    """A GitHub account linked to an application user.

    ``updated_at`` doubles as the last-sync timestamp for the batch job.
    """

    __tablename__ = "github_users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    github_id: Mapped[int] = mapped_column(BigInteger, nullable=False, unique=True)
    username: Mapped[str] = mapped_column(String(39), nullable=False)
    avatar_url: Mapped[str | None] = mapped_column(Text)
    bio: Mapped[str | None] = mapped_column(Text)
    public_repos: Mapped[int] = mapped_column(Integer, default=0)
    followers: Mapped[int] = mapped_column(Integer, default=0)
    following: Mapped[int] = mapped_column(Integer, default=0)
    html_url: Mapped[str | None] = mapped_column(Text)

    def __repr__(self) -> str:
        return f"<GitHubUser(id={self.id}, github_id={self.github_id})>"


class GitHubRepository(Base):
    """Repository snapshot, upserted by GitHub repository id on every sync."""

    __tablename__ = "github_repositories"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    github_user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("github_users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    repo_id: Mapped[int] = mapped_column(BigInteger, nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    html_url: Mapped[str | None] = mapped_column(Text)
    stargazers_count: Mapped[int] = mapped_column(Integer, default=0)
    forks_count: Mapped[int] = mapped_column(Integer, default=0)
    language: Mapped[str | None] = mapped_column(String(50))
    languages: Mapped[dict] = mapped_column(JSONB, default=dict)
    topics: Mapped[list[str]] = mapped_column(ARRAY(String(50)), default=list)
    is_fork: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    pushed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    last_synced: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<GitHubRepository(repo_id={self.repo_id}, name={self.name})>"


class GitHubContribution(Base):
    """Weekly commit totals of one account in one repository."""

    __tablename__ = "github_contributions"
    __table_args__ = (
        UniqueConstraint(
            "github_user_id", "repo_id", "contribution_period", name="uq_contribution_week"
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    github_user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("github_users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    repo_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    commit_count: Mapped[int] = mapped_column(Integer, default=0)
    additions: Mapped[int] = mapped_column(Integer, default=0)
    deletions: Mapped[int] = mapped_column(Integer, default=0)
    contribution_period: Mapped[date] = mapped_column(Date, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<GitHubContribution(repo_id={self.repo_id}, period={self.contribution_period})>"


class UserKnowledgeProfile(TimestampMixin, Base):
    """Skill/goal profile consumed by roadmap generation."""

    __tablename__ = "user_knowledge_profiles"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, unique=True)
    skills: Mapped[list[str]] = mapped_column(ARRAY(Text), default=list)
    interests: Mapped[list[str]] = mapped_column(ARRAY(Text), default=list)
    experience_level: Mapped[str | None] = mapped_column(String(20))
    career_goals: Mapped[list[str]] = mapped_column(ARRAY(Text), default=list)
    learning_goals: Mapped[list[str]] = mapped_column(ARRAY(Text), default=list)

    def __repr__(self) -> str:
        return f"<UserKnowledgeProfile(user_id={self.user_id}, skills={len(self.skills or [])})>"


class UserLearningProgress(TimestampMixin, Base):
    """Proficiency and learning status for one skill of one user."""

    __tablename__ = "user_learning_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "skill_name", name="uq_user_learning_skill"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    skill_name: Mapped[str] = mapped_column(String(100), nullable=False)
    skill_id: Mapped[str] = mapped_column(String(100), nullable=False)
    proficiency_level: Mapped[str] = mapped_column(String(20), nullable=False)
    learning_status: Mapped[str] = mapped_column(String(20), nullable=False)
    learning_resources: Mapped[dict] = mapped_column(JSONB, default=dict)
    progress_notes: Mapped[str | None] = mapped_column(Text)

    def __repr__(self) -> str:
        return f"<UserLearningProgress(skill={self.skill_name}, level={self.proficiency_level})>"
