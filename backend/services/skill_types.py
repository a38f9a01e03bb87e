"""Domain types shared by the skill profiling services.

These are plain dataclasses so the scoring functions stay independent
of the ORM and of the GitHub client payload shapes.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class ExperienceLevel(str, Enum):
    """Coarse experience tier derived from aggregate GitHub activity."""

    BEGINNER = "beginner"
    JUNIOR = "junior"
    INTERMEDIATE = "intermediate"
    SENIOR = "senior"


class ProficiencyTier(str, Enum):
    """Per-skill proficiency, ordered from weakest to strongest."""

    NOVICE = "novice"
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    @property
    def rank(self) -> int:
        return _PROFICIENCY_ORDER.index(self)


_PROFICIENCY_ORDER = list(ProficiencyTier)


class SkillCategory(str, Enum):
    """Category buckets, in tie-break evaluation order."""

    PROGRAMMING = "programming"
    FRAMEWORKS = "frameworks"
    DATABASES = "databases"
    TOOLS = "tools"
    CLOUD = "cloud"


@dataclass
class RepositoryRecord:
    """One repository owned or forked by a linked GitHub account."""

    repo_id: int
    name: str
    full_name: str
    description: str | None = None
    html_url: str | None = None
    language: str | None = None
    languages: dict[str, int] = field(default_factory=dict)
    topics: list[str] = field(default_factory=list)
    stars: int = 0
    forks: int = 0
    is_fork: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
    pushed_at: datetime | None = None


@dataclass
class ContributionSummary:
    """Totals over the weekly contribution rows of one linked account."""

    total_commits: int = 0
    total_additions: int = 0
    total_deletions: int = 0
    active_repositories: int = 0


@dataclass
class LinkedAccount:
    """A GitHub identity connected to an application user."""

    github_id: int
    username: str
    user_id: uuid.UUID
    id: uuid.UUID | None = None
    avatar_url: str | None = None
    bio: str | None = None
    public_repos: int = 0
    followers: int = 0
    following: int = 0
    html_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id) if self.id else None,
            "user_id": str(self.user_id),
            "github_id": self.github_id,
            "username": self.username,
            "avatar_url": self.avatar_url,
            "bio": self.bio,
            "public_repos": self.public_repos,
            "followers": self.followers,
            "following": self.following,
            "html_url": self.html_url,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass
class CategorizedSkills:
    """Partition of a skill set into the five category buckets."""

    programming: list[str] = field(default_factory=list)
    frameworks: list[str] = field(default_factory=list)
    databases: list[str] = field(default_factory=list)
    tools: list[str] = field(default_factory=list)
    cloud: list[str] = field(default_factory=list)

    def bucket(self, category: SkillCategory) -> list[str]:
        return getattr(self, category.value)

    def is_empty(self) -> bool:
        return not any(self.bucket(c) for c in SkillCategory)

    def to_dict(self) -> dict[str, list[str]]:
        return {c.value: list(self.bucket(c)) for c in SkillCategory}


@dataclass
class SkillAnalysis:
    """Everything one analysis run derives for a user."""

    skills: list[str]
    categorized: CategorizedSkills
    experience_level: ExperienceLevel
    interests: list[str]
    career_goals: list[str]
    learning_goals: list[str]


@dataclass
class KnowledgeProfile:
    """Per-user aggregate read by roadmap generation."""

    user_id: uuid.UUID
    skills: list[str] = field(default_factory=list)
    interests: list[str] = field(default_factory=list)
    experience_level: str | None = None
    career_goals: list[str] = field(default_factory=list)
    learning_goals: list[str] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": str(self.user_id),
            "skills": list(self.skills),
            "interests": list(self.interests),
            "experience_level": self.experience_level,
            "career_goals": list(self.career_goals),
            "learning_goals": list(self.learning_goals),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass
class ProficiencyRecord:
    """Learning progress for one (user, skill) pair."""

    user_id: uuid.UUID
    skill_name: str
    skill_id: str
    proficiency_level: str
    learning_status: str
    learning_resources: dict[str, Any] = field(default_factory=dict)
    progress_notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": str(self.user_id),
            "skill_name": self.skill_name,
            "skill_id": self.skill_id,
            "proficiency_level": self.proficiency_level,
            "learning_status": self.learning_status,
            "learning_resources": self.learning_resources,
            "progress_notes": self.progress_notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
