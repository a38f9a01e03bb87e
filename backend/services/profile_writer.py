"""Knowledge profile and learning progress persistence.

Skills accumulate: each run's skills are unioned into the stored list
and never removed. Interests, goals and experience level are replaced
by the latest run unless the merge strategy is ``union``.

Learning progress rows are created once per (user, skill) and left
untouched by later runs; explicit updates go through
``SkillsAnalysisService.update_skill_proficiency``.
"""

from __future__ import annotations

import re
import uuid
from collections.abc import Iterable, Sequence
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import ProfileMergeStrategy
from app.exceptions import PersistenceError
from app.logging_config import get_logger
from app.metrics import PROGRESS_RECORDS_CREATED
from db.repositories import KnowledgeProfileRepository, LearningProgressRepository
from services.skill_categorizer import categorize_skill
from services.skill_scoring import determine_proficiency_level, related_projects
from services.skill_types import (
    KnowledgeProfile,
    ProficiencyRecord,
    ProficiencyTier,
    RepositoryRecord,
    SkillAnalysis,
    SkillCategory,
)

logger = get_logger(__name__)

RESOURCES_BY_CATEGORY: dict[SkillCategory, list[dict[str, str]]] = {
    SkillCategory.PROGRAMMING: [
        {"type": "documentation", "title": "Official {skill} Documentation"},
    ],
    SkillCategory.FRAMEWORKS: [
        {"type": "tutorial", "title": "{skill} Getting Started Guide"},
    ],
    SkillCategory.DATABASES: [
        {"type": "documentation", "title": "{skill} Data Modeling Guide"},
    ],
    SkillCategory.TOOLS: [
        {"type": "documentation", "title": "{skill} User Guide"},
    ],
    SkillCategory.CLOUD: [
        {"type": "certification", "title": "{skill} Fundamentals Certification"},
    ],
}

COMMON_RESOURCES: list[dict[str, str]] = [
    {"type": "practice", "title": "{skill} Coding Challenges", "platform": "HackerRank/LeetCode"},
    {"type": "course", "title": "Learn {skill}", "platform": "Online Learning Platforms"},
]

MAX_RELATED_PROJECTS = 5


def suggest_learning_resources(skill: str) -> list[dict[str, str]]:
    templates = [*RESOURCES_BY_CATEGORY[categorize_skill(skill)], *COMMON_RESOURCES]
    return [{key: value.format(skill=skill) for key, value in t.items()} for t in templates]


def skill_slug(skill: str) -> str:
    return re.sub(r"\s+", "_", skill).lower()


def learning_status_for(tier: ProficiencyTier) -> str:
    # Novice (no repository evidence) is tagged practicing, like intermediate and up.
    return "learning" if tier == ProficiencyTier.BEGINNER else "practicing"


def _union(existing: Iterable[str], new: Iterable[str]) -> list[str]:
    return list(dict.fromkeys([*existing, *new]))


def build_progress_record(
    user_id: uuid.UUID, skill: str, repositories: Sequence[RepositoryRecord]
) -> ProficiencyRecord:
    tier = determine_proficiency_level(skill, repositories)
    resources: dict[str, Any] = {
        "github_projects": related_projects(skill, repositories, MAX_RELATED_PROJECTS),
        "suggested_resources": suggest_learning_resources(skill),
    }
    return ProficiencyRecord(
        user_id=user_id,
        skill_name=skill,
        skill_id=skill_slug(skill),
        proficiency_level=tier.value,
        learning_status=learning_status_for(tier),
        learning_resources=resources,
        progress_notes=f"Skill identified from GitHub repositories. Current level: {tier.value}",
    )


class ProfileWriter:
    """Persists analysis results for one user."""

    def __init__(
        self,
        profiles: KnowledgeProfileRepository | None = None,
        progress: LearningProgressRepository | None = None,
        merge_strategy: ProfileMergeStrategy = ProfileMergeStrategy.OVERWRITE,
    ) -> None:
        self.profiles = profiles or KnowledgeProfileRepository()
        self.progress = progress or LearningProgressRepository()
        self.merge_strategy = merge_strategy

    def merge(
        self,
        existing: KnowledgeProfile | None,
        user_id: uuid.UUID,
        analysis: SkillAnalysis,
    ) -> KnowledgeProfile:
        """Combine a stored profile with a new analysis."""
        profile = KnowledgeProfile(
            user_id=user_id,
            skills=list(analysis.skills),
            interests=list(analysis.interests),
            experience_level=analysis.experience_level.value,
            career_goals=list(analysis.career_goals),
            learning_goals=list(analysis.learning_goals),
        )
        if existing is None:
            return profile

        profile.skills = _union(existing.skills, analysis.skills)
        if self.merge_strategy == ProfileMergeStrategy.UNION:
            profile.interests = _union(existing.interests, analysis.interests)
            profile.career_goals = _union(existing.career_goals, analysis.career_goals)
            profile.learning_goals = _union(existing.learning_goals, analysis.learning_goals)
        return profile

    async def write_profile(
        self, db: AsyncSession, user_id: uuid.UUID, analysis: SkillAnalysis
    ) -> KnowledgeProfile:
        try:
            existing = await self.profiles.get(db, user_id)
            saved = await self.profiles.save(db, self.merge(existing, user_id, analysis))
        except SQLAlchemyError as exc:
            logger.exception("knowledge_profile_write_failed", user_id=str(user_id))
            raise PersistenceError("knowledge_profile") from exc

        logger.info(
            "knowledge_profile_written",
            user_id=str(user_id),
            created=existing is None,
            skills=len(saved.skills),
        )
        return saved

    async def create_learning_progress(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        skills: Sequence[str],
        repositories: Sequence[RepositoryRecord],
    ) -> int:
        """Create progress records for skills the user has none for yet."""
        try:
            known = await self.progress.list_skill_names(db, user_id)
            records = [
                build_progress_record(user_id, skill, repositories)
                for skill in skills
                if skill not in known
            ]
            created = await self.progress.insert_missing(db, records)
        except SQLAlchemyError as exc:
            logger.exception("learning_progress_write_failed", user_id=str(user_id))
            raise PersistenceError("learning_progress") from exc

        if created:
            PROGRESS_RECORDS_CREATED.inc(created)
        return created
