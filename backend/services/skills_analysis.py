"""Skill analysis pipeline.

Turns the stored repositories and contributions of a user's linked
GitHub account into a SkillAnalysis, then persists it through the
ProfileWriter:

    repositories -> aggregate skills -> categorize -> experience tier
                 -> interests / career goals / learning goals
                 -> knowledge profile + learning progress
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings, get_settings
from app.exceptions import SkillNotFoundError, ValidationError
from app.logging_config import get_logger
from app.metrics import ANALYSIS_DURATION
from db.repositories import (
    ContributionRepository,
    GitHubRepositoryRepository,
    GitHubUserRepository,
    KnowledgeProfileRepository,
    LearningProgressRepository,
)
from services.goal_suggester import (
    extract_interests,
    suggest_career_goals,
    suggest_learning_goals,
)
from services.profile_writer import ProfileWriter
from services.skill_categorizer import categorize_skills
from services.skill_extractor import aggregate_skills
from services.skill_scoring import determine_experience_level
from services.skill_types import (
    ContributionSummary,
    ProficiencyTier,
    RepositoryRecord,
    SkillAnalysis,
)

logger = get_logger(__name__)

SUMMARY_TOP_REPOSITORIES = 10


class SkillsAnalysisService:
    """Skill profile analysis and queries for one application user at a time."""

    def __init__(
        self,
        settings: Settings | None = None,
        accounts: GitHubUserRepository | None = None,
        repositories: GitHubRepositoryRepository | None = None,
        contributions: ContributionRepository | None = None,
        profiles: KnowledgeProfileRepository | None = None,
        progress: LearningProgressRepository | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.accounts = accounts or GitHubUserRepository()
        self.repositories = repositories or GitHubRepositoryRepository()
        self.contributions = contributions or ContributionRepository()
        self.profiles = profiles or KnowledgeProfileRepository()
        self.progress = progress or LearningProgressRepository()
        self.writer = ProfileWriter(
            profiles=self.profiles,
            progress=self.progress,
            merge_strategy=self.settings.profile_merge_strategy,
        )

    @ANALYSIS_DURATION.time()
    def analyze(
        self,
        repositories: Sequence[RepositoryRecord],
        contributions: ContributionSummary,
    ) -> SkillAnalysis:
        """Run the pure part of the pipeline. No I/O."""
        skills = aggregate_skills(repositories)
        categorized = categorize_skills(skills)
        return SkillAnalysis(
            skills=skills,
            categorized=categorized,
            experience_level=determine_experience_level(repositories, contributions),
            interests=extract_interests(repositories),
            career_goals=suggest_career_goals(categorized),
            learning_goals=suggest_learning_goals(categorized),
        )

    async def analyze_and_store_skills(
        self, db: AsyncSession, user_id: uuid.UUID
    ) -> SkillAnalysis | None:
        """Analyze a user's stored GitHub data and persist the result.

        Returns None when the user has no linked account. Store failures
        raise PersistenceError.
        """
        account = await self.accounts.get_by_user_id(db, user_id)
        if account is None:
            logger.info("skill_analysis_skipped_no_account", user_id=str(user_id))
            return None

        repositories = await self.repositories.list_for_account(db, account.id)
        contributions = await self.contributions.summarize(db, account.id)
        analysis = self.analyze(repositories, contributions)

        await self.writer.write_profile(db, user_id, analysis)
        created = await self.writer.create_learning_progress(
            db, user_id, analysis.skills, repositories
        )

        logger.info(
            "skill_analysis_stored",
            user_id=str(user_id),
            repositories=len(repositories),
            skills=len(analysis.skills),
            experience_level=analysis.experience_level.value,
            progress_created=created,
        )
        return analysis

    async def get_user_skills_summary(
        self, db: AsyncSession, user_id: uuid.UUID
    ) -> dict[str, Any]:
        """Profile, learning progress and GitHub summary for a user."""
        profile = await self.profiles.get(db, user_id)
        progress = await self.progress.list_for_user(db, user_id)

        github_summary: dict[str, Any] | None = None
        account = await self.accounts.get_by_user_id(db, user_id)
        if account is not None:
            repositories = await self.repositories.list_for_account(db, account.id)
            contributions = await self.contributions.summarize(db, account.id)
            github_summary = {
                "user": account.to_dict(),
                "repositories": [
                    {
                        "repo_id": r.repo_id,
                        "name": r.name,
                        "full_name": r.full_name,
                        "description": r.description,
                        "html_url": r.html_url,
                        "language": r.language,
                        "stars": r.stars,
                        "forks": r.forks,
                        "topics": list(r.topics),
                    }
                    for r in repositories[:SUMMARY_TOP_REPOSITORIES]
                ],
                "contributions": {
                    "total_commits": contributions.total_commits,
                    "total_additions": contributions.total_additions,
                    "total_deletions": contributions.total_deletions,
                    "active_repositories": contributions.active_repositories,
                },
                "total_repositories": len(repositories),
            }

        return {
            "profile": profile.to_dict() if profile else None,
            "skills_progress": [p.to_dict() for p in progress],
            "github_summary": github_summary,
        }

    async def update_skill_proficiency(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        skill_name: str,
        new_level: str | None = None,
    ) -> None:
        """Touch a skill's progress record, optionally setting a new tier.

        Raises ValidationError for an unknown tier and SkillNotFoundError
        when the user has no record for the skill.
        """
        values: dict[str, Any] = {}
        if new_level:
            try:
                tier = ProficiencyTier(new_level.lower())
            except ValueError as exc:
                raise ValidationError(
                    "Unknown proficiency level",
                    details={"allowed": [t.value for t in ProficiencyTier]},
                ) from exc
            today = datetime.now(UTC).date().isoformat()
            values["proficiency_level"] = tier.value
            values["progress_notes"] = f"Proficiency updated to {tier.value} on {today}"

        updated = await self.progress.update(db, user_id, skill_name, values)
        if not updated:
            raise SkillNotFoundError()

        logger.info(
            "skill_proficiency_updated",
            user_id=str(user_id),
            skill=skill_name,
            level=values.get("proficiency_level"),
        )
