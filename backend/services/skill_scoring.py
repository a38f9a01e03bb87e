"""Experience and proficiency scoring.

Both scores are linear heuristics over repository metadata. Weights and
tier thresholds are policy tables, not calibrated against any external
benchmark; pass replacement tables to tune them.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from services.skill_types import (
    ContributionSummary,
    ExperienceLevel,
    ProficiencyTier,
    RepositoryRecord,
)

EXPERIENCE_WEIGHTS: dict[str, float] = {
    "repo_count": 2.0,
    "total_stars": 0.5,
    "total_commits": 0.1,
    "active_repositories": 3.0,
}

# (minimum score, level), checked top-down
EXPERIENCE_TIERS: list[tuple[float, ExperienceLevel]] = [
    (100, ExperienceLevel.SENIOR),
    (50, ExperienceLevel.INTERMEDIATE),
    (20, ExperienceLevel.JUNIOR),
]

# Per-repository usage signal
PRIMARY_LANGUAGE_WEIGHT = 0.5
LANGUAGE_BYTES_DIVISOR = 10_000
TOPIC_WEIGHT = 0.3

# (minimum relevant repos, usage must exceed this or None, tier), checked top-down
PROFICIENCY_TIERS: list[tuple[int, float | None, ProficiencyTier]] = [
    (5, 50, ProficiencyTier.ADVANCED),
    (3, 20, ProficiencyTier.INTERMEDIATE),
    (1, None, ProficiencyTier.BEGINNER),
]


def experience_score(
    repositories: Sequence[RepositoryRecord],
    contributions: ContributionSummary,
    weights: dict[str, float] = EXPERIENCE_WEIGHTS,
) -> float:
    """Weighted activity score for a linked account."""
    total_stars = sum(repo.stars or 0 for repo in repositories)
    return (
        len(repositories) * weights["repo_count"]
        + total_stars * weights["total_stars"]
        + contributions.total_commits * weights["total_commits"]
        + contributions.active_repositories * weights["active_repositories"]
    )


def determine_experience_level(
    repositories: Sequence[RepositoryRecord],
    contributions: ContributionSummary,
    weights: dict[str, float] = EXPERIENCE_WEIGHTS,
    tiers: list[tuple[float, ExperienceLevel]] = EXPERIENCE_TIERS,
) -> ExperienceLevel:
    score = experience_score(repositories, contributions, weights)
    for minimum, level in tiers:
        if score >= minimum:
            return level
    return ExperienceLevel.BEGINNER


def _repo_matches(skill: str, repo: RepositoryRecord) -> tuple[bool, float]:
    """Check one repository against a lowercased skill.

    Returns whether any signal matched and the usage it contributes.
    """
    relevant = False
    usage = 0.0

    if repo.language and skill in repo.language.lower():
        relevant = True
        usage += PRIMARY_LANGUAGE_WEIGHT

    for language, size in (repo.languages or {}).items():
        if skill in language.lower():
            relevant = True
            usage += (size or 0) / LANGUAGE_BYTES_DIVISOR

    if any(skill in topic.lower() for topic in repo.topics or []):
        relevant = True
        usage += TOPIC_WEIGHT

    return relevant, usage


def skill_usage(skill: str, repositories: Sequence[RepositoryRecord]) -> tuple[int, float]:
    """Return ``(relevant_repos, usage)`` for a skill across repositories."""
    skill_lower = skill.lower()
    relevant_repos = 0
    total_usage = 0.0

    for repo in repositories:
        relevant, usage = _repo_matches(skill_lower, repo)
        total_usage += usage
        if relevant:
            relevant_repos += 1

    return relevant_repos, total_usage


def proficiency_for_usage(
    relevant_repos: int,
    usage: float,
    tiers: list[tuple[int, float | None, ProficiencyTier]] = PROFICIENCY_TIERS,
) -> ProficiencyTier:
    for min_repos, usage_floor, tier in tiers:
        if relevant_repos >= min_repos and (usage_floor is None or usage > usage_floor):
            return tier
    return ProficiencyTier.NOVICE


def determine_proficiency_level(
    skill: str,
    repositories: Sequence[RepositoryRecord],
    tiers: list[tuple[int, float | None, ProficiencyTier]] = PROFICIENCY_TIERS,
) -> ProficiencyTier:
    relevant_repos, usage = skill_usage(skill, repositories)
    return proficiency_for_usage(relevant_repos, usage, tiers)


def related_projects(
    skill: str,
    repositories: Sequence[RepositoryRecord],
    limit: int = 5,
) -> list[dict[str, Any]]:
    """Repositories that use a skill, as project references."""
    skill_lower = skill.lower()
    return [
        {
            "name": repo.name,
            "description": repo.description,
            "url": repo.html_url,
            "stars": repo.stars,
        }
        for repo in repositories
        if _repo_matches(skill_lower, repo)[0]
    ][:limit]
