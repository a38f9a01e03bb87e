"""Skill extraction from repository metadata.

Builds a user's raw skill set from the repositories of their linked
GitHub account: language names, topic tags, and technology keywords
found in repository descriptions.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from services.skill_types import RepositoryRecord

# Technology lexicon matched against free text (first match per pattern)
TECH_KEYWORD_PATTERNS: list[re.Pattern[str]] = [
    re.compile(p, re.IGNORECASE)
    for p in (
        # Web
        r"react", r"vue", r"angular", r"svelte", r"nextjs", r"nuxt",
        r"javascript", r"typescript", r"html", r"css", r"sass", r"scss",
        r"nodejs", r"express", r"fastify", r"nestjs",
        # Databases
        r"mongodb", r"postgresql", r"mysql", r"redis", r"sqlite", r"supabase", r"firebase",
        # Cloud & DevOps
        r"aws", r"azure", r"gcp", r"docker", r"kubernetes", r"terraform",
        r"ci/cd", r"github actions", r"jenkins",
        # Mobile
        r"react native", r"flutter", r"swift", r"kotlin", r"ionic",
        # Data science & AI
        r"python", r"machine learning", r"deep learning", r"tensorflow", r"pytorch",
        r"pandas", r"numpy", r"scikit-learn", r"jupyter",
        # Other
        r"api", r"rest", r"graphql", r"microservices", r"blockchain",
        r"testing", r"jest", r"cypress", r"selenium",
    )
]


def extract_tech_keywords(text: str | None) -> list[str]:
    """Return the distinct lexicon keywords found in ``text``, in lexicon order."""
    if not text:
        return []

    keywords: list[str] = []
    for pattern in TECH_KEYWORD_PATTERNS:
        match = pattern.search(text)
        if match:
            keyword = match.group(0).lower()
            if keyword not in keywords:
                keywords.append(keyword)
    return keywords


def aggregate_skills(repositories: Iterable[RepositoryRecord]) -> list[str]:
    """Union languages, topics and description keywords across repositories.

    Skills are lowercased and deduplicated; the result keeps first-seen
    order so identical input always yields identical output.
    """
    skills: dict[str, None] = {}

    for repo in repositories:
        for language in repo.languages or {}:
            skills.setdefault(language.lower(), None)
        for topic in repo.topics or []:
            skills.setdefault(topic.lower(), None)
        for keyword in extract_tech_keywords(repo.description):
            skills.setdefault(keyword, None)

    return list(skills)
