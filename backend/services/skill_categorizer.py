"""Skill categorization into programming/frameworks/databases/tools/cloud."""

from __future__ import annotations

from collections.abc import Iterable

from services.skill_types import CategorizedSkills, SkillCategory

# Evaluated in order; a skill goes to the first category with a keyword
# contained in it.
CATEGORY_KEYWORDS: list[tuple[SkillCategory, tuple[str, ...]]] = [
    (
        SkillCategory.PROGRAMMING,
        (
            "javascript", "typescript", "python", "java", "c++", "c#",
            "go", "rust", "php", "ruby", "swift", "kotlin",
        ),
    ),
    (
        SkillCategory.FRAMEWORKS,
        ("react", "vue", "angular", "express", "django", "flask", "spring", "laravel", "rails"),
    ),
    (
        SkillCategory.DATABASES,
        ("mongodb", "postgresql", "mysql", "redis", "sqlite", "firebase", "supabase"),
    ),
    (
        SkillCategory.TOOLS,
        ("docker", "kubernetes", "git", "webpack", "babel", "jest", "cypress"),
    ),
    (
        SkillCategory.CLOUD,
        ("aws", "azure", "gcp", "heroku", "netlify", "vercel"),
    ),
]

DEFAULT_CATEGORY = SkillCategory.TOOLS


def categorize_skill(
    skill: str,
    table: list[tuple[SkillCategory, tuple[str, ...]]] = CATEGORY_KEYWORDS,
) -> SkillCategory:
    """Return the bucket for a single skill."""
    normalized = skill.lower()
    for category, keywords in table:
        if any(keyword in normalized for keyword in keywords):
            return category
    return DEFAULT_CATEGORY


def categorize_skills(
    skills: Iterable[str],
    table: list[tuple[SkillCategory, tuple[str, ...]]] = CATEGORY_KEYWORDS,
) -> CategorizedSkills:
    """Partition skills so each one appears in exactly one bucket."""
    categorized = CategorizedSkills()
    for skill in skills:
        categorized.bucket(categorize_skill(skill, table)).append(skill)
    return categorized
