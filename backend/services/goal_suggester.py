"""Career goal, learning goal and interest suggestions.

Goals come from ordered rule tables of ``(label, predicate)`` pairs.
Rules are evaluated top-down and labels are appended in table order,
so the table order is the output order.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from services.skill_types import CategorizedSkills, RepositoryRecord

MAX_CAREER_GOALS = 5
MAX_LEARNING_GOALS = 8
MAX_INTERESTS = 15

DEFAULT_CAREER_GOAL = "Software Developer"

FRONTEND_FRAMEWORKS = frozenset({"react", "vue", "angular"})
BACKEND_FRAMEWORKS = frozenset({"express", "django", "spring"})
CONTAINER_TOOLS = frozenset({"docker", "kubernetes"})
DATA_LANGUAGES = frozenset({"python", "r"})

DOMAIN_KEYWORDS = (
    "ai", "machine-learning", "data-science", "web-development", "mobile-development",
    "game-development", "blockchain", "cybersecurity", "devops", "cloud-computing",
    "iot", "automation", "testing", "ui-ux", "frontend", "backend", "fullstack",
)

GoalRule = tuple[str, Callable[[CategorizedSkills, list[str]], bool]]


def _has_any(skills: Sequence[str], names: frozenset[str]) -> bool:
    return any(s.lower() in names for s in skills)


def _has_web_stack(c: CategorizedSkills) -> bool:
    return bool(c.programming) and bool(c.frameworks)


CAREER_GOAL_RULES: list[GoalRule] = [
    (
        "Frontend Developer",
        lambda c, _: _has_web_stack(c) and _has_any(c.frameworks, FRONTEND_FRAMEWORKS),
    ),
    (
        "Backend Developer",
        lambda c, _: _has_web_stack(c) and _has_any(c.frameworks, BACKEND_FRAMEWORKS),
    ),
    (
        "Full Stack Developer",
        lambda _, goals: "Frontend Developer" in goals and "Backend Developer" in goals,
    ),
    (
        "DevOps Engineer",
        lambda c, _: bool(c.cloud) or _has_any(c.tools, CONTAINER_TOOLS),
    ),
    (
        "Data Scientist",
        lambda c, _: _has_any(c.programming, DATA_LANGUAGES),
    ),
]


def _has_testing_skill(c: CategorizedSkills) -> bool:
    return any("test" in s.lower() for s in [*c.tools, *c.frameworks])


LEARNING_GOAL_RULES: list[GoalRule] = [
    (
        "Learn TypeScript",
        lambda c, _: "javascript" in c.programming and "typescript" not in c.programming,
    ),
    ("Learn Database Management", lambda c, _: bool(c.frameworks) and not c.databases),
    ("Learn Cloud Computing", lambda c, _: bool(c.programming) and not c.cloud),
    ("Learn Software Testing", lambda c, _: not _has_testing_skill(c)),
    ("Improve System Design Skills", lambda c, _: True),
    ("Learn DevOps Practices", lambda c, _: True),
]


def _apply_rules(categorized: CategorizedSkills, rules: list[GoalRule]) -> list[str]:
    goals: list[str] = []
    for label, predicate in rules:
        if predicate(categorized, goals):
            goals.append(label)
    return goals


def suggest_career_goals(
    categorized: CategorizedSkills,
    rules: list[GoalRule] = CAREER_GOAL_RULES,
) -> list[str]:
    goals = _apply_rules(categorized, rules)
    if not goals:
        goals.append(DEFAULT_CAREER_GOAL)
    return goals[:MAX_CAREER_GOALS]


def suggest_learning_goals(
    categorized: CategorizedSkills,
    rules: list[GoalRule] = LEARNING_GOAL_RULES,
) -> list[str]:
    return _apply_rules(categorized, rules)[:MAX_LEARNING_GOALS]


def extract_interests(repositories: Sequence[RepositoryRecord]) -> list[str]:
    """Interests from repository topics and domain keywords in name/description."""
    interests: dict[str, None] = {}

    for repo in repositories:
        for topic in repo.topics or []:
            if len(topic) > 2:
                interests.setdefault(topic.lower(), None)

        repo_text = f"{repo.name} {repo.description or ''}".lower()
        for keyword in DOMAIN_KEYWORDS:
            if keyword.replace("-", " ", 1) in repo_text or keyword in repo_text:
                interests.setdefault(keyword, None)

    return list(interests)[:MAX_INTERESTS]
