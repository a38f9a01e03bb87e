"""Application-level dependencies.

Provides the database session and service objects as FastAPI
dependencies so route handlers stay thin and tests can override them.
"""

from __future__ import annotations

from fastapi import Depends

from app.config import Settings, get_settings
from db.session import get_db_session
from services.github_service import GitHubService
from services.github_sync import GitHubSyncService
from services.skills_analysis import SkillsAnalysisService

__all__ = [
    "get_db_session",
    "get_github_sync_service",
    "get_skills_analysis_service",
]


def get_github_sync_service(
    settings: Settings = Depends(get_settings),
) -> GitHubSyncService:
    return GitHubSyncService(github=GitHubService(settings))


def get_skills_analysis_service(
    settings: Settings = Depends(get_settings),
) -> SkillsAnalysisService:
    return SkillsAnalysisService(settings)
