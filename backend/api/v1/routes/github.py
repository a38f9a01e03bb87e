"""GitHub account sync endpoint.

POST /api/v1/github/sync - Link and sync a GitHub account, then analyze it
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from app.dependencies import (
    get_db_session,
    get_github_sync_service,
    get_skills_analysis_service,
)
from app.logging_config import get_logger
from services.github_sync import GitHubSyncService
from services.skills_analysis import SkillsAnalysisService

logger = get_logger(__name__)
router = APIRouter()


class SyncRequest(BaseModel):
    """GitHub sync request."""

    username: str = Field(
        ..., min_length=1, max_length=39, pattern=r"^[a-zA-Z0-9]([a-zA-Z0-9-]*[a-zA-Z0-9])?$"
    )
    user_id: uuid.UUID


class SyncResponse(BaseModel):
    message: str
    github_user: dict


@router.post("/sync", response_model=SyncResponse)
async def sync_github(
    request: SyncRequest,
    db: AsyncSession = Depends(get_db_session),
    sync_service: GitHubSyncService = Depends(get_github_sync_service),
    analysis_service: SkillsAnalysisService = Depends(get_skills_analysis_service),
) -> SyncResponse:
    """Sync a GitHub account into the profile store and rebuild the skill profile.

    Answers 404 when the GitHub login does not exist and 429 when GitHub
    rate limits the user lookup.
    """
    account = await sync_service.sync_user_data(db, request.username, request.user_id)
    await analysis_service.analyze_and_store_skills(db, request.user_id)

    logger.info("github_sync_requested", user_id=str(request.user_id))
    return SyncResponse(
        message="GitHub data synced successfully",
        github_user=account.to_dict(),
    )
