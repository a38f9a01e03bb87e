"""Skill profile endpoints.

GET  /api/v1/skills/summary  - Profile, learning progress and GitHub summary
POST /api/v1/skills/analyze  - Rebuild the profile from stored GitHub data
PUT  /api/v1/skills/update   - Update a skill's proficiency
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from app.dependencies import get_db_session, get_skills_analysis_service
from app.exceptions import LinkedAccountNotFoundError
from app.logging_config import get_logger
from services.skill_types import ProficiencyTier
from services.skills_analysis import SkillsAnalysisService

logger = get_logger(__name__)
router = APIRouter()


class AnalyzeRequest(BaseModel):
    user_id: uuid.UUID


class AnalyzeResponse(BaseModel):
    skills: list[str]
    categorized: dict[str, list[str]]
    experience_level: str
    interests: list[str]
    career_goals: list[str]
    learning_goals: list[str]


class SkillUpdateRequest(BaseModel):
    """Skill proficiency update. Without a level only the timestamp moves."""

    user_id: uuid.UUID
    skill_name: str = Field(..., min_length=1, max_length=100)
    proficiency_level: ProficiencyTier | None = None


@router.get("/summary")
async def skills_summary(
    user_id: uuid.UUID = Query(...),
    db: AsyncSession = Depends(get_db_session),
    service: SkillsAnalysisService = Depends(get_skills_analysis_service),
) -> dict:
    """Knowledge profile, learning progress and GitHub summary of a user."""
    return await service.get_user_skills_summary(db, user_id)


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_skills(
    request: AnalyzeRequest,
    db: AsyncSession = Depends(get_db_session),
    service: SkillsAnalysisService = Depends(get_skills_analysis_service),
) -> AnalyzeResponse:
    """Re-run skill analysis over the already synced GitHub data."""
    analysis = await service.analyze_and_store_skills(db, request.user_id)
    if analysis is None:
        raise LinkedAccountNotFoundError()

    return AnalyzeResponse(
        skills=analysis.skills,
        categorized=analysis.categorized.to_dict(),
        experience_level=analysis.experience_level.value,
        interests=analysis.interests,
        career_goals=analysis.career_goals,
        learning_goals=analysis.learning_goals,
    )


@router.put("/update")
async def update_skill(
    request: SkillUpdateRequest,
    db: AsyncSession = Depends(get_db_session),
    service: SkillsAnalysisService = Depends(get_skills_analysis_service),
) -> dict:
    level = request.proficiency_level.value if request.proficiency_level else None
    await service.update_skill_proficiency(db, request.user_id, request.skill_name, level)
    return {"message": "Skill updated successfully"}
