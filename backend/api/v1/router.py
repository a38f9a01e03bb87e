"""API v1 router aggregation.

Combines all v1 route modules into a single router.
"""

from __future__ import annotations

from fastapi import APIRouter

from api.v1.routes.github import router as github_router
from api.v1.routes.skills import router as skills_router

api_v1_router = APIRouter()

api_v1_router.include_router(github_router, prefix="/github", tags=["GitHub"])
api_v1_router.include_router(skills_router, prefix="/skills", tags=["Skills"])
