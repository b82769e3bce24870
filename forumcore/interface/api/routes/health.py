"""Liveness probe."""

from datetime import datetime

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter
from pydantic import BaseModel

from forumcore.config import Settings
from forumcore.util.clock import Clock

router = APIRouter(tags=["health"], route_class=DishkaRoute)


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    environment: str
    git_sha: str


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: FromDishka[Settings], clock: FromDishka[Clock]) -> HealthResponse:
    # Deliberately does not touch the database
    return HealthResponse(
        status="healthy",
        timestamp=clock(),
        environment=settings.environment,
        git_sha=settings.git_sha,
    )
