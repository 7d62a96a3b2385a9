"""Health check routes."""

from datetime import datetime, timezone

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter
from pydantic import BaseModel

from roster.config import Settings
from roster.util.background import BackgroundTaskGroup


router = APIRouter(tags=["health"], route_class=DishkaRoute)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    version: str
    git_sha: str
    environment: str
    pending_background_tasks: int


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: FromDishka[Settings],
    background_tasks: FromDishka[BackgroundTaskGroup],
) -> HealthResponse:
    """Basic health check endpoint.

    Returns:
        Health status indicating the service is running
    """
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version="0.1.0",
        git_sha=settings.git_sha,
        environment=settings.environment,
        pending_background_tasks=background_tasks.pending,
    )
