"""
Health check endpoints for the pipeline service.
"""

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, status

from services.pipeline.app.api.schemas import HealthStatus
from services.pipeline.app.core.dependencies import get_coordinator
from shared.config import Settings, get_settings
from workers.pipeline.coordinator import PipelineCoordinator

router = APIRouter()


@router.get(
    "/health",
    response_model=HealthStatus,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
)
async def health_check(
    settings: Annotated[Settings, Depends(get_settings)],
    coordinator: Annotated[PipelineCoordinator, Depends(get_coordinator)],
) -> HealthStatus:
    """
    Basic health check endpoint.

    Returns:
        Service health status
    """
    return HealthStatus(
        status="healthy",
        service=settings.service_name,
        version=settings.service_version,
        pipeline_running=coordinator.is_running,
        timestamp=datetime.now(UTC),
    )
