"""
Pipeline endpoints.

Stats snapshot, recent activity and on-demand processing of one day.
"""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from services.pipeline.app.api.schemas import (
    ActivityListResponse,
    ProcessDayResponse,
    ProcessStatus,
    StatsResponse,
)
from services.pipeline.app.core.dependencies import get_coordinator
from shared.config.logging import get_logger
from shared.exceptions import AmbientError, DuplicateContentError
from workers.pipeline.coordinator import PipelineCoordinator

logger = get_logger(__name__)

router = APIRouter()


@router.get(
    "/stats",
    response_model=StatsResponse,
    summary="Pipeline stats snapshot",
)
async def get_stats(
    coordinator: Annotated[PipelineCoordinator, Depends(get_coordinator)],
) -> StatsResponse:
    """Return coordinator and model-layer counters."""
    stats = coordinator.get_stats()
    return StatsResponse(**stats.model_dump(), summary=stats.describe())


@router.post(
    "/days/{day}/process",
    response_model=ProcessDayResponse,
    summary="Process one day now",
)
async def process_day(
    day: date,
    coordinator: Annotated[PipelineCoordinator, Depends(get_coordinator)],
) -> ProcessDayResponse:
    """
    Run the pipeline for one day.

    Recently processed content is reported as skipped; model and store
    failures map to 502.
    """
    try:
        result = await coordinator.process_day(day)
    except DuplicateContentError as e:
        return ProcessDayResponse(date=day, status=ProcessStatus.SKIPPED, reason=e.message)
    except AmbientError as e:
        logger.error("process_day_failed", day=day.isoformat(), error=e.message, code=e.error_code)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Pipeline failed: {e.message}",
        ) from e

    return ProcessDayResponse(date=day, status=ProcessStatus.PROCESSED, result=result)


@router.get(
    "/activity",
    response_model=ActivityListResponse,
    summary="Recent activity log",
)
async def list_activity(
    coordinator: Annotated[PipelineCoordinator, Depends(get_coordinator)],
    limit: Annotated[int, Query(ge=1, le=500)] = 50,
) -> ActivityListResponse:
    """Return the most recent activity log records, newest first."""
    entries = await coordinator.store.list_activity(limit=limit)
    return ActivityListResponse(entries=entries, total=len(entries))
