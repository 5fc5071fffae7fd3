"""API schemas for responses."""

from services.pipeline.app.api.schemas.responses import (
    ActivityListResponse,
    HealthStatus,
    ProcessDayResponse,
    ProcessStatus,
    StatsResponse,
)

__all__ = [
    "HealthStatus",
    "ProcessStatus",
    "ProcessDayResponse",
    "StatsResponse",
    "ActivityListResponse",
]
