"""
Response schemas for the pipeline service.
"""

import datetime as dt
from enum import Enum

from pydantic import BaseModel, Field

from shared.persistence import ActivityEntry
from shared.schemas.pipeline import PipelineResult, PipelineStats


class ProcessStatus(str, Enum):
    """Outcome of an on-demand day run."""

    PROCESSED = "processed"
    SKIPPED = "skipped"


class ProcessDayResponse(BaseModel):
    """Response for POST /days/{day}/process."""

    date: dt.date = Field(..., description="Processed day")
    status: ProcessStatus = Field(..., description="processed or skipped")
    reason: str | None = Field(None, description="Why the day was skipped")
    result: PipelineResult | None = Field(None, description="Pipeline result when processed")


class StatsResponse(PipelineStats):
    """Stats snapshot with a human-readable summary."""

    summary: str = Field(..., description="One-line summary")


class ActivityListResponse(BaseModel):
    """Recent activity log records."""

    entries: list[ActivityEntry] = Field(default_factory=list)
    total: int = Field(..., description="Number of entries returned")


class HealthStatus(BaseModel):
    """Health status response model."""

    status: str = Field(..., description="Service status (healthy/unhealthy)")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")
    pipeline_running: bool = Field(..., description="Whether the background loop is running")
    timestamp: dt.datetime = Field(..., description="Check timestamp")
