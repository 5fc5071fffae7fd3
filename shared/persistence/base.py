"""
Store interfaces the pipeline reads from and writes to.

The raw-item source is the producer of per-day batches; the extraction store
is the consumer of pipeline results.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum

from pydantic import Field

from shared.schemas.base import BaseSchema
from shared.schemas.messages import RawItem, SourceType
from shared.schemas.pipeline import FormattedEvent, FormattedTask


class ActivityType(str, Enum):
    """Activity log entry types."""

    EVENT_EXTRACTED = "event_extracted"


class PersistedEvent(FormattedEvent):
    """Event as stored, with provenance."""

    id: str
    source_type: SourceType
    source_identifier: str


class PersistedTask(FormattedTask):
    """Task as stored, with provenance."""

    id: str
    source_type: SourceType
    source_identifier: str


class ActivityEntry(BaseSchema):
    """Activity log record."""

    id: str
    activity_type: ActivityType
    message: str
    metadata: dict[str, str] = Field(default_factory=dict)
    created_at: datetime


class RawItemSource(ABC):
    """Read side of the raw-item store written by source monitors."""

    @abstractmethod
    async def fetch_items(
        self,
        start: datetime,
        end: datetime,
        source_type: SourceType | None = None,
        limit: int = 1000,
    ) -> list[RawItem]:
        """
        Fetch items fetched within [start, end), oldest first.

        Args:
            start: Inclusive lower bound on fetched_at
            end: Exclusive upper bound on fetched_at
            source_type: Optional source filter
            limit: Maximum number of items

        Returns:
            Matching raw items ordered by fetched_at
        """

    @abstractmethod
    async def mark_extracted(self, item_ids: list[str], version: str) -> int:
        """
        Stamp items with the extraction version that processed them.

        Args:
            item_ids: Raw item IDs
            version: Extraction version

        Returns:
            Number of items updated
        """


class ExtractionStore(ABC):
    """Write side for final events, tasks and the activity log."""

    @abstractmethod
    async def find_event_starts(self, title: str, source_type: SourceType) -> list[datetime]:
        """Start times of stored events with this exact title and source."""

    @abstractmethod
    async def task_exists(self, title: str, source_type: SourceType) -> bool:
        """Whether a task with this exact title and source is stored."""

    @abstractmethod
    async def insert_event(
        self, event: FormattedEvent, source_type: SourceType, source_identifier: str
    ) -> str:
        """Insert an event and return its ID."""

    @abstractmethod
    async def insert_task(
        self, task: FormattedTask, source_type: SourceType, source_identifier: str
    ) -> str:
        """Insert a task and return its ID."""

    @abstractmethod
    async def log_activity(
        self, activity_type: ActivityType, message: str, metadata: dict[str, str] | None = None
    ) -> str:
        """Append an activity log record and return its ID."""

    @abstractmethod
    async def list_events(self) -> list[PersistedEvent]:
        """All stored events, oldest first."""

    @abstractmethod
    async def list_tasks(self) -> list[PersistedTask]:
        """All stored tasks, oldest first."""

    @abstractmethod
    async def list_activity(self, limit: int = 50) -> list[ActivityEntry]:
        """Most recent activity records, newest first."""
