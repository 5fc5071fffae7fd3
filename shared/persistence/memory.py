"""
In-memory store implementations.

Used by tests and by deployments that only need the HTTP surface.
"""

import asyncio
import uuid
from datetime import datetime

from shared.persistence.base import (
    ActivityEntry,
    ActivityType,
    ExtractionStore,
    PersistedEvent,
    PersistedTask,
    RawItemSource,
)
from shared.schemas.messages import RawItem, SourceType
from shared.schemas.pipeline import FormattedEvent, FormattedTask
from shared.utils.datetime_utils import get_local_now


class InMemoryRawItemSource(RawItemSource):
    """Raw-item source backed by a dict keyed by item ID."""

    def __init__(self, items: list[RawItem] | None = None):
        self._items: dict[str, RawItem] = {item.id: item for item in items or []}
        self._lock = asyncio.Lock()

    async def add(self, item: RawItem) -> None:
        async with self._lock:
            self._items[item.id] = item

    async def get(self, item_id: str) -> RawItem | None:
        async with self._lock:
            return self._items.get(item_id)

    async def fetch_items(
        self,
        start: datetime,
        end: datetime,
        source_type: SourceType | None = None,
        limit: int = 1000,
    ) -> list[RawItem]:
        async with self._lock:
            items = [
                item
                for item in self._items.values()
                if start <= item.fetched_at < end
                and (source_type is None or item.source_type == source_type)
            ]
        items.sort(key=lambda item: item.fetched_at)
        return items[:limit]

    async def mark_extracted(self, item_ids: list[str], version: str) -> int:
        updated = 0
        async with self._lock:
            for item_id in item_ids:
                item = self._items.get(item_id)
                if item is None:
                    continue
                self._items[item_id] = item.model_copy(update={"extraction_version": version})
                updated += 1
        return updated


class InMemoryExtractionStore(ExtractionStore):
    """Extraction store backed by lists."""

    def __init__(self) -> None:
        self._events: list[PersistedEvent] = []
        self._tasks: list[PersistedTask] = []
        self._activity: list[ActivityEntry] = []
        self._lock = asyncio.Lock()

    async def find_event_starts(self, title: str, source_type: SourceType) -> list[datetime]:
        async with self._lock:
            return [
                event.start_date
                for event in self._events
                if event.title == title and event.source_type == source_type
            ]

    async def task_exists(self, title: str, source_type: SourceType) -> bool:
        async with self._lock:
            return any(
                task.title == title and task.source_type == source_type for task in self._tasks
            )

    async def insert_event(
        self, event: FormattedEvent, source_type: SourceType, source_identifier: str
    ) -> str:
        stored = PersistedEvent(
            **event.model_dump(),
            id=str(uuid.uuid4()),
            source_type=source_type,
            source_identifier=source_identifier,
        )
        async with self._lock:
            self._events.append(stored)
        return stored.id

    async def insert_task(
        self, task: FormattedTask, source_type: SourceType, source_identifier: str
    ) -> str:
        stored = PersistedTask(
            **task.model_dump(),
            id=str(uuid.uuid4()),
            source_type=source_type,
            source_identifier=source_identifier,
        )
        async with self._lock:
            self._tasks.append(stored)
        return stored.id

    async def log_activity(
        self, activity_type: ActivityType, message: str, metadata: dict[str, str] | None = None
    ) -> str:
        entry = ActivityEntry(
            id=str(uuid.uuid4()),
            activity_type=activity_type,
            message=message,
            metadata=metadata or {},
            created_at=get_local_now(),
        )
        async with self._lock:
            self._activity.append(entry)
        return entry.id

    async def list_events(self) -> list[PersistedEvent]:
        async with self._lock:
            return list(self._events)

    async def list_tasks(self) -> list[PersistedTask]:
        async with self._lock:
            return list(self._tasks)

    async def list_activity(self, limit: int = 50) -> list[ActivityEntry]:
        async with self._lock:
            return list(reversed(self._activity))[:limit]
