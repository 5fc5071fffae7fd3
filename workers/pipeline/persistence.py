"""
Persists pipeline results into the extraction store.
"""

import uuid
from datetime import date, timedelta

from pydantic import BaseModel

from shared.config.logging import get_logger
from shared.observability.metrics import pipeline_items_persisted_total
from shared.persistence import ActivityType, ExtractionStore
from shared.schemas.messages import SourceType
from shared.schemas.pipeline import FormattedEvent, FormattedTask

logger = get_logger(__name__)

DUPLICATE_EVENT_WINDOW = timedelta(hours=1)


class PersistOutcome(BaseModel):
    """Rows actually inserted by one persist call."""

    events_inserted: int = 0
    tasks_inserted: int = 0
    events_skipped: int = 0
    tasks_skipped: int = 0


class ResultPersister:
    """
    Idempotent writer for final events and tasks.

    An event is a duplicate when a stored event from the same source has the
    same title and starts within one hour; a task is a duplicate when a stored
    task from the same source has the same title.
    """

    def __init__(
        self,
        store: ExtractionStore,
        source_type: SourceType = SourceType.MESSAGES,
        duplicate_window: timedelta = DUPLICATE_EVENT_WINDOW,
    ):
        """
        Initialize persister.

        Args:
            store: Extraction store
            source_type: Source recorded on inserted rows
            duplicate_window: Start-time tolerance for duplicate events
        """
        self.store = store
        self.source_type = source_type
        self.duplicate_window = duplicate_window

    async def persist(
        self,
        events: list[FormattedEvent],
        tasks: list[FormattedTask],
        day: date,
    ) -> PersistOutcome:
        """
        Insert non-duplicate items and write one activity log record.

        Args:
            events: Final events
            tasks: Final tasks
            day: Day the items were extracted from

        Returns:
            PersistOutcome with inserted and skipped counts

        Raises:
            PersistenceError: If the store fails
        """
        outcome = PersistOutcome()

        for event in events:
            if await self.is_duplicate_event(event):
                outcome.events_skipped += 1
                continue
            await self.store.insert_event(event, self.source_type, self._source_identifier())
            outcome.events_inserted += 1

        for task in tasks:
            if await self.store.task_exists(task.title, self.source_type):
                outcome.tasks_skipped += 1
                continue
            await self.store.insert_task(task, self.source_type, self._source_identifier())
            outcome.tasks_inserted += 1

        await self.store.log_activity(
            ActivityType.EVENT_EXTRACTED,
            f"Pipeline: {len(events)} events, {len(tasks)} tasks from {day.isoformat()}",
            metadata={
                "date": day.isoformat(),
                "events": str(len(events)),
                "tasks": str(len(tasks)),
                "events_inserted": str(outcome.events_inserted),
                "tasks_inserted": str(outcome.tasks_inserted),
            },
        )

        pipeline_items_persisted_total.labels(item_type="event").inc(outcome.events_inserted)
        pipeline_items_persisted_total.labels(item_type="task").inc(outcome.tasks_inserted)
        logger.info("results_persisted", date=day.isoformat(), **outcome.model_dump())
        return outcome

    async def is_duplicate_event(self, event: FormattedEvent) -> bool:
        """Whether a stored event has the same title and starts within the window."""
        starts = await self.store.find_event_starts(event.title, self.source_type)
        return any(abs(start - event.start_date) < self.duplicate_window for start in starts)

    @staticmethod
    def _source_identifier() -> str:
        return f"pipeline-{uuid.uuid4()}"
