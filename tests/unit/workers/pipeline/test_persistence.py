"""
Unit tests for result persistence.
"""

from datetime import date, datetime

import pytest

from shared.persistence import InMemoryExtractionStore
from shared.schemas.messages import SourceType
from shared.schemas.pipeline import FormattedEvent, FormattedTask
from workers.pipeline.persistence import ResultPersister

DAY = date(2025, 1, 1)


def coffee(start: datetime = datetime(2025, 1, 2, 14, 0)) -> FormattedEvent:
    return FormattedEvent(title="Coffee at Blue Bottle", start_date=start)


@pytest.fixture
def store():
    return InMemoryExtractionStore()


class TestResultPersister:
    """Tests for ResultPersister.persist."""

    @pytest.mark.asyncio
    async def test_inserts_and_logs_activity(self, store):
        outcome = await ResultPersister(store).persist(
            [coffee()], [FormattedTask(title="Send slides")], DAY
        )

        assert outcome.events_inserted == 1
        assert outcome.tasks_inserted == 1
        events = await store.list_events()
        assert events[0].source_type is SourceType.MESSAGES
        assert events[0].source_identifier.startswith("pipeline-")

        activity = await store.list_activity()
        assert activity[0].message == "Pipeline: 1 events, 1 tasks from 2025-01-01"
        assert activity[0].metadata["date"] == "2025-01-01"
        assert activity[0].metadata["events_inserted"] == "1"

    @pytest.mark.asyncio
    async def test_rerun_is_idempotent(self, store):
        persister = ResultPersister(store)
        events = [coffee()]
        tasks = [FormattedTask(title="Send slides")]

        await persister.persist(events, tasks, DAY)
        outcome = await persister.persist(events, tasks, DAY)

        assert outcome.events_inserted == 0
        assert outcome.events_skipped == 1
        assert outcome.tasks_skipped == 1
        assert len(await store.list_events()) == 1
        assert len(await store.list_tasks()) == 1
        assert len(await store.list_activity()) == 2

    @pytest.mark.asyncio
    async def test_duplicate_window(self, store):
        persister = ResultPersister(store)
        await persister.persist([coffee()], [], DAY)

        near = await persister.persist([coffee(datetime(2025, 1, 2, 14, 59))], [], DAY)
        far = await persister.persist([coffee(datetime(2025, 1, 2, 15, 0))], [], DAY)

        assert near.events_skipped == 1
        assert far.events_inserted == 1

    @pytest.mark.asyncio
    async def test_other_source_not_duplicate(self, store):
        await store.insert_event(coffee(), SourceType.CALENDAR, "cal-1")

        outcome = await ResultPersister(store).persist([coffee()], [], DAY)

        assert outcome.events_inserted == 1

    @pytest.mark.asyncio
    async def test_empty_result_still_logged(self, store):
        outcome = await ResultPersister(store).persist([], [], DAY)

        assert outcome.events_inserted == outcome.tasks_inserted == 0
        activity = await store.list_activity()
        assert activity[0].message == "Pipeline: 0 events, 0 tasks from 2025-01-01"
