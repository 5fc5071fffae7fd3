"""Tests for the SQL store implementations on in-memory SQLite."""

from datetime import datetime

import pytest
import pytest_asyncio

import shared.models  # noqa: F401  (registers tables)
from shared.database.connection import DatabaseConfig, DatabaseConnection
from shared.database.repositories import SQLExtractionStore, SQLRawItemSource
from shared.persistence import ActivityType
from shared.schemas.messages import RawItem, SourceType
from shared.schemas.pipeline import Confidence, FormattedEvent, FormattedTask, TaskPriority


@pytest_asyncio.fixture(scope="function")
async def connection():
    """Fresh in-memory database per test."""
    db_connection = DatabaseConnection(DatabaseConfig(url="sqlite+aiosqlite:///:memory:"))
    await db_connection.create_tables()
    yield db_connection
    await db_connection.close()


def make_item(item_id: str, fetched_at: datetime, source_type=SourceType.MESSAGES, **overrides) -> RawItem:
    values = {
        "id": item_id,
        "source_type": source_type,
        "stable_id": f"stable-{item_id}",
        "content": f"content {item_id}",
        "thread_id": "t1",
        "participants": ["Sam"],
        "metadata": {"is_from_me": "false"},
        "fetched_at": fetched_at,
    }
    values.update(overrides)
    return RawItem(**values)


class TestSQLRawItemSource:
    """Tests for SQLRawItemSource."""

    @pytest.mark.asyncio
    async def test_fetch_window_and_source(self, connection):
        source = SQLRawItemSource(connection)
        await source.add(make_item("b", datetime(2025, 1, 1, 15, 0)))
        await source.add(make_item("a", datetime(2025, 1, 1, 9, 0)))
        await source.add(make_item("next-day", datetime(2025, 1, 2, 0, 0)))
        await source.add(make_item("mail", datetime(2025, 1, 1, 10, 0), SourceType.EMAIL))

        items = await source.fetch_items(
            datetime(2025, 1, 1), datetime(2025, 1, 2), source_type=SourceType.MESSAGES
        )

        assert [item.id for item in items] == ["a", "b"]
        assert items[0].participants == ["Sam"]
        assert items[0].metadata == {"is_from_me": "false"}

    @pytest.mark.asyncio
    async def test_fetch_limit(self, connection):
        source = SQLRawItemSource(connection)
        for hour in range(5):
            await source.add(make_item(f"i{hour}", datetime(2025, 1, 1, hour, 0)))

        items = await source.fetch_items(datetime(2025, 1, 1), datetime(2025, 1, 2), limit=2)

        assert [item.id for item in items] == ["i0", "i1"]

    @pytest.mark.asyncio
    async def test_mark_extracted(self, connection):
        source = SQLRawItemSource(connection)
        await source.add(make_item("a", datetime(2025, 1, 1, 9, 0)))
        await source.add(make_item("b", datetime(2025, 1, 1, 10, 0)))

        updated = await source.mark_extracted(["a", "missing"], "1.0")
        items = await source.fetch_items(datetime(2025, 1, 1), datetime(2025, 1, 2))

        assert updated == 1
        assert {item.id: item.extraction_version for item in items} == {"a": "1.0", "b": None}

    @pytest.mark.asyncio
    async def test_mark_extracted_nothing(self, connection):
        assert await SQLRawItemSource(connection).mark_extracted([], "1.0") == 0


class TestSQLExtractionStore:
    """Tests for SQLExtractionStore."""

    @pytest.mark.asyncio
    async def test_event_round_trip(self, connection):
        store = SQLExtractionStore(connection)
        event = FormattedEvent(
            title="Coffee with Sam",
            start_date=datetime(2025, 1, 2, 14, 0),
            end_date=datetime(2025, 1, 2, 15, 0),
            location="Blue Bottle",
            attendees=["Sam"],
            notes="Bring the book",
            confidence=Confidence.HIGH,
        )

        event_id = await store.insert_event(event, SourceType.MESSAGES, "pipeline-1")
        stored = await store.list_events()

        assert len(stored) == 1
        assert stored[0].id == event_id
        assert stored[0].start_date == datetime(2025, 1, 2, 14, 0)
        assert stored[0].attendees == ["Sam"]
        assert stored[0].notes == "Bring the book"
        assert stored[0].confidence is Confidence.HIGH
        assert stored[0].source_identifier == "pipeline-1"

    @pytest.mark.asyncio
    async def test_find_event_starts(self, connection):
        store = SQLExtractionStore(connection)
        start = datetime(2025, 1, 2, 14, 0)
        await store.insert_event(
            FormattedEvent(title="Coffee", start_date=start), SourceType.MESSAGES, "p"
        )

        assert await store.find_event_starts("Coffee", SourceType.MESSAGES) == [start]
        assert await store.find_event_starts("Coffee", SourceType.EMAIL) == []
        assert await store.find_event_starts("Tea", SourceType.MESSAGES) == []

    @pytest.mark.asyncio
    async def test_tasks(self, connection):
        store = SQLExtractionStore(connection)
        task = FormattedTask(title="Send slides", priority=TaskPriority.HIGH, assignee="Me")

        await store.insert_task(task, SourceType.MESSAGES, "p")

        assert await store.task_exists("Send slides", SourceType.MESSAGES) is True
        assert await store.task_exists("Send slides", SourceType.NOTES) is False
        stored = await store.list_tasks()
        assert stored[0].priority is TaskPriority.HIGH
        assert stored[0].assignee == "Me"
        assert stored[0].due_date is None

    @pytest.mark.asyncio
    async def test_activity_newest_first(self, connection):
        store = SQLExtractionStore(connection)

        await store.log_activity(ActivityType.EVENT_EXTRACTED, "first", {"date": "2025-01-01"})
        await store.log_activity(ActivityType.EVENT_EXTRACTED, "second")

        entries = await store.list_activity(limit=10)

        assert [entry.message for entry in entries] == ["second", "first"]
        assert entries[1].metadata == {"date": "2025-01-01"}
        assert len(await store.list_activity(limit=1)) == 1
