"""
SQL implementations of the store interfaces.
"""

from datetime import datetime
from typing import Any, Generic, TypeVar

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.logging import get_logger
from shared.database.base import Base
from shared.database.connection import DatabaseConnection
from shared.exceptions import PersistenceError
from shared.models import ActivityLog, CalendarEvent, RawItemRecord, TaskItem
from shared.persistence.base import (
    ActivityEntry,
    ActivityType,
    ExtractionStore,
    PersistedEvent,
    PersistedTask,
    RawItemSource,
)
from shared.schemas.messages import RawItem, SourceType
from shared.schemas.pipeline import Confidence, FormattedEvent, FormattedTask, TaskPriority

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with common create/query operations."""

    def __init__(self, db_session: AsyncSession, model: type[ModelType]):
        """
        Initialize repository.

        Args:
            db_session: Database session
            model: SQLAlchemy model class
        """
        self.db = db_session
        self.model = model

    async def create(self, **kwargs: Any) -> ModelType:
        """
        Create a new record.

        Args:
            **kwargs: Model field values

        Returns:
            Created model instance
        """
        instance = self.model(**kwargs)
        self.db.add(instance)
        await self.db.flush()
        await self.db.refresh(instance)
        return instance

    async def find_by(self, **filters: Any) -> list[ModelType]:
        """
        Find records by exact column values.

        Args:
            **filters: Column name to value

        Returns:
            Matching records ordered by creation time
        """
        query = select(self.model).filter_by(**filters)
        query = query.order_by(self.model.created_at)  # type: ignore[attr-defined]
        result = await self.db.execute(query)
        return list(result.scalars().all())


class SQLRawItemSource(RawItemSource):
    """Raw-item source over the raw_items table."""

    def __init__(self, connection: DatabaseConnection):
        self.connection = connection

    async def add(self, item: RawItem) -> None:
        """Insert or replace a raw item (used by monitors and tests)."""
        async with self.connection.session_scope() as session:
            await session.merge(
                RawItemRecord(
                    id=item.id,
                    source_type=item.source_type.value,
                    stable_id=item.stable_id,
                    content=item.content,
                    subject=item.subject,
                    thread_id=item.thread_id,
                    participants=list(item.participants),
                    item_metadata=dict(item.metadata),
                    source_timestamp=item.source_timestamp,
                    fetched_at=item.fetched_at,
                    extraction_version=item.extraction_version,
                )
            )

    async def fetch_items(
        self,
        start: datetime,
        end: datetime,
        source_type: SourceType | None = None,
        limit: int = 1000,
    ) -> list[RawItem]:
        query = select(RawItemRecord).where(
            RawItemRecord.fetched_at >= start, RawItemRecord.fetched_at < end
        )
        if source_type is not None:
            query = query.where(RawItemRecord.source_type == source_type.value)
        query = query.order_by(RawItemRecord.fetched_at).limit(limit)

        try:
            async with self.connection.session_scope() as session:
                result = await session.execute(query)
                records = result.scalars().all()
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to fetch raw items", details={"error": str(e)}) from e

        return [self._to_item(record) for record in records]

    async def mark_extracted(self, item_ids: list[str], version: str) -> int:
        if not item_ids:
            return 0
        statement = (
            update(RawItemRecord)
            .where(RawItemRecord.id.in_(item_ids))
            .values(extraction_version=version)
        )
        try:
            async with self.connection.session_scope() as session:
                result = await session.execute(statement)
                updated = result.rowcount or 0
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to mark items extracted", details={"error": str(e)}) from e

        logger.debug("raw_items_marked_extracted", count=updated, version=version)
        return updated

    @staticmethod
    def _to_item(record: RawItemRecord) -> RawItem:
        return RawItem(
            id=record.id,
            source_type=SourceType(record.source_type),
            stable_id=record.stable_id,
            content=record.content or "",
            subject=record.subject,
            thread_id=record.thread_id,
            participants=list(record.participants or []),
            metadata=dict(record.item_metadata or {}),
            source_timestamp=record.source_timestamp,
            fetched_at=record.fetched_at,
            extraction_version=record.extraction_version,
        )


class SQLExtractionStore(ExtractionStore):
    """Extraction store over the events, tasks and activity_log tables."""

    def __init__(self, connection: DatabaseConnection):
        self.connection = connection

    async def find_event_starts(self, title: str, source_type: SourceType) -> list[datetime]:
        query = select(CalendarEvent.start_date).where(
            CalendarEvent.title == title, CalendarEvent.source_type == source_type.value
        )
        async with self.connection.session_scope() as session:
            result = await session.execute(query)
            return list(result.scalars().all())

    async def task_exists(self, title: str, source_type: SourceType) -> bool:
        query = (
            select(TaskItem.id)
            .where(TaskItem.title == title, TaskItem.source_type == source_type.value)
            .limit(1)
        )
        async with self.connection.session_scope() as session:
            result = await session.execute(query)
            return result.scalar_one_or_none() is not None

    async def insert_event(
        self, event: FormattedEvent, source_type: SourceType, source_identifier: str
    ) -> str:
        try:
            async with self.connection.session_scope() as session:
                record = await BaseRepository(session, CalendarEvent).create(
                    title=event.title,
                    description=event.notes,
                    start_date=event.start_date,
                    end_date=event.end_date,
                    is_all_day=event.is_all_day,
                    location=event.location,
                    attendees=list(event.attendees),
                    source_type=source_type.value,
                    source_identifier=source_identifier,
                    confidence=event.confidence.value,
                )
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to insert event", details={"title": event.title}) from e
        return str(record.id)

    async def insert_task(
        self, task: FormattedTask, source_type: SourceType, source_identifier: str
    ) -> str:
        try:
            async with self.connection.session_scope() as session:
                record = await BaseRepository(session, TaskItem).create(
                    title=task.title,
                    context=task.notes,
                    due_date=task.due_date,
                    priority=task.priority.value,
                    assignee_name=task.assignee,
                    source_type=source_type.value,
                    source_identifier=source_identifier,
                    confidence=task.confidence.value,
                )
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to insert task", details={"title": task.title}) from e
        return str(record.id)

    async def log_activity(
        self, activity_type: ActivityType, message: str, metadata: dict[str, str] | None = None
    ) -> str:
        try:
            async with self.connection.session_scope() as session:
                record = await BaseRepository(session, ActivityLog).create(
                    activity_type=activity_type.value,
                    message=message,
                    details=dict(metadata or {}),
                )
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to write activity log") from e
        return str(record.id)

    async def list_events(self) -> list[PersistedEvent]:
        async with self.connection.session_scope() as session:
            records = await BaseRepository(session, CalendarEvent).find_by()
        return [
            PersistedEvent(
                id=str(record.id),
                title=record.title,
                start_date=record.start_date,
                end_date=record.end_date,
                is_all_day=record.is_all_day,
                location=record.location,
                attendees=list(record.attendees or []),
                notes=record.description,
                confidence=Confidence.parse(record.confidence),
                source_type=SourceType(record.source_type),
                source_identifier=record.source_identifier,
            )
            for record in records
        ]

    async def list_tasks(self) -> list[PersistedTask]:
        async with self.connection.session_scope() as session:
            records = await BaseRepository(session, TaskItem).find_by()
        return [
            PersistedTask(
                id=str(record.id),
                title=record.title,
                due_date=record.due_date,
                priority=TaskPriority.parse(record.priority),
                assignee=record.assignee_name,
                notes=record.context,
                confidence=Confidence.parse(record.confidence),
                source_type=SourceType(record.source_type),
                source_identifier=record.source_identifier,
            )
            for record in records
        ]

    async def list_activity(self, limit: int = 50) -> list[ActivityEntry]:
        query = select(ActivityLog).order_by(ActivityLog.created_at.desc()).limit(limit)
        async with self.connection.session_scope() as session:
            result = await session.execute(query)
            records = result.scalars().all()
        return [
            ActivityEntry(
                id=str(record.id),
                activity_type=ActivityType(record.activity_type),
                message=record.message,
                metadata=dict(record.details or {}),
                created_at=record.created_at,
            )
            for record in records
        ]
