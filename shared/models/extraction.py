"""
Extraction store database models.
"""

import uuid
from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from shared.database.base import Base, TimestampMixin


class CalendarEvent(Base, TimestampMixin):
    """Extracted calendar event."""

    __tablename__ = "events"

    # Primary key
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4, nullable=False
    )

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Naive local times as produced by the formatter
    start_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    is_all_day: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    location: Mapped[str | None] = mapped_column(String(500), nullable=True)
    attendees: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    # Provenance
    source_type: Mapped[str] = mapped_column(String(50), nullable=False)
    source_identifier: Mapped[str] = mapped_column(String(200), nullable=False)

    # "high", "medium", "low"
    confidence: Mapped[str] = mapped_column(String(20), nullable=False)

    __table_args__ = (
        Index("idx_events_title_source", "title", "source_type"),
        Index("idx_events_start_date", "start_date"),
    )

    def __repr__(self) -> str:
        return f"<CalendarEvent(id={self.id}, title={self.title}, start={self.start_date})>"


class TaskItem(Base, TimestampMixin):
    """Extracted task."""

    __tablename__ = "tasks"

    # Primary key
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4, nullable=False
    )

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    context: Mapped[str | None] = mapped_column(Text, nullable=True)
    due_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    priority: Mapped[str] = mapped_column(String(20), nullable=False, default="none")
    assignee_name: Mapped[str | None] = mapped_column(String(200), nullable=True)

    # Provenance
    source_type: Mapped[str] = mapped_column(String(50), nullable=False)
    source_identifier: Mapped[str] = mapped_column(String(200), nullable=False)

    confidence: Mapped[str] = mapped_column(String(20), nullable=False)

    __table_args__ = (Index("idx_tasks_title_source", "title", "source_type"),)

    def __repr__(self) -> str:
        return f"<TaskItem(id={self.id}, title={self.title})>"


class ActivityLog(Base, TimestampMixin):
    """Activity log entry written after each persisted pipeline run."""

    __tablename__ = "activity_log"

    # Primary key
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4, nullable=False
    )

    activity_type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    details: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)

    def __repr__(self) -> str:
        return f"<ActivityLog(id={self.id}, type={self.activity_type})>"
