"""
Raw item database model.
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from shared.database.base import Base, TimestampMixin


class RawItemRecord(Base, TimestampMixin):
    """Raw item captured by a source monitor."""

    __tablename__ = "raw_items"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)

    source_type: Mapped[str] = mapped_column(String(50), nullable=False)
    # Source-native identifier (message GUID, event ID, ...)
    stable_id: Mapped[str] = mapped_column(String(200), nullable=False)

    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    subject: Mapped[str | None] = mapped_column(String(500), nullable=True)
    thread_id: Mapped[str | None] = mapped_column(String(200), nullable=True, index=True)
    participants: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    item_metadata: Mapped[dict] = mapped_column("metadata", JSON, default=dict, nullable=False)

    source_timestamp: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    fetched_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    # Version of the extraction pipeline that last processed this item
    extraction_version: Mapped[str | None] = mapped_column(String(20), nullable=True)

    __table_args__ = (Index("idx_raw_items_source_fetched", "source_type", "fetched_at"),)

    def __repr__(self) -> str:
        return f"<RawItemRecord(id={self.id}, source={self.source_type})>"
