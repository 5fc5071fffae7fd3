"""
Database models.
"""

from shared.models.extraction import ActivityLog, CalendarEvent, TaskItem
from shared.models.raw_item import RawItemRecord

__all__ = [
    # Raw input
    "RawItemRecord",
    # Extraction output
    "CalendarEvent",
    "TaskItem",
    "ActivityLog",
]
