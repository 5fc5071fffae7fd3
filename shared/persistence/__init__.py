"""
Store interfaces and in-memory implementations.
"""

from shared.persistence.base import (
    ActivityEntry,
    ActivityType,
    ExtractionStore,
    PersistedEvent,
    PersistedTask,
    RawItemSource,
)
from shared.persistence.memory import InMemoryExtractionStore, InMemoryRawItemSource

__all__ = [
    "ActivityType",
    "ActivityEntry",
    "PersistedEvent",
    "PersistedTask",
    "RawItemSource",
    "ExtractionStore",
    "InMemoryRawItemSource",
    "InMemoryExtractionStore",
]
