"""
Pydantic schemas for pipeline input, stage outputs and API responses.
"""

from shared.schemas.base import BaseSchema, FrozenSchema
from shared.schemas.messages import (
    ConversationThread,
    DailyMessageBatch,
    MessageItem,
    RawItem,
    SourceType,
)
from shared.schemas.pipeline import (
    Confidence,
    CriticResult,
    DailyStory,
    DisputedItem,
    ExtractedItem,
    FormattedEvent,
    FormattedTask,
    Issue,
    IssueType,
    ItemType,
    PipelineResult,
    PipelineStats,
    RejectedItem,
    StageTimings,
    TaskPriority,
    VerificationResult,
)

__all__ = [
    # Base
    "BaseSchema",
    "FrozenSchema",
    # Raw input
    "SourceType",
    "RawItem",
    "MessageItem",
    "ConversationThread",
    "DailyMessageBatch",
    # Pipeline stages
    "ItemType",
    "Confidence",
    "TaskPriority",
    "IssueType",
    "DailyStory",
    "ExtractedItem",
    "FormattedEvent",
    "FormattedTask",
    "Issue",
    "CriticResult",
    "DisputedItem",
    "VerificationResult",
    "RejectedItem",
    "StageTimings",
    "PipelineResult",
    "PipelineStats",
]
