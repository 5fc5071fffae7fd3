"""
Pipeline stage schemas.

Values handed from one agent to the next, and the per-day result handed to
persistence.
"""

from datetime import date, datetime
from enum import Enum

from pydantic import Field

from shared.schemas.base import BaseSchema, FrozenSchema


class ItemType(str, Enum):
    """Kind of extracted item."""

    EVENT = "event"
    TASK = "task"


class Confidence(str, Enum):
    """Extraction certainty tier."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def parse(cls, value: str | None, default: "Confidence | None" = None) -> "Confidence":
        """Map free text onto a tier, falling back to ``default`` (medium)."""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return default or cls.MEDIUM


class TaskPriority(str, Enum):
    """Task priority."""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

    @classmethod
    def parse(cls, value: str | None) -> "TaskPriority":
        """Map free text onto a priority; unknown values become ``none``."""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.NONE


class IssueType(str, Enum):
    """Problem category flagged by the critic."""

    MISSING_INFO = "missing_info"
    WRONG_DATE = "wrong_date"
    WRONG_TYPE = "wrong_type"
    DUPLICATE = "duplicate"
    VAGUE = "vague"
    HALLUCINATION = "hallucination"

    @classmethod
    def _missing_(cls, value: object) -> "IssueType":
        return cls.VAGUE


class DailyStory(FrozenSchema):
    """Narrative summary of one day's conversations."""

    date: date
    narrative: str
    key_people: frozenset[str] = Field(default_factory=frozenset)
    conversation_count: int = 0


class ExtractedItem(FrozenSchema):
    """Candidate event or task with loosely specified timing."""

    title: str
    item_type: ItemType
    rough_date: str | None = None
    rough_time: str | None = None
    people: list[str] = Field(default_factory=list)
    location: str | None = None
    confidence: Confidence = Confidence.MEDIUM
    context: str | None = None


class FormattedEvent(FrozenSchema):
    """Calendar event with absolute timing."""

    title: str
    start_date: datetime
    end_date: datetime | None = None
    is_all_day: bool = False
    location: str | None = None
    attendees: list[str] = Field(default_factory=list)
    notes: str | None = None
    confidence: Confidence = Confidence.MEDIUM


class FormattedTask(FrozenSchema):
    """Task with an optional absolute due date."""

    title: str
    due_date: datetime | None = None
    priority: TaskPriority = TaskPriority.NONE
    assignee: str | None = None
    notes: str | None = None
    confidence: Confidence = Confidence.MEDIUM


class Issue(FrozenSchema):
    """Per-item problem reported by the critic."""

    item_title: str
    issue_type: IssueType
    description: str
    suggested_fix: str | None = None


class CriticResult(FrozenSchema):
    """Critic's assessment of one extraction pass."""

    quality_score: float = Field(..., ge=0.0, le=10.0)
    issues: list[Issue] = Field(default_factory=list)
    missing_items: list[str] = Field(default_factory=list)
    should_retry: bool = False


class DisputedItem(FrozenSchema):
    """Item the verifier did not agree with."""

    title: str
    reason: str


class VerificationResult(FrozenSchema):
    """Outcome of the skeptical second pass."""

    agreed_events: list[FormattedEvent] = Field(default_factory=list)
    agreed_tasks: list[FormattedTask] = Field(default_factory=list)
    disputed_items: list[DisputedItem] = Field(default_factory=list)
    consensus_score: float = Field(1.0, ge=0.0, le=1.0)


class RejectedItem(FrozenSchema):
    """Item dropped by validation or filtering, with the reason."""

    title: str
    reason: str


class StageTimings(BaseSchema):
    """Wall-clock milliseconds spent per stage."""

    story_ms: int = 0
    extract_ms: int = 0
    format_ms: int = 0
    verify_ms: int = 0
    validate_ms: int = 0
    total_ms: int = 0


class PipelineResult(BaseSchema):
    """Final output of one day's pipeline run."""

    date: date
    events: list[FormattedEvent] = Field(default_factory=list)
    tasks: list[FormattedTask] = Field(default_factory=list)
    story: str | None = None
    rejected_items: list[RejectedItem] = Field(default_factory=list)
    stats: StageTimings = Field(default_factory=StageTimings)

    @classmethod
    def empty(cls, day: date) -> "PipelineResult":
        """Result for a day with nothing to extract."""
        return cls(date=day)


class PipelineStats(BaseSchema):
    """Point-in-time snapshot of coordinator and model-layer counters."""

    is_running: bool = False
    days_processed: int = 0
    events_created: int = 0
    tasks_created: int = 0
    reflection_retries: int = 0
    items_disputed: int = 0
    cache_hit_rate: float = 0.0
    total_api_calls: int = 0
    cache_hits: int = 0

    def describe(self) -> str:
        """One-line human-readable summary."""
        state = "running" if self.is_running else "stopped"
        return (
            f"Pipeline {state}: {self.days_processed} days, "
            f"{self.events_created} events, {self.tasks_created} tasks created; "
            f"{self.reflection_retries} reflection retries, {self.items_disputed} disputed; "
            f"cache {self.cache_hits}/{self.total_api_calls} ({self.cache_hit_rate:.0%})"
        )
