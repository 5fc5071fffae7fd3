"""
Typed records for structured model responses.

One record per response schema. Validation failures surface as
ResponseParseError through shared.agents.parsing.
"""

from datetime import timedelta

from pydantic import BaseModel, ConfigDict, Field

from shared.schemas.pipeline import (
    Confidence,
    CriticResult,
    ExtractedItem,
    FormattedEvent,
    FormattedTask,
    Issue,
    IssueType,
    ItemType,
    RejectedItem,
    TaskPriority,
)
from shared.utils.datetime_utils import is_date_only, parse_datetime

DEFAULT_EVENT_DURATION = timedelta(hours=1)


class ResponseRecord(BaseModel):
    """Base for response records; unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")


class ExtractedItemRecord(ResponseRecord):
    title: str
    type: str
    confidence: str
    rough_date: str | None = None
    rough_time: str | None = None
    people: list[str] | None = None
    location: str | None = None
    context: str | None = None

    def to_item(self) -> ExtractedItem:
        """Convert to the pipeline model; unknown types become events."""
        return ExtractedItem(
            title=self.title,
            item_type=ItemType.TASK if self.type.strip().lower() == "task" else ItemType.EVENT,
            rough_date=self.rough_date or None,
            rough_time=self.rough_time or None,
            people=self.people or [],
            location=self.location or None,
            confidence=Confidence.parse(self.confidence),
            context=self.context or None,
        )


class EventRecord(ResponseRecord):
    title: str
    start_date: str
    end_date: str | None = None
    is_all_day: bool | None = None
    location: str | None = None
    attendees: list[str] | None = None
    notes: str | None = None
    confidence: str | None = None

    def to_event(self) -> FormattedEvent | None:
        """
        Convert to a formatted event.

        A bare date makes the event all-day; a timed event without a usable
        end lasts one hour.

        Returns:
            FormattedEvent, or None when the start does not parse
        """
        start = parse_datetime(self.start_date)
        if start is None:
            return None

        is_all_day = bool(self.is_all_day) or is_date_only(self.start_date)
        end = parse_datetime(self.end_date)
        if end is None and not is_all_day:
            end = start + DEFAULT_EVENT_DURATION

        return FormattedEvent(
            title=self.title,
            start_date=start,
            end_date=end,
            is_all_day=is_all_day,
            location=self.location or None,
            attendees=self.attendees or [],
            notes=self.notes or None,
            confidence=Confidence.parse(self.confidence),
        )


class TaskRecord(ResponseRecord):
    title: str
    due_date: str | None = None
    priority: str | None = None
    assignee: str | None = None
    notes: str | None = None
    confidence: str | None = None

    def to_task(self) -> FormattedTask:
        return FormattedTask(
            title=self.title,
            due_date=parse_datetime(self.due_date),
            priority=TaskPriority.parse(self.priority or "medium"),
            assignee=self.assignee or None,
            notes=self.notes or None,
            confidence=Confidence.parse(self.confidence),
        )


class FormatterResponse(ResponseRecord):
    events: list[EventRecord] | None = None
    tasks: list[TaskRecord] | None = None


class RejectedRecord(ResponseRecord):
    title: str
    reason: str

    def to_rejected(self) -> RejectedItem:
        return RejectedItem(title=self.title, reason=self.reason)


class ValidatorResponse(ResponseRecord):
    valid_events: list[EventRecord] | None = None
    valid_tasks: list[TaskRecord] | None = None
    rejected_items: list[RejectedRecord] | None = None


class IssueRecord(ResponseRecord):
    item_title: str
    issue_type: str
    description: str
    suggested_fix: str | None = None


class CriticResponse(ResponseRecord):
    quality_score: float = Field(..., ge=0.0, le=10.0)
    issues: list[IssueRecord] | None = None
    missing_items: list[str] | None = None
    should_retry: bool

    def to_result(self) -> CriticResult:
        """Convert to the pipeline model; unknown issue types become vague."""
        return CriticResult(
            quality_score=self.quality_score,
            issues=[
                Issue(
                    item_title=issue.item_title,
                    issue_type=IssueType(issue.issue_type.strip().lower()),
                    description=issue.description,
                    suggested_fix=issue.suggested_fix or None,
                )
                for issue in self.issues or []
            ],
            missing_items=self.missing_items or [],
            should_retry=self.should_retry,
        )


class DisputedRecord(ResponseRecord):
    item: str
    reason: str = ""


class VerifierResponse(ResponseRecord):
    agreed_events: list[str] | None = None
    agreed_tasks: list[str] | None = None
    disputed: list[DisputedRecord] | None = None
    consensus_score: float | None = Field(None, ge=0.0, le=1.0)


def parse_events(records: list[EventRecord] | None) -> list[FormattedEvent]:
    """Convert event records, dropping those whose start does not parse."""
    events = []
    for record in records or []:
        event = record.to_event()
        if event is not None:
            events.append(event)
    return events


def parse_tasks(records: list[TaskRecord] | None) -> list[FormattedTask]:
    return [record.to_task() for record in records or []]
