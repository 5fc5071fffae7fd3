"""
Validator agent: rejects implausible items and adjusts confidence.

The model pass is followed by deterministic rules so the rejection and
downgrade criteria hold even when the model misses one.
"""

from datetime import date, timedelta

from pydantic import BaseModel, Field

from shared.agents.base import BaseAgent
from shared.agents.parsing import parse_response
from shared.agents.prompts import build_validator_system_prompt, build_validator_user_prompt
from shared.agents.records import ValidatorResponse, parse_events, parse_tasks
from shared.agents.schemas import VALIDATOR_SCHEMA
from shared.config.logging import get_logger
from shared.schemas.pipeline import Confidence, FormattedEvent, FormattedTask, RejectedItem

logger = get_logger(__name__)

MAX_PAST_DAYS = 7
FAR_FUTURE_DAYS = 30


class ValidationOutcome(BaseModel):
    """Validated items and the rejected ones with reasons."""

    events: list[FormattedEvent] = Field(default_factory=list)
    tasks: list[FormattedTask] = Field(default_factory=list)
    rejected: list[RejectedItem] = Field(default_factory=list)


class ValidatorAgent(BaseAgent):
    """Formatted items to validated items."""

    temperature = 0.0

    async def validate(
        self,
        events: list[FormattedEvent],
        tasks: list[FormattedTask],
        reference: date,
    ) -> ValidationOutcome:
        """
        Validate items against the reference date.

        Args:
            events: Formatted events
            tasks: Formatted tasks
            reference: Day treated as TODAY

        Returns:
            ValidationOutcome; empty without a model call for no input

        Raises:
            ResponseParseError: If the response does not match the schema
        """
        if not events and not tasks:
            return ValidationOutcome()

        response = await self._invoke(
            build_validator_system_prompt(reference),
            build_validator_user_prompt(events, tasks),
            schema=VALIDATOR_SCHEMA,
        )
        parsed = parse_response(response, ValidatorResponse)

        outcome = ValidationOutcome(
            events=carry_over_events(parse_events(parsed.valid_events), events),
            tasks=carry_over_tasks(parse_tasks(parsed.valid_tasks), tasks),
            rejected=[record.to_rejected() for record in parsed.rejected_items or []],
        )
        outcome = apply_rules(outcome, reference)

        logger.info(
            "items_validated",
            events=len(outcome.events),
            tasks=len(outcome.tasks),
            rejected=len(outcome.rejected),
        )
        return outcome


def carry_over_events(
    validated: list[FormattedEvent], originals: list[FormattedEvent]
) -> list[FormattedEvent]:
    """Restore notes and attendees the model dropped, matching by title."""
    by_title = {event.title: event for event in originals}
    restored = []
    for event in validated:
        original = by_title.get(event.title)
        if original is not None:
            event = event.model_copy(
                update={
                    "notes": event.notes or original.notes,
                    "attendees": event.attendees or original.attendees,
                }
            )
        restored.append(event)
    return restored


def carry_over_tasks(
    validated: list[FormattedTask], originals: list[FormattedTask]
) -> list[FormattedTask]:
    """Restore notes and assignee the model dropped, matching by title."""
    by_title = {task.title: task for task in originals}
    restored = []
    for task in validated:
        original = by_title.get(task.title)
        if original is not None:
            task = task.model_copy(
                update={
                    "notes": task.notes or original.notes,
                    "assignee": task.assignee or original.assignee,
                }
            )
        restored.append(task)
    return restored


def apply_rules(outcome: ValidationOutcome, reference: date) -> ValidationOutcome:
    """
    Enforce the validation rules on model output.

    Rejects items dated more than 7 days before the reference date, events
    ending before they start and exact duplicates (same title and time).
    Downgrades high-confidence events more than 30 days out to medium and
    all-day events to low.

    Args:
        outcome: Model validation outcome
        reference: Day treated as TODAY

    Returns:
        Adjusted outcome
    """
    oldest = reference - timedelta(days=MAX_PAST_DAYS)
    far_future = reference + timedelta(days=FAR_FUTURE_DAYS)
    rejected = list(outcome.rejected)

    events: list[FormattedEvent] = []
    seen_events: set[tuple[str, object]] = set()
    for event in outcome.events:
        key = (event.title.casefold(), event.start_date)
        if event.start_date.date() < oldest:
            rejected.append(RejectedItem(title=event.title, reason="More than 7 days in the past"))
            continue
        if event.end_date is not None and event.end_date < event.start_date:
            rejected.append(RejectedItem(title=event.title, reason="Ends before it starts"))
            continue
        if key in seen_events:
            rejected.append(RejectedItem(title=event.title, reason="Duplicate event"))
            continue
        seen_events.add(key)

        if event.is_all_day and event.confidence is not Confidence.LOW:
            event = event.model_copy(update={"confidence": Confidence.LOW})
        elif event.start_date.date() > far_future and event.confidence is Confidence.HIGH:
            event = event.model_copy(update={"confidence": Confidence.MEDIUM})
        events.append(event)

    tasks: list[FormattedTask] = []
    seen_tasks: set[tuple[str, object]] = set()
    for task in outcome.tasks:
        key = (task.title.casefold(), task.due_date)
        if task.due_date is not None and task.due_date.date() < oldest:
            rejected.append(RejectedItem(title=task.title, reason="More than 7 days in the past"))
            continue
        if key in seen_tasks:
            rejected.append(RejectedItem(title=task.title, reason="Duplicate task"))
            continue
        seen_tasks.add(key)
        tasks.append(task)

    return ValidationOutcome(events=events, tasks=tasks, rejected=rejected)
