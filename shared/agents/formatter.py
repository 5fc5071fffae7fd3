"""
Formatter agent: resolves rough dates and times into absolute timestamps.
"""

from datetime import date

from shared.agents.base import BaseAgent
from shared.agents.parsing import parse_response
from shared.agents.prompts import (
    build_formatter_system_prompt,
    build_formatter_user_prompt,
    to_json,
)
from shared.agents.records import FormatterResponse, parse_events, parse_tasks
from shared.agents.schemas import FORMATTER_SCHEMA
from shared.config.logging import get_logger
from shared.schemas.pipeline import ExtractedItem, FormattedEvent, FormattedTask

logger = get_logger(__name__)


class FormatterAgent(BaseAgent):
    """ExtractedItem list to formatted events and tasks."""

    temperature = 0.0

    async def format(
        self,
        items: list[ExtractedItem],
        reference: date,
    ) -> tuple[list[FormattedEvent], list[FormattedTask]]:
        """
        Convert items to calendar format.

        Events whose start does not parse are dropped. A date-only start makes
        the event all-day; a timed event without an end lasts one hour.

        Args:
            items: Extracted items
            reference: Day treated as TODAY

        Returns:
            (events, tasks); ([], []) without a model call for no items

        Raises:
            ResponseParseError: If the response does not match the schema
        """
        if not items:
            return [], []

        items_json = to_json(
            [
                {
                    "title": item.title,
                    "type": item.item_type.value,
                    "rough_date": item.rough_date or "",
                    "rough_time": item.rough_time or "",
                    "people": ", ".join(item.people),
                    "location": item.location or "",
                    "confidence": item.confidence.value,
                }
                for item in items
            ]
        )

        response = await self._invoke(
            build_formatter_system_prompt(reference),
            build_formatter_user_prompt(items_json),
            schema=FORMATTER_SCHEMA,
        )
        parsed = parse_response(response, FormatterResponse)

        events = parse_events(parsed.events)
        tasks = parse_tasks(parsed.tasks)

        dropped = len(parsed.events or []) - len(events)
        if dropped:
            logger.warning("events_dropped_unparseable_start", count=dropped)

        logger.info("items_formatted", events=len(events), tasks=len(tasks))
        return events, tasks
