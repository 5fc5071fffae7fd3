"""
Extractor agent: pulls candidate events and tasks out of a narrative.
"""

from shared.agents.base import BaseAgent
from shared.agents.parsing import parse_response
from shared.agents.prompts import build_extractor_system_prompt, build_extractor_user_prompt
from shared.agents.records import ExtractedItemRecord
from shared.agents.schemas import EXTRACTOR_SCHEMA
from shared.config.logging import get_logger
from shared.schemas.pipeline import DailyStory, ExtractedItem

logger = get_logger(__name__)


class ExtractorAgent(BaseAgent):
    """Narrative to ExtractedItem list."""

    temperature = 0.1

    async def extract(self, story: DailyStory, feedback: str | None = None) -> list[ExtractedItem]:
        """
        Extract candidate items.

        Args:
            story: Daily narrative
            feedback: Critic feedback steering a retry

        Returns:
            Extracted items, possibly empty

        Raises:
            ResponseParseError: If the response does not match the schema
        """
        response = await self._invoke(
            build_extractor_system_prompt(story.date),
            build_extractor_user_prompt(story.narrative, feedback),
            schema=EXTRACTOR_SCHEMA,
        )
        records = parse_response(response, list[ExtractedItemRecord])
        items = [record.to_item() for record in records]

        logger.info(
            "items_extracted",
            date=story.date.isoformat(),
            count=len(items),
            with_feedback=feedback is not None,
        )
        return items
