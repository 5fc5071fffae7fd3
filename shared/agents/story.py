"""
Story agent: summarizes a day's conversations into a narrative.
"""

from shared.agents.base import BaseAgent
from shared.agents.prompts import STORY_SYSTEM_PROMPT, long_date
from shared.config.logging import get_logger
from shared.deduplication import EmbeddingDeduplicator
from shared.exceptions import DuplicateContentError, ModelAccessError
from shared.llm import LLMClient, optimize_context_position
from shared.schemas.messages import DailyMessageBatch
from shared.schemas.pipeline import DailyStory

logger = get_logger(__name__)


class StoryAgent(BaseAgent):
    """Turns a DailyMessageBatch into a DailyStory, refusing recently seen content."""

    temperature = 0.3

    def __init__(
        self,
        client: LLMClient,
        deduplicator: EmbeddingDeduplicator,
        compression_message_threshold: int = 50,
    ):
        """
        Initialize story agent.

        Args:
            client: Unified LLM client
            deduplicator: Narrative input deduplicator
            compression_message_threshold: Compress prompts for batches above this size
        """
        super().__init__(client)
        self.deduplicator = deduplicator
        self.compression_message_threshold = compression_message_threshold

    async def summarize(self, batch: DailyMessageBatch) -> DailyStory:
        """
        Summarize a batch.

        Args:
            batch: Day's conversation threads

        Returns:
            DailyStory

        Raises:
            DuplicateContentError: If the batch matches recently processed content
        """
        content = batch.formatted_for_llm()
        embedding = await self._embed(content)

        if await self.deduplicator.is_duplicate(content, embedding):
            logger.info("story_duplicate_skipped", date=batch.date.isoformat())
            raise DuplicateContentError()

        user_prompt = optimize_context_position(
            content, date_context=f"Reference date: {long_date(batch.date)}"
        )
        narrative = await self._invoke(
            STORY_SYSTEM_PROMPT,
            user_prompt,
            use_compression=batch.total_message_count > self.compression_message_threshold,
        )

        await self.deduplicator.mark_processed(content, embedding)

        key_people = frozenset(
            person for conversation in batch.conversations for person in conversation.participants
        )
        logger.info(
            "story_summarized",
            date=batch.date.isoformat(),
            conversations=len(batch.conversations),
            messages=batch.total_message_count,
        )
        return DailyStory(
            date=batch.date,
            narrative=narrative,
            key_people=key_people,
            conversation_count=len(batch.conversations),
        )

    async def _embed(self, content: str) -> list[float] | None:
        try:
            return await self.client.embedding_service.embed(content)
        except ModelAccessError as e:
            logger.warning("story_embedding_failed", error=str(e))
            return None
