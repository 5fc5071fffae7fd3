"""
Critic agent: self-reflection over one extraction pass.
"""

from shared.agents.base import BaseAgent
from shared.agents.parsing import parse_response
from shared.agents.prompts import CRITIC_SYSTEM_PROMPT, build_critic_user_prompt
from shared.agents.records import CriticResponse
from shared.agents.schemas import CRITIC_SCHEMA
from shared.config.logging import get_logger
from shared.schemas.pipeline import (
    CriticResult,
    DailyStory,
    ExtractedItem,
    FormattedEvent,
    FormattedTask,
)

logger = get_logger(__name__)


class CriticAgent(BaseAgent):
    """Scores an extraction against the narrative and votes on a retry."""

    temperature = 0.1

    async def review(
        self,
        story: DailyStory,
        extracted_items: list[ExtractedItem],
        events: list[FormattedEvent],
        tasks: list[FormattedTask],
    ) -> CriticResult:
        """
        Review extraction quality.

        Args:
            story: Original narrative
            extracted_items: Extractor output
            events: Formatter events
            tasks: Formatter tasks

        Returns:
            CriticResult

        Raises:
            ResponseParseError: If the response does not match the schema
        """
        response = await self._invoke(
            CRITIC_SYSTEM_PROMPT,
            build_critic_user_prompt(story.narrative, events, tasks),
            schema=CRITIC_SCHEMA,
        )
        result = parse_response(response, CriticResponse).to_result()

        logger.info(
            "critic_reviewed",
            score=result.quality_score,
            issues=len(result.issues),
            missing=len(result.missing_items),
            should_retry=result.should_retry,
            extracted=len(extracted_items),
        )
        return result

    @staticmethod
    def generate_feedback(result: CriticResult) -> str:
        """
        Render a review as prompt-ready feedback.

        Args:
            result: Critic review

        Returns:
            Feedback block listing the score, issues and missing items
        """
        feedback = f"Quality score: {result.quality_score}/10\n\n"

        if result.issues:
            feedback += "ISSUES TO FIX:\n"
            for issue in result.issues:
                feedback += f"- [{issue.issue_type.value}] {issue.item_title}: {issue.description}"
                if issue.suggested_fix:
                    feedback += f" → {issue.suggested_fix}"
                feedback += "\n"

        if result.missing_items:
            feedback += "\nMISSING ITEMS (please extract these):\n"
            for item in result.missing_items:
                feedback += f"- {item}\n"

        return feedback
