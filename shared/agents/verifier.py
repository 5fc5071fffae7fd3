"""
Multi-agent verifier: a skeptical second pass over formatted items.

Fails safe: unparseable replies or an empty agreed set keep the original items.
"""

from datetime import date

from shared.agents.base import BaseAgent
from shared.agents.parsing import first_json_object, parse_response
from shared.agents.prompts import VERIFIER_SYSTEM_PROMPT, build_verifier_user_prompt
from shared.agents.records import VerifierResponse
from shared.config.logging import get_logger
from shared.exceptions import ResponseParseError
from shared.schemas.pipeline import (
    DisputedItem,
    FormattedEvent,
    FormattedTask,
    VerificationResult,
)

logger = get_logger(__name__)

DEFAULT_CONSENSUS = 0.8


class MultiAgentVerifier(BaseAgent):
    """Challenges each item and reports agreement."""

    temperature = 0.2

    async def cross_verify(
        self,
        events: list[FormattedEvent],
        tasks: list[FormattedTask],
        original_story: str,
        reference: date,
    ) -> VerificationResult:
        """
        Cross-verify items against the narrative.

        Args:
            events: Candidate events
            tasks: Candidate tasks
            original_story: Narrative the items came from
            reference: Day treated as TODAY

        Returns:
            VerificationResult
        """
        response = await self._invoke(
            VERIFIER_SYSTEM_PROMPT,
            build_verifier_user_prompt(original_story, reference, events, tasks),
        )
        result = self.parse_verification(response, events, tasks)

        logger.info(
            "items_verified",
            agreed_events=len(result.agreed_events),
            agreed_tasks=len(result.agreed_tasks),
            disputed=len(result.disputed_items),
            consensus=result.consensus_score,
        )
        return result

    @staticmethod
    def parse_verification(
        response: str,
        events: list[FormattedEvent],
        tasks: list[FormattedTask],
    ) -> VerificationResult:
        """
        Interpret a free-text verifier reply.

        Args:
            response: Raw reply
            events: Events under review
            tasks: Tasks under review

        Returns:
            Agreed subsets (whole lists when nothing matched), disputed items
            and consensus (0.8 when omitted); everything with consensus 1.0 when
            the reply does not parse
        """
        payload = first_json_object(response)
        if payload is None:
            logger.warning("verification_unparseable", reason="no_json_object")
            return VerificationResult(agreed_events=events, agreed_tasks=tasks, consensus_score=1.0)

        try:
            parsed = parse_response(payload, VerifierResponse)
        except ResponseParseError as e:
            logger.warning("verification_unparseable", reason=e.message)
            return VerificationResult(agreed_events=events, agreed_tasks=tasks, consensus_score=1.0)

        agreed_event_titles = set(parsed.agreed_events or [])
        agreed_task_titles = set(parsed.agreed_tasks or [])
        agreed_events = [event for event in events if event.title in agreed_event_titles]
        agreed_tasks = [task for task in tasks if task.title in agreed_task_titles]

        return VerificationResult(
            agreed_events=agreed_events or events,
            agreed_tasks=agreed_tasks or tasks,
            disputed_items=[
                DisputedItem(title=record.item, reason=record.reason)
                for record in parsed.disputed or []
            ],
            consensus_score=(
                parsed.consensus_score if parsed.consensus_score is not None else DEFAULT_CONSENSUS
            ),
        )
