"""
Base class for model-backed agents.
"""

from typing import Any

from shared.llm import LLMClient


class BaseAgent:
    """Single-purpose transformer backed by one model call."""

    temperature: float = 0.2

    def __init__(self, client: LLMClient):
        """
        Initialize agent.

        Args:
            client: Unified LLM client
        """
        self.client = client

    async def _invoke(
        self,
        system_prompt: str,
        user_prompt: str,
        schema: dict[str, Any] | None = None,
        use_compression: bool = False,
    ) -> str:
        return await self.client.invoke(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            schema=schema,
            temperature=self.temperature,
            use_compression=use_compression,
        )
