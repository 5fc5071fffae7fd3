"""
Shared fixtures for unit tests.

Provides a scripted generation provider, a deterministic embedding service
and a responder that answers each agent with canned JSON.
"""

import hashlib
from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock

import pytest

from shared.llm import LLMClient, LLMProvider, LLMSettings, ResponseCache
from shared.llm.providers import BaseProvider
from shared.llm.retry import RetryPolicy


def hash_embedding(text: str) -> list[float]:
    """Deterministic 32-dim embedding; distinct texts are nearly orthogonal."""
    digest = hashlib.sha256(text.encode()).digest()
    return [byte / 127.5 - 1.0 for byte in digest]


class FakeEmbeddingService:
    """Embedding service returning fixed or hash-derived vectors."""

    def __init__(
        self,
        vectors: dict[str, list[float]] | None = None,
        error: Exception | None = None,
    ):
        self.vectors = vectors or {}
        self.error = error
        self.calls: list[str] = []

    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return self.vectors.get(text) or hash_embedding(text)

    async def close(self) -> None:
        return None


class ScriptedProvider(BaseProvider):
    """Provider whose replies come from a responder callable."""

    def __init__(self, responder: Callable[[str, str, dict | None], Any]):
        super().__init__(LLMSettings())
        self.responder = responder
        self.calls: list[dict[str, Any]] = []

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        schema: dict[str, Any] | None,
        temperature: float,
    ) -> str:
        self.calls.append(
            {
                "system": system_prompt,
                "user": user_prompt,
                "schema": schema,
                "temperature": temperature,
            }
        )
        reply = self.responder(system_prompt, user_prompt, schema)
        if isinstance(reply, Exception):
            raise reply
        return reply


STAGE_MARKERS = (
    ("story", "CRITICAL: Focus on extracting ACTIONABLE"),
    ("validator", "VALIDATION REFERENCE DATE"),
    ("extractor", "REFERENCE DATE:"),
    ("formatter", "CRITICAL DATE CONTEXT - USE THIS"),
    ("critic", "quality reviewer"),
    ("verifier", "SKEPTICAL REVIEWER"),
)


def stage_of(system_prompt: str) -> str:
    for stage, marker in STAGE_MARKERS:
        if marker in system_prompt:
            return stage
    raise AssertionError(f"Unknown agent prompt: {system_prompt[:60]}")


class StageResponder:
    """
    Answers each agent by stage name.

    A list value is consumed in order, its last reply repeating.
    """

    def __init__(self, replies: dict[str, str | list[str]]):
        self.replies = {
            stage: list(reply) if isinstance(reply, list) else [reply]
            for stage, reply in replies.items()
        }
        self.calls: dict[str, int] = {}
        self.prompts: dict[str, list[str]] = {}

    def __call__(self, system_prompt: str, user_prompt: str, schema: dict | None) -> str:
        stage = stage_of(system_prompt)
        self.calls[stage] = self.calls.get(stage, 0) + 1
        self.prompts.setdefault(stage, []).append(user_prompt)
        queue = self.replies.get(stage)
        if not queue:
            raise AssertionError(f"No reply scripted for {stage}")
        return queue.pop(0) if len(queue) > 1 else queue[0]

    def count(self, stage: str) -> int:
        return self.calls.get(stage, 0)


def build_client(
    responder: Callable[[str, str, dict | None], Any],
    embedding_service: FakeEmbeddingService | None = None,
) -> tuple[LLMClient, ScriptedProvider]:
    """LLM client with one scripted provider serving every routing tier."""
    provider = ScriptedProvider(responder)
    client = LLMClient(
        settings=LLMSettings(),
        embedding_service=embedding_service or FakeEmbeddingService(),
        providers={LLMProvider.GEMINI_FLASH: provider, LLMProvider.CLAUDE_HAIKU: provider},
        cache=ResponseCache(),
        retry_policy=RetryPolicy(max_attempts=3, initial_delay_ms=0, jitter=0.0),
        sleep=AsyncMock(),
    )
    return client, provider


@pytest.fixture
def fake_embeddings() -> FakeEmbeddingService:
    """Deterministic embedding service."""
    return FakeEmbeddingService()


@pytest.fixture
def make_client() -> Callable[..., tuple[LLMClient, ScriptedProvider]]:
    """Factory building an LLM client around a responder."""
    return build_client


@pytest.fixture
def make_responder() -> Callable[[dict[str, str | list[str]]], StageResponder]:
    """Factory building a per-stage responder."""
    return StageResponder


@pytest.fixture
def make_provider() -> type[ScriptedProvider]:
    """Factory building a scripted provider around a responder."""
    return ScriptedProvider


@pytest.fixture
def make_embeddings() -> type[FakeEmbeddingService]:
    """Factory building a fake embedding service."""
    return FakeEmbeddingService
