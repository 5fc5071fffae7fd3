"""
Unified LLM client.

Single call surface over the generation providers with exact and semantic
response caching, complexity routing, retry with backoff, provider fallback
and optional prompt compression.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import BaseModel

from shared.config.logging import get_logger
from shared.embedding import EmbeddingService
from shared.exceptions import AllProvidersFailedError, ModelAccessError
from shared.llm.cache import ResponseCache
from shared.llm.compression import compress_prompt
from shared.llm.config import LLMSettings, get_llm_settings
from shared.llm.providers import BaseProvider, ClaudeProvider, GeminiProvider, LLMProvider
from shared.llm.retry import RetryPolicy, call_with_retry
from shared.llm.routing import estimate_complexity, provider_chain
from shared.observability.metrics import llm_cache_hits_total, llm_calls_total
from shared.utils.hashing import prompt_hash

logger = get_logger(__name__)


class LLMStats(BaseModel):
    """Call and cache counters."""

    total: int = 0
    cache_hits: int = 0
    semantic_hits: int = 0

    @property
    def hit_rate(self) -> float:
        """Fraction of calls answered from cache (0 when no calls)."""
        if self.total == 0:
            return 0.0
        return (self.cache_hits + self.semantic_hits) / self.total


class LLMClient:
    """
    Unified client for structured and free-text generation.

    Every invoke counts as a call. Exact cache hits return without touching the
    network or the embedding endpoint. On a miss the user prompt is embedded
    for semantic lookup; an embedding failure only disables the semantic path.
    """

    def __init__(
        self,
        settings: LLMSettings | None = None,
        embedding_service: EmbeddingService | None = None,
        providers: dict[LLMProvider, BaseProvider] | None = None,
        cache: ResponseCache | None = None,
        retry_policy: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize LLM client.

        Args:
            settings: LLM settings (uses defaults if not provided)
            embedding_service: Embedding endpoint for semantic caching
            providers: Provider implementations keyed by provider
            cache: Response cache
            retry_policy: Retry policy applied per provider
            sleep: Async sleep used between retry attempts
        """
        self.settings = settings or get_llm_settings()
        self.embedding_service = embedding_service or EmbeddingService()
        self.providers = providers or {
            LLMProvider.GEMINI_FLASH: GeminiProvider(self.settings),
            LLMProvider.CLAUDE_HAIKU: ClaudeProvider(self.settings),
        }
        self.cache = cache or ResponseCache.from_settings(self.settings)
        self.retry_policy = retry_policy or RetryPolicy.from_settings(self.settings)
        self._sleep = sleep

        self._total_calls = 0
        self._cache_hits = 0
        self._semantic_hits = 0

    async def invoke(
        self,
        system_prompt: str,
        user_prompt: str,
        schema: dict[str, Any] | None = None,
        temperature: float | None = None,
        use_cache: bool = True,
        use_compression: bool = False,
    ) -> str:
        """
        Generate a response.

        Args:
            system_prompt: System instructions
            user_prompt: User message
            schema: Optional JSON response schema
            temperature: Sampling temperature (settings default when None)
            use_cache: Consult and populate the response cache
            use_compression: Compress a long user prompt first

        Returns:
            Response text

        Raises:
            AllProvidersFailedError: If every provider in the chain failed
        """
        self._total_calls += 1

        if use_compression:
            user_prompt = compress_prompt(user_prompt, max_words=self.settings.compression_max_words)
        if temperature is None:
            temperature = self.settings.default_temperature

        cache_key = prompt_hash(system_prompt, user_prompt)

        if use_cache:
            cached = await self.cache.get_exact(cache_key)
            if cached is not None:
                self._cache_hits += 1
                llm_cache_hits_total.labels(kind="exact").inc()
                logger.debug("exact_cache_hit", key=cache_key)
                return cached

        query_embedding: list[float] | None = None
        if use_cache:
            query_embedding = await self._embed_or_none(user_prompt)
            if query_embedding:
                cached = await self.cache.get_semantic(query_embedding)
                if cached is not None:
                    self._semantic_hits += 1
                    llm_cache_hits_total.labels(kind="semantic").inc()
                    return cached

        complexity = estimate_complexity(user_prompt)
        chain = provider_chain(complexity)
        errors: dict[str, Exception] = {}

        for provider in chain:
            try:
                response = await self._call_provider(
                    provider, system_prompt, user_prompt, schema, temperature
                )
            except ModelAccessError as e:
                errors[provider.value] = e
                llm_calls_total.labels(provider=provider.value, status="error").inc()
                logger.warning(
                    "provider_failed",
                    provider=provider.value,
                    complexity=complexity.value,
                    error=str(e),
                )
                continue

            llm_calls_total.labels(provider=provider.value, status="success").inc()

            if use_cache:
                if not query_embedding:
                    query_embedding = await self._embed_or_none(user_prompt)
                await self.cache.set(cache_key, query_embedding or [], response)

            return response

        raise AllProvidersFailedError(errors)

    async def _call_provider(
        self,
        provider: LLMProvider,
        system_prompt: str,
        user_prompt: str,
        schema: dict[str, Any] | None,
        temperature: float,
    ) -> str:
        implementation = self.providers[provider]
        return await call_with_retry(
            lambda: implementation.generate(system_prompt, user_prompt, schema, temperature),
            self.retry_policy,
            provider=provider.value,
            sleep=self._sleep,
        )

    async def _embed_or_none(self, text: str) -> list[float] | None:
        try:
            return await self.embedding_service.embed(text)
        except ModelAccessError as e:
            logger.warning("embedding_failed", error=str(e))
            return None

    def get_stats(self) -> LLMStats:
        """
        Snapshot of call and cache counters.

        Returns:
            LLMStats
        """
        return LLMStats(
            total=self._total_calls,
            cache_hits=self._cache_hits,
            semantic_hits=self._semantic_hits,
        )

    async def close(self) -> None:
        """Close provider and embedding transports."""
        for provider in self.providers.values():
            await provider.close()
        await self.embedding_service.close()
