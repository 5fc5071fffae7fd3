"""
Response cache with exact and semantic lookup.
"""

import asyncio
import time
from collections.abc import Callable

from pydantic import BaseModel, ConfigDict, Field

from shared.config.logging import get_logger
from shared.llm.config import LLMSettings
from shared.utils.similarity import cosine_similarity

logger = get_logger(__name__)


class CacheEntry(BaseModel):
    """Cached model response."""

    model_config = ConfigDict(frozen=True)

    query_hash: str
    embedding: list[float] = Field(default_factory=list)
    response: str
    timestamp: float


class ResponseCache:
    """
    In-memory response cache.

    Exact lookups match the prompt hash; semantic lookups return the most
    similar entry at or above the similarity threshold. Expired entries are
    purged on every read; when full, the oldest entries are evicted. All
    state changes happen under the cache's own lock.
    """

    def __init__(
        self,
        ttl_seconds: float = 7200,
        similarity_threshold: float = 0.92,
        max_entries: int = 500,
        trim_count: int = 100,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize response cache.

        Args:
            ttl_seconds: Entry lifetime
            similarity_threshold: Minimum cosine similarity for a semantic hit
            max_entries: Capacity before eviction
            trim_count: Entries evicted when capacity is reached
            clock: Returns the current time in seconds
        """
        self.ttl_seconds = ttl_seconds
        self.similarity_threshold = similarity_threshold
        self.max_entries = max_entries
        self.trim_count = trim_count
        self._clock = clock
        self._entries: list[CacheEntry] = []
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: LLMSettings) -> "ResponseCache":
        """Build a cache from LLM settings."""
        return cls(
            ttl_seconds=settings.cache_ttl_seconds,
            similarity_threshold=settings.cache_similarity_threshold,
            max_entries=settings.cache_max_entries,
            trim_count=settings.cache_trim_count,
        )

    async def get_exact(self, key: str) -> str | None:
        """
        Look up a response by prompt hash.

        Args:
            key: Prompt hash

        Returns:
            Cached response or None
        """
        async with self._lock:
            self._clean_old()
            for entry in self._entries:
                if entry.query_hash == key:
                    return entry.response
        return None

    async def get_semantic(self, embedding: list[float]) -> str | None:
        """
        Look up the most similar cached response.

        Args:
            embedding: Embedding of the user prompt

        Returns:
            Best response with similarity >= threshold, or None
        """
        if not embedding:
            return None

        async with self._lock:
            self._clean_old()
            best: CacheEntry | None = None
            best_similarity = 0.0
            for entry in self._entries:
                similarity = cosine_similarity(embedding, entry.embedding)
                if similarity >= self.similarity_threshold and (
                    best is None or similarity > best_similarity
                ):
                    best = entry
                    best_similarity = similarity

        if best is None:
            return None

        logger.debug("semantic_cache_hit", similarity=round(best_similarity, 4))
        return best.response

    async def set(self, key: str, embedding: list[float], response: str) -> None:
        """
        Store a response.

        Args:
            key: Prompt hash
            embedding: Prompt embedding (empty when unavailable)
            response: Response text
        """
        async with self._lock:
            if len(self._entries) >= self.max_entries:
                by_age = sorted(self._entries, key=lambda entry: entry.timestamp)
                keep = max(self.max_entries - self.trim_count, 0)
                self._entries = by_age[len(by_age) - keep :] if keep else []

            self._entries.append(
                CacheEntry(
                    query_hash=key,
                    embedding=embedding,
                    response=response,
                    timestamp=self._clock(),
                )
            )

    async def size(self) -> int:
        """Number of live entries."""
        async with self._lock:
            self._clean_old()
            return len(self._entries)

    def _clean_old(self) -> None:
        cutoff = self._clock() - self.ttl_seconds
        self._entries = [entry for entry in self._entries if entry.timestamp >= cutoff]
