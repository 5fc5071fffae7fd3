"""
Embedding-based input deduplication.

Remembers recently processed daily narratives and flags new content that is
identical or semantically near-identical to one of them.
"""

import asyncio
import time
from collections.abc import Callable

from pydantic import BaseModel, ConfigDict, Field

from shared.config.logging import get_logger
from shared.utils.hashing import content_hash
from shared.utils.similarity import cosine_similarity

logger = get_logger(__name__)


class ProcessedContent(BaseModel):
    """Fingerprint of processed content."""

    model_config = ConfigDict(frozen=True)

    content_hash: str
    embedding: list[float] = Field(default_factory=list)
    processed_at: float


class EmbeddingDeduplicator:
    """
    Rolling-window duplicate detector.

    Exact content hash is checked first; otherwise any remembered embedding with
    cosine similarity at or above the threshold marks the content as a
    duplicate. Entries older than the window are purged on every check.
    """

    def __init__(
        self,
        window_seconds: float = 86400,
        similarity_threshold: float = 0.88,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize deduplicator.

        Args:
            window_seconds: How long processed content is remembered
            similarity_threshold: Minimum cosine similarity for a duplicate
            clock: Returns the current time in seconds
        """
        self.window_seconds = window_seconds
        self.similarity_threshold = similarity_threshold
        self._clock = clock
        self._processed: list[ProcessedContent] = []
        self._lock = asyncio.Lock()

    async def is_duplicate(self, content: str, embedding: list[float] | None = None) -> bool:
        """
        Check content against the window.

        Args:
            content: Content to check
            embedding: Optional embedding of the content

        Returns:
            True if the content was already processed within the window
        """
        fingerprint = content_hash(content)

        async with self._lock:
            self._clean_old()

            if any(entry.content_hash == fingerprint for entry in self._processed):
                return True

            if embedding:
                for entry in self._processed:
                    similarity = cosine_similarity(embedding, entry.embedding)
                    if similarity >= self.similarity_threshold:
                        logger.debug("semantic_duplicate_detected", similarity=round(similarity, 4))
                        return True

        return False

    async def mark_processed(self, content: str, embedding: list[float] | None = None) -> None:
        """
        Remember content as processed.

        Args:
            content: Processed content
            embedding: Its embedding, if available
        """
        entry = ProcessedContent(
            content_hash=content_hash(content),
            embedding=embedding or [],
            processed_at=self._clock(),
        )
        async with self._lock:
            self._processed.append(entry)

    async def size(self) -> int:
        """Number of remembered entries inside the window."""
        async with self._lock:
            self._clean_old()
            return len(self._processed)

    def _clean_old(self) -> None:
        cutoff = self._clock() - self.window_seconds
        self._processed = [entry for entry in self._processed if entry.processed_at >= cutoff]
