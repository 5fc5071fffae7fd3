"""
Embedding service.

Converts prompts and daily narratives into vectors for semantic caching and
deduplication.
"""

from shared.embedding.config import EmbeddingSettings, get_embedding_settings
from shared.embedding.service import EmbeddingService

__all__ = [
    "EmbeddingSettings",
    "get_embedding_settings",
    "EmbeddingService",
]
