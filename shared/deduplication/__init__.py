"""
Input deduplication for daily narratives.
"""

from shared.deduplication.deduplicator import EmbeddingDeduplicator, ProcessedContent

__all__ = ["EmbeddingDeduplicator", "ProcessedContent"]
