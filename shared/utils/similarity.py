"""
Vector similarity helpers.
"""

from collections.abc import Sequence


def cosine_similarity(vector1: Sequence[float], vector2: Sequence[float]) -> float:
    """
    Calculate cosine similarity between two embedding vectors.

    Args:
        vector1: First vector
        vector2: Second vector

    Returns:
        Similarity in [-1.0, 1.0]; 0.0 for empty, mismatched or zero vectors
    """
    if not vector1 or not vector2 or len(vector1) != len(vector2):
        return 0.0

    dot_product = sum(a * b for a, b in zip(vector1, vector2, strict=True))
    magnitude1 = sum(a * a for a in vector1) ** 0.5
    magnitude2 = sum(b * b for b in vector2) ** 0.5

    if magnitude1 == 0.0 or magnitude2 == 0.0:
        return 0.0

    return dot_product / (magnitude1 * magnitude2)
