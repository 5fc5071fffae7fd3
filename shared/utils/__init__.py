"""
Common utility functions.
"""

from shared.utils.datetime_utils import (
    get_local_now,
    get_utc_now,
    is_date_only,
    parse_datetime,
)
from shared.utils.hashing import content_hash, normalized_hash, prompt_hash
from shared.utils.similarity import cosine_similarity

__all__ = [
    "get_utc_now",
    "get_local_now",
    "is_date_only",
    "parse_datetime",
    "content_hash",
    "prompt_hash",
    "normalized_hash",
    "cosine_similarity",
]
