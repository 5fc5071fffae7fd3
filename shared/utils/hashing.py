"""
Content hashing helpers.
"""

import hashlib
import re

_WHITESPACE = re.compile(r"\s+")


def content_hash(text: str) -> str:
    """
    Full SHA-256 hex digest of text.

    Args:
        text: Text to hash

    Returns:
        64-character hex digest
    """
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def prompt_hash(system_prompt: str, user_prompt: str) -> str:
    """
    Cache key for a prompt pair: first 16 bytes of SHA-256 over "system:user".

    Args:
        system_prompt: System instructions
        user_prompt: User message

    Returns:
        32-character hex digest
    """
    digest = hashlib.sha256(f"{system_prompt}:{user_prompt}".encode()).digest()
    return digest[:16].hex()


def normalized_hash(text: str, max_chars: int = 500) -> str:
    """
    Hash of lower-cased, whitespace-collapsed text, truncated to max_chars.

    Args:
        text: Text to hash
        max_chars: Prefix length considered after normalization

    Returns:
        64-character hex digest
    """
    normalized = _WHITESPACE.sub(" ", text.lower()).strip()[:max_chars]
    return content_hash(normalized)
