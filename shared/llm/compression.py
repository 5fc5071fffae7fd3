"""
Lossy prompt compression and context placement.
"""

import re

from shared.config.logging import get_logger

logger = get_logger(__name__)

ACTION_KEYWORDS = frozenset(
    {
        "meeting",
        "call",
        "tomorrow",
        "today",
        "deadline",
        "due",
        "remind",
        "schedule",
        "appointment",
        "confirm",
        "invite",
        "rsvp",
        "task",
        "urgent",
        "asap",
        "need",
        "monday",
        "tuesday",
        "wednesday",
        "thursday",
        "friday",
        "saturday",
        "sunday",
        "pm",
        "am",
        "noon",
        "evening",
    }
)

_SENTENCE_SPLIT = re.compile(r"[.!?\n]")
_TIME_PATTERN = re.compile(r"\d{1,2}:\d{2}|\d{1,2}\s*(am|pm)")
_DATE_PATTERN = re.compile(r"\d{1,2}/\d{1,2}|\d{1,2}-\d{1,2}")


def _is_important(sentence: str) -> bool:
    lower = sentence.lower()
    return (
        any(keyword in lower for keyword in ACTION_KEYWORDS)
        or bool(_TIME_PATTERN.search(lower))
        or bool(_DATE_PATTERN.search(lower))
    )


def compress_prompt(content: str, max_words: int = 2000) -> str:
    """
    Shrink long content while keeping actionable sentences.

    Sentences with action keywords, times or dates come first, joined by
    ". ". If more than 100 words of budget remain, up to budget // 10 of the
    other sentences follow under an "[Additional context]" marker.

    Args:
        content: Text to compress
        max_words: Word budget; shorter content is returned unchanged

    Returns:
        Compressed text
    """
    original_words = len(content.split())
    if original_words <= max_words:
        return content

    important: list[str] = []
    other: list[str] = []
    for sentence in _SENTENCE_SPLIT.split(content):
        stripped = sentence.strip(" \t")
        if not stripped:
            continue
        if _is_important(stripped):
            important.append(stripped)
        else:
            other.append(stripped)

    result = ". ".join(important)

    remaining_budget = max_words - len(result.split())
    if remaining_budget > 100:
        other_text = ". ".join(other[: remaining_budget // 10])
        if other_text:
            result += "\n\n[Additional context]: " + other_text

    logger.info(
        "prompt_compressed",
        original_words=original_words,
        compressed_words=len(result.split()),
    )
    return result


def optimize_context_position(content: str, date_context: str) -> str:
    """
    Place the date context ahead of the content to analyze.

    Args:
        content: Material the model should analyze
        date_context: Reference-date facts the model must use

    Returns:
        Prompt with the date context first
    """
    return (
        "CRITICAL DATE CONTEXT (use this for all date calculations):\n"
        f"{date_context}\n\n"
        "CONTENT TO ANALYZE:\n"
        f"{content}"
    )
