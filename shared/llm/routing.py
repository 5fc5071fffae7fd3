"""
Complexity-based provider routing.
"""

import re
from enum import Enum

from shared.llm.providers import LLMProvider

_DATE_PATTERN = re.compile(r"\d{1,2}[/-]\d{1,2}")
_AMBIGUITY_MARKERS = ("maybe", "possibly", "might")
_EVENT_KEYWORDS = ("meeting", "appointment")


class ContentComplexity(str, Enum):
    """Coarse difficulty class of a prompt."""

    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"


def complexity_score(content: str) -> int:
    """
    Score prompt difficulty.

    +2 for more than 500 words (+1 for more than 200), +1 for a numeric date,
    +1 for ambiguity markers, +1 when an event keyword occurs more than twice.

    Args:
        content: Prompt text

    Returns:
        Non-negative score
    """
    words = len(content.split())
    lower = content.lower()

    score = 0
    if words > 500:
        score += 2
    elif words > 200:
        score += 1
    if _DATE_PATTERN.search(content):
        score += 1
    if any(marker in lower for marker in _AMBIGUITY_MARKERS):
        score += 1
    if any(lower.count(keyword) > 2 for keyword in _EVENT_KEYWORDS):
        score += 1
    return score


def estimate_complexity(content: str) -> ContentComplexity:
    """
    Classify a prompt.

    Args:
        content: Prompt text

    Returns:
        COMPLEX for score >= 3, MODERATE for score >= 1, else SIMPLE
    """
    score = complexity_score(content)
    if score >= 3:
        return ContentComplexity.COMPLEX
    if score >= 1:
        return ContentComplexity.MODERATE
    return ContentComplexity.SIMPLE


def provider_chain(complexity: ContentComplexity) -> list[LLMProvider]:
    """
    Ordered providers to try, cheapest first.

    Args:
        complexity: Prompt class

    Returns:
        Single cheapest provider for simple prompts, otherwise every provider
    """
    by_cost = sorted(LLMProvider, key=lambda provider: provider.cost_per_million_tokens)
    if complexity is ContentComplexity.SIMPLE:
        return by_cost[:1]
    return by_cost
