"""
Heuristic pre-filter for raw items.

Rejects items that would waste a model call (too short, repeated, already
extracted, automated or promotional, nothing actionable) before any agent
sees them.
"""

import re
import threading
import time
from collections.abc import Callable, Iterable
from enum import Enum

from pydantic import BaseModel, ConfigDict

from shared.filtering.config import FilterSettings, get_filter_settings
from shared.schemas.messages import RawItem, SourceType
from shared.utils.hashing import normalized_hash

SPAM_SENDER_PATTERNS = (
    "noreply@",
    "no-reply@",
    "mailer-daemon@",
    "notifications@",
    "newsletter@",
    "marketing@",
    "promo@",
    "deals@",
    "offers@",
    "unsubscribe@",
    "bounce@",
    "postmaster@",
)

PROMOTIONAL_KEYWORDS = (
    "unsubscribe",
    "% off",
    "sale ends",
    "limited time",
    "act now",
    "click here",
    "buy now",
    "free trial",
    "special offer",
    "exclusive deal",
    "weekly digest",
    "newsletter",
    "promotional",
    "advertisement",
)

AUTOMATED_PHRASES = (
    "this is an automated message",
    "do not reply to this email",
    "this email was sent automatically",
    "auto-generated",
    "delivery status notification",
    "out of office",
    "automatic reply",
)

ACTIONABLE_KEYWORDS = frozenset(
    {
        "meeting", "call", "appointment", "schedule", "tomorrow", "today",
        "deadline", "due", "remind", "rsvp", "confirm", "attend", "join",
        "invite", "calendar", "event", "task", "todo", "action", "urgent",
        "asap", "please", "need", "eod", "eow", "lunch", "dinner", "coffee",
        "sync", "standup", "review", "demo", "presentation", "interview",
    }
)

IMPERATIVE_PHRASES = (
    "please",
    "can you",
    "could you",
    "would you",
    "let's",
    "we should",
    "need to",
    "have to",
)

BOOKING_KEYWORDS = (
    "ticket",
    "confirmation",
    "booking",
    "reservation",
    "itinerary",
    "receipt",
    "order",
)

TODO_MARKERS = ("[ ]", "todo", "task")

TIME_PATTERNS = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"\d{1,2}:\d{2}",
        r"\d{1,2}\s*(am|pm)",
        r"(monday|tuesday|wednesday|thursday|friday|saturday|sunday)",
        r"(mon|tue|wed|thu|fri|sat|sun)\b",
        r"(january|february|march|april|may|june|july|august|september|october|november|december)",
        r"(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)\b",
        r"\d{1,2}/\d{1,2}",
        r"\d{1,2}-\d{1,2}",
        r"tomorrow|today|tonight|next week|this week",
    )
)

_WORD_PUNCTUATION = ".,!?;:\"'()[]"


class ProcessingPriority(str, Enum):
    """Informational ordering hint for items that pass."""

    REALTIME = "realtime"
    HIGH = "high"
    NORMAL = "normal"
    LOW = "low"


class SkipReason(str, Enum):
    """Why an item was rejected."""

    TOO_SHORT = "too_short"
    DUPLICATE = "duplicate"
    ALREADY_PROCESSED = "already_processed"
    AUTOMATED = "automated"
    PROMOTIONAL = "promotional"
    NO_ACTIONABLE_CONTENT = "no_actionable_content"


class FilterDecision(BaseModel):
    """Either process(priority) or skip(reason)."""

    model_config = ConfigDict(frozen=True)

    priority: ProcessingPriority | None = None
    reason: SkipReason | None = None

    @classmethod
    def process(cls, priority: ProcessingPriority) -> "FilterDecision":
        return cls(priority=priority)

    @classmethod
    def skip(cls, reason: SkipReason) -> "FilterDecision":
        return cls(reason=reason)

    @property
    def should_process(self) -> bool:
        return self.reason is None


def has_time_reference(content: str) -> bool:
    """Whether content mentions a clock time, weekday, month, numeric date or relative day."""
    return any(pattern.search(content) for pattern in TIME_PATTERNS)


def actionable_score(content: str) -> float:
    """
    Weighted actionability of text.

    0.1 per distinct actionable keyword, +0.3 for any time reference, +0.05 per
    question mark (at most 0.15), +0.1 for an imperative phrase; capped at 1.0.

    Args:
        content: Lower-cased text

    Returns:
        Score in [0.0, 1.0]
    """
    words = {word.strip(_WORD_PUNCTUATION) for word in content.lower().split()}
    score = len(words & ACTIONABLE_KEYWORDS) * 0.1

    if has_time_reference(content):
        score += 0.3

    score += min(content.count("?") * 0.05, 0.15)

    if any(phrase in content for phrase in IMPERATIVE_PHRASES):
        score += 0.1

    return min(score, 1.0)


class SmartFilter:
    """
    Per-source rules deciding whether a raw item is worth a model call.

    Only items that pass are recorded in the recent-hash cache. State is
    guarded by a lock so one filter can be shared across monitors.
    """

    def __init__(
        self,
        settings: FilterSettings | None = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize filter.

        Args:
            settings: Filter settings (uses defaults if not provided)
            clock: Returns the current time in seconds
        """
        self.settings = settings or get_filter_settings()
        self._clock = clock
        self._recent_hashes: dict[str, float] = {}
        self._lock = threading.Lock()

    def evaluate(self, item: RawItem, record: bool = True) -> FilterDecision:
        """
        Decide whether to process an item.

        Args:
            item: Raw item
            record: Remember a passing item's fingerprint so repeats are skipped

        Returns:
            FilterDecision
        """
        content = item.content.lower()

        if len(content) < self.settings.min_content_length:
            return FilterDecision.skip(SkipReason.TOO_SHORT)

        fingerprint = normalized_hash(content)

        with self._lock:
            if self._is_recent(fingerprint):
                return FilterDecision.skip(SkipReason.DUPLICATE)

            if item.extraction_version == self.settings.extraction_version:
                return FilterDecision.skip(SkipReason.ALREADY_PROCESSED)

            decision = self._evaluate_source(item, content)
            if decision.should_process and record:
                self._recent_hashes[fingerprint] = self._clock()
            return decision

    def remember(self, items: Iterable[RawItem]) -> int:
        """
        Record the fingerprints of processed items that pass the filter.

        Args:
            items: Items whose processing completed

        Returns:
            Number of fingerprints recorded
        """
        return sum(1 for item in items if self.evaluate(item).should_process)

    def _evaluate_source(self, item: RawItem, content: str) -> FilterDecision:
        if item.source_type in (SourceType.EMAIL, SourceType.GMAIL):
            return self._evaluate_email(item, content)
        if item.source_type is SourceType.MESSAGES:
            return self._evaluate_message(content)
        if item.source_type is SourceType.CALENDAR:
            return FilterDecision.process(ProcessingPriority.REALTIME)
        if item.source_type is SourceType.SAFARI:
            return self._evaluate_web_content(content)
        if item.source_type is SourceType.NOTES:
            return self._evaluate_notes(content)
        return self._evaluate_generic(content)

    def _evaluate_email(self, item: RawItem, content: str) -> FilterDecision:
        sender = (item.sender or "").lower()
        if sender and any(pattern in sender for pattern in SPAM_SENDER_PATTERNS):
            return FilterDecision.skip(SkipReason.AUTOMATED)

        subject = (item.subject or "").lower()
        if subject and any(keyword in subject for keyword in PROMOTIONAL_KEYWORDS):
            return FilterDecision.skip(SkipReason.PROMOTIONAL)

        if any(phrase in content for phrase in AUTOMATED_PHRASES):
            return FilterDecision.skip(SkipReason.AUTOMATED)

        score = actionable_score(content)
        if score < 0.2:
            return FilterDecision.skip(SkipReason.NO_ACTIONABLE_CONTENT)

        return FilterDecision.process(
            ProcessingPriority.HIGH if score > 0.6 else ProcessingPriority.NORMAL
        )

    def _evaluate_message(self, content: str) -> FilterDecision:
        # Questions usually carry requests, even with no keywords
        if actionable_score(content) < 0.15 and "?" not in content:
            return FilterDecision.skip(SkipReason.NO_ACTIONABLE_CONTENT)

        return FilterDecision.process(
            ProcessingPriority.HIGH if has_time_reference(content) else ProcessingPriority.NORMAL
        )

    def _evaluate_web_content(self, content: str) -> FilterDecision:
        has_booking = any(keyword in content for keyword in BOOKING_KEYWORDS)
        if not has_booking and actionable_score(content) < 0.3:
            return FilterDecision.skip(SkipReason.NO_ACTIONABLE_CONTENT)
        return FilterDecision.process(ProcessingPriority.LOW)

    def _evaluate_notes(self, content: str) -> FilterDecision:
        has_todo = any(marker in content for marker in TODO_MARKERS)
        if actionable_score(content) < 0.2 and not has_todo:
            return FilterDecision.skip(SkipReason.NO_ACTIONABLE_CONTENT)
        return FilterDecision.process(ProcessingPriority.NORMAL)

    def _evaluate_generic(self, content: str) -> FilterDecision:
        if actionable_score(content) < 0.25:
            return FilterDecision.skip(SkipReason.NO_ACTIONABLE_CONTENT)
        return FilterDecision.process(ProcessingPriority.NORMAL)

    def _is_recent(self, fingerprint: str) -> bool:
        now = self._clock()
        expiry = self.settings.hash_expiry_seconds
        self._recent_hashes = {
            key: seen_at for key, seen_at in self._recent_hashes.items() if now - seen_at < expiry
        }
        return fingerprint in self._recent_hashes
