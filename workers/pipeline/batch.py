"""
Builds a day's message batch from the raw-item store.
"""

from datetime import date, datetime, time, timedelta

from shared.config.logging import get_logger
from shared.filtering import SmartFilter
from shared.persistence import RawItemSource
from shared.schemas.messages import ConversationThread, DailyMessageBatch, MessageItem, RawItem, SourceType

logger = get_logger(__name__)

UNKNOWN_THREAD = "unknown"


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Local midnight of the day and of the next day."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


class BatchBuilder:
    """
    Groups a day's message items into conversation threads.

    With a pre-filter, a thread enters the batch when at least one of its
    messages passes; the whole thread is then included for context.
    """

    def __init__(
        self,
        source: RawItemSource,
        smart_filter: SmartFilter | None = None,
        fetch_limit: int = 1000,
    ):
        """
        Initialize batch builder.

        Args:
            source: Raw-item store
            smart_filter: Optional pre-filter
            fetch_limit: Maximum raw items read per day
        """
        self.source = source
        self.smart_filter = smart_filter
        self.fetch_limit = fetch_limit

    async def build(self, day: date) -> tuple[DailyMessageBatch, list[RawItem]]:
        """
        Build the batch for one day.

        Args:
            day: Local day to build

        Returns:
            Tuple of (batch, raw items it contains)
        """
        start, end = day_bounds(day)
        items = await self.source.fetch_items(
            start, end, source_type=SourceType.MESSAGES, limit=self.fetch_limit
        )

        threads: dict[str, list[RawItem]] = {}
        for item in items:
            threads.setdefault(item.thread_id or UNKNOWN_THREAD, []).append(item)

        if self.smart_filter is not None:
            threads = {
                thread_id: thread_items
                for thread_id, thread_items in threads.items()
                if self._any_passes(thread_items)
            }

        conversations = [
            build_thread(thread_id, thread_items) for thread_id, thread_items in threads.items()
        ]
        conversations.sort(key=lambda thread: thread.messages[0].timestamp)

        batch_items = [item for thread_items in threads.values() for item in thread_items]
        logger.debug(
            "batch_built",
            date=day.isoformat(),
            fetched=len(items),
            threads=len(conversations),
            messages=len(batch_items),
        )
        return DailyMessageBatch(date=day, conversations=conversations), batch_items

    def remember(self, items: list[RawItem]) -> None:
        """Record processed items with the pre-filter so repeats are skipped."""
        if self.smart_filter is not None:
            self.smart_filter.remember(items)

    def _any_passes(self, items: list[RawItem]) -> bool:
        # Check only: fingerprints are recorded once the day completes
        return any(
            self.smart_filter.evaluate(item, record=False).should_process  # type: ignore[union-attr]
            for item in items
        )


def build_thread(thread_id: str, items: list[RawItem]) -> ConversationThread:
    """
    Convert raw items of one thread into a ConversationThread.

    Args:
        thread_id: Thread identifier
        items: Items ordered by fetch time

    Returns:
        ConversationThread with participants in first-seen order
    """
    participants: list[str] = []
    for item in items:
        for person in item.participants:
            if person not in participants:
                participants.append(person)

    messages = [
        MessageItem(
            content=item.content,
            sender=item.sender,
            timestamp=item.source_timestamp or item.fetched_at,
            is_from_me=item.is_from_me,
        )
        for item in items
    ]
    messages.sort(key=lambda message: message.timestamp)
    return ConversationThread(thread_id=thread_id, participants=participants, messages=messages)
