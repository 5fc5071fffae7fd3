"""
Tests for raw input schemas.
"""

from datetime import date, datetime

from shared.schemas.messages import (
    ConversationThread,
    DailyMessageBatch,
    MessageItem,
    RawItem,
    SourceType,
)


def make_item(**overrides) -> RawItem:
    values = {
        "id": "item-1",
        "source_type": SourceType.MESSAGES,
        "stable_id": "msg-1",
        "content": "hello",
        "fetched_at": datetime(2025, 1, 1, 9, 0),
    }
    values.update(overrides)
    return RawItem(**values)


class TestRawItem:
    """Tests for RawItem helpers."""

    def test_is_from_me_flag(self):
        assert make_item(metadata={"is_from_me": "true"}).is_from_me is True
        assert make_item(metadata={"is_from_me": "1"}).is_from_me is True
        assert make_item(metadata={"is_from_me": "no"}).is_from_me is False
        assert make_item().is_from_me is False

    def test_sender_prefers_metadata(self):
        item = make_item(metadata={"sender": "sam@example.com"}, participants=["Alex"])

        assert item.sender == "sam@example.com"

    def test_sender_falls_back_to_first_participant(self):
        assert make_item(participants=["Alex", "Sam"]).sender == "Alex"
        assert make_item().sender is None


class TestDailyMessageBatch:
    """Tests for DailyMessageBatch."""

    def test_empty_batch(self):
        batch = DailyMessageBatch(date=date(2025, 1, 1))

        assert batch.is_empty is True
        assert batch.total_message_count == 0
        assert batch.formatted_for_llm() == ""

    def test_formatted_transcript(self):
        batch = DailyMessageBatch(
            date=date(2025, 1, 1),
            conversations=[
                ConversationThread(
                    thread_id="t1",
                    participants=["Sam", "Alex"],
                    messages=[
                        MessageItem(
                            content="Coffee tomorrow at 2?",
                            sender="Sam",
                            timestamp=datetime(2025, 1, 1, 14, 5),
                        ),
                        MessageItem(
                            content="Yes, Blue Bottle",
                            timestamp=datetime(2025, 1, 1, 9, 30),
                            is_from_me=True,
                        ),
                        MessageItem(content="ok", timestamp=datetime(2025, 1, 1, 10, 0)),
                    ],
                )
            ],
        )

        text = batch.formatted_for_llm()

        assert text.startswith("## Conversation with Sam, Alex\n\n")
        assert "[2:05 PM] Sam: Coffee tomorrow at 2?\n" in text
        assert "[9:30 AM] Me: Yes, Blue Bottle\n" in text
        assert "[10:00 AM] Unknown: ok\n" in text
        assert batch.total_message_count == 3
        assert batch.is_empty is False
