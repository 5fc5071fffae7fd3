"""
Raw input schemas.

Raw items as written by source monitors, and the per-day conversation batch
the pipeline consumes.
"""

from datetime import date, datetime
from enum import Enum

from pydantic import Field

from shared.schemas.base import BaseSchema, FrozenSchema


class SourceType(str, Enum):
    """Origin of a raw item."""

    CALENDAR = "calendar"
    REMINDERS = "reminders"
    MESSAGES = "messages"
    EMAIL = "email"
    GMAIL = "gmail"
    SAFARI = "safari"
    NOTES = "notes"


class RawItem(BaseSchema):
    """Raw record captured by a source monitor."""

    id: str = Field(..., description="Store-assigned identifier")
    source_type: SourceType = Field(..., description="Source the item came from")
    stable_id: str = Field(..., description="Identifier stable across re-captures")
    content: str = Field(..., description="Body text")
    subject: str | None = Field(None, description="Subject line (email)")
    thread_id: str | None = Field(None, description="Conversation/thread identifier")
    participants: list[str] = Field(default_factory=list, description="People in the thread")
    metadata: dict[str, str] = Field(default_factory=dict, description="Source-specific metadata")
    source_timestamp: datetime | None = Field(None, description="When the source created it")
    fetched_at: datetime = Field(..., description="When the monitor captured it")
    extraction_version: str | None = Field(None, description="Pipeline version that extracted it")

    @property
    def is_from_me(self) -> bool:
        """Whether the device owner authored the item."""
        return self.metadata.get("is_from_me", "").lower() in ("1", "true", "yes")

    @property
    def sender(self) -> str | None:
        """Sender name or address, if the monitor recorded one."""
        return self.metadata.get("sender") or (self.participants[0] if self.participants else None)


class MessageItem(FrozenSchema):
    """Single message inside a conversation thread."""

    content: str
    sender: str | None = None
    timestamp: datetime
    is_from_me: bool = False


class ConversationThread(FrozenSchema):
    """Ordered messages exchanged with a set of participants."""

    thread_id: str
    participants: list[str] = Field(default_factory=list)
    messages: list[MessageItem] = Field(default_factory=list)


class DailyMessageBatch(FrozenSchema):
    """All conversation threads for one calendar day."""

    date: date
    conversations: list[ConversationThread] = Field(default_factory=list)

    @property
    def total_message_count(self) -> int:
        """Number of messages across all threads."""
        return sum(len(conversation.messages) for conversation in self.conversations)

    @property
    def is_empty(self) -> bool:
        """Whether the batch holds no threads."""
        return not self.conversations

    def formatted_for_llm(self) -> str:
        """
        Render the batch as a plain-text transcript.

        Returns:
            One "## Conversation with ..." section per thread, each message on
            its own "[time] Sender: text" line
        """
        output = ""
        for conversation in self.conversations:
            output += f"## Conversation with {', '.join(conversation.participants)}\n\n"
            for message in conversation.messages:
                sender = "Me" if message.is_from_me else (message.sender or "Unknown")
                output += f"[{_short_time(message.timestamp)}] {sender}: {message.content}\n"
            output += "\n"
        return output


def _short_time(value: datetime) -> str:
    """Format a timestamp as h:mm AM/PM."""
    return value.strftime("%I:%M %p").lstrip("0")
