"""
Datetime utility functions.
"""

import re
from datetime import UTC, datetime

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def get_utc_now() -> datetime:
    """
    Get current UTC datetime with timezone info.

    Returns:
        Current UTC datetime
    """
    return datetime.now(UTC)


def get_local_now() -> datetime:
    """Current naive local datetime."""
    return datetime.now()


def is_date_only(value: str) -> bool:
    """Whether the string is a bare yyyy-MM-dd date."""
    return bool(_DATE_ONLY.match(value.strip()))


def parse_datetime(dt_str: str | None) -> datetime | None:
    """
    Parse an ISO-8601 timestamp as produced by a model.

    Accepts fractional seconds, a trailing "Z", explicit offsets, and bare
    dates. Aware values are converted to naive local time.

    Args:
        dt_str: Timestamp text

    Returns:
        Naive local datetime, or None if the text is empty or unparseable
    """
    if not dt_str:
        return None

    text = dt_str.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed
