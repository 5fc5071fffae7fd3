"""
Prompt templates for the extraction agents.

Decision-critical facts (reference date, date lookup table) always open the
system prompt.
"""

import json
from datetime import date, datetime, timedelta
from typing import Any

from shared.schemas.pipeline import FormattedEvent, FormattedTask

BANNER = "═══════════════════════════════════════"

TIME_LOOKUP = {
    "morning": "09:00",
    "noon": "12:00",
    "afternoon": "14:00",
    "evening": "18:00",
    "night": "20:00",
}

STORY_SYSTEM_PROMPT = """CRITICAL: Focus on extracting ACTIONABLE information.

You summarize message conversations into clear narratives.
Focus on: plans, events, commitments, tasks, and action items.
Write in third person, past tense. Be concise but capture important details.

PRIORITIZE:
1. Scheduled events with specific times/dates
2. Explicit commitments and tasks
3. People mentioned by name
4. Locations and meeting places"""

CRITIC_SYSTEM_PROMPT = """You are a quality reviewer for an event/task extraction system.

Your job is to:
1. Compare the original narrative to the extracted items
2. Identify any issues (wrong dates, missing info, hallucinations)
3. Find items mentioned in the story that weren't extracted
4. Score overall quality (0-10)
5. Decide if extraction should be retried with feedback

ISSUE TYPES:
- missing_info: Important details not captured
- wrong_date: Date/time seems incorrect
- wrong_type: Should be event not task (or vice versa)
- duplicate: Same item extracted multiple times
- vague: Too vague to be actionable
- hallucination: Item not mentioned in original text"""

VERIFIER_SYSTEM_PROMPT = """You are a SKEPTICAL REVIEWER. Your job is to challenge extracted events and tasks.

For each item, ask:
1. Is this item EXPLICITLY mentioned in the original text?
2. Is the date/time interpretation correct?
3. Is this actually actionable (not just a mention)?

Vote AGREE only if you're confident the extraction is correct.
Vote DISPUTE if there's any reasonable doubt.

Be conservative - it's better to dispute a correct item than agree with a wrong one."""


def long_date(day: date) -> str:
    """Format a date as "Wednesday, January 1, 2025"."""
    return f"{day:%A}, {day:%B} {day.day}, {day.year}"


def iso_timestamp(value: datetime | None, empty: str = "") -> str:
    """Format a datetime as yyyy-MM-ddTHH:mm:ss."""
    return value.strftime("%Y-%m-%dT%H:%M:%S") if value else empty


def to_json(data: Any) -> str:
    """Compact JSON for embedding lists in prompts."""
    return json.dumps(data, ensure_ascii=False)


def build_extractor_system_prompt(reference: date) -> str:
    """
    Build the extractor's system prompt with the reference date first.

    Args:
        reference: Day the narrative describes

    Returns:
        System prompt text
    """
    return f"""REFERENCE DATE: {long_date(reference)} - Use this for all relative date calculations.

Extract events and tasks from narrative text.

EVENTS: Meetings, appointments, calls, dinners with specific time indication
TASKS: Action items, things to do, explicit commitments

RULES:
- Do NOT extract vague possibilities ("might", "maybe", "possibly")
- Do NOT extract past events (already happened)
- HIGH confidence: Specific date AND time mentioned
- MEDIUM confidence: Date mentioned but time is vague
- LOW confidence: Only rough timeframe mentioned

For each item: title, type (event/task), rough_date, rough_time, people, location, confidence, context"""


def build_extractor_user_prompt(narrative: str, feedback: str | None = None) -> str:
    """
    Build the extractor's user prompt.

    Args:
        narrative: Daily story narrative
        feedback: Critic feedback from a previous attempt

    Returns:
        User prompt text
    """
    prompt = f"NARRATIVE TO ANALYZE:\n{narrative}\n\nExtract all actionable events and tasks."
    if feedback:
        prompt += f"\n\nPREVIOUS EXTRACTION FEEDBACK:\n{feedback}\nPlease address these issues."
    return prompt


def build_date_context(reference: date, days_ahead: int = 14) -> str:
    """
    Build the date and time lookup tables used for conversions.

    Args:
        reference: Day treated as TODAY
        days_ahead: Number of following days listed

    Returns:
        Lookup tables as text
    """
    lines = [
        BANNER,
        f"TODAY IS: {long_date(reference)}",
        BANNER,
        "",
        "DATE LOOKUP TABLE:",
    ]
    for offset in range(days_ahead + 1):
        day = reference + timedelta(days=offset)
        if offset == 0:
            label = "TODAY"
        elif offset == 1:
            label = "tomorrow"
        else:
            label = f"in {offset} days"
        lines.append(f"  {day.isoformat()} | {day:%A} | {label}")

    lines.append("")
    lines.append("TIME LOOKUP:")
    lines.append("  " + " | ".join(f"{name} → {clock}" for name, clock in TIME_LOOKUP.items()))
    return "\n".join(lines)


def build_formatter_system_prompt(reference: date) -> str:
    """Build the formatter's system prompt with the lookup tables first."""
    return f"""CRITICAL DATE CONTEXT - USE THIS FOR ALL CONVERSIONS:
{build_date_context(reference)}

Convert informal dates to exact ISO 8601 format (yyyy-MM-ddTHH:mm:ss).

CONVERSION RULES:
- "tomorrow" = day after reference date
- "next Tuesday" = next occurrence of Tuesday after today
- "this Friday" = coming Friday (same week if today is before Friday)
- "afternoon" → 14:00, "morning" → 09:00, "evening" → 18:00, "noon" → 12:00
- Meetings without end time: assume 1 hour duration
- Date only (no time mentioned): mark as all-day event
- Tasks without due date: set due_date to null"""


def build_formatter_user_prompt(items_json: str) -> str:
    return f"ITEMS TO CONVERT:\n{items_json}\n\nConvert each item to exact calendar format."


def build_validator_system_prompt(reference: date) -> str:
    """Build the validator's system prompt with the reference date first."""
    return f"""{BANNER}
VALIDATION REFERENCE DATE: {long_date(reference)}
{BANNER}

Validate extracted events and tasks.

REJECTION CRITERIA:
- Dates more than 7 days in the past
- Impossible times (e.g., 25:00, negative durations)
- Obvious duplicates (same title, same time)
- Vague non-events without actionable content

CONFIDENCE ADJUSTMENTS:
- Lower to MEDIUM: events >30 days in future
- Lower to LOW: no specific time, only date
- Keep HIGH: specific date AND time within 14 days"""


def build_validator_user_prompt(events: list[FormattedEvent], tasks: list[FormattedTask]) -> str:
    events_json = to_json(
        [
            {
                "title": event.title,
                "start_date": iso_timestamp(event.start_date),
                "end_date": iso_timestamp(event.end_date),
                "is_all_day": "true" if event.is_all_day else "false",
                "location": event.location or "",
                "confidence": event.confidence.value,
            }
            for event in events
        ]
    )
    tasks_json = to_json(
        [
            {
                "title": task.title,
                "due_date": iso_timestamp(task.due_date),
                "priority": task.priority.value,
                "confidence": task.confidence.value,
            }
            for task in tasks
        ]
    )
    return f"EVENTS TO VALIDATE:\n{events_json}\n\nTASKS TO VALIDATE:\n{tasks_json}"


def build_critic_user_prompt(
    narrative: str,
    events: list[FormattedEvent],
    tasks: list[FormattedTask],
) -> str:
    events_desc = "\n".join(
        f"- {event.title} @ {iso_timestamp(event.start_date)} [{event.confidence.value}]"
        for event in events
    )
    tasks_desc = "\n".join(
        f"- {task.title} (due: {iso_timestamp(task.due_date, empty='none')}) [{task.confidence.value}]"
        for task in tasks
    )
    return (
        f"ORIGINAL NARRATIVE:\n{narrative}\n\n"
        f"EXTRACTED EVENTS:\n{events_desc or '(none)'}\n\n"
        f"EXTRACTED TASKS:\n{tasks_desc or '(none)'}\n\n"
        "Review the extraction quality."
    )


def build_verifier_user_prompt(
    story: str,
    reference: date,
    events: list[FormattedEvent],
    tasks: list[FormattedTask],
) -> str:
    events_json = to_json(
        [
            {
                "title": event.title,
                "start_date": iso_timestamp(event.start_date),
                "confidence": event.confidence.value,
            }
            for event in events
        ]
    )
    tasks_json = to_json(
        [
            {
                "title": task.title,
                "due_date": iso_timestamp(task.due_date, empty="none"),
                "confidence": task.confidence.value,
            }
            for task in tasks
        ]
    )
    return (
        f"ORIGINAL TEXT:\n{story}\n\n"
        f"REFERENCE DATE: {long_date(reference)}\n\n"
        f"EXTRACTED EVENTS:\n{events_json}\n\n"
        f"EXTRACTED TASKS:\n{tasks_json}\n\n"
        "For each item, vote AGREE or DISPUTE with a brief reason.\n"
        'Return JSON: {"agreed_events": [...], "agreed_tasks": [...], '
        '"disputed": [{"item": "...", "reason": "..."}], "consensus_score": 0.0-1.0}'
    )
