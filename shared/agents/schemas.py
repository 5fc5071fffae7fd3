"""
JSON response schemas for structured generation.

Written in the Gemini schema dialect; propertyOrdering fixes the order in
which the model emits fields.
"""

from typing import Any

CONFIDENCE_ENUM = ["high", "medium", "low"]
PRIORITY_ENUM = ["urgent", "high", "medium", "low"]

EXTRACTOR_SCHEMA: dict[str, Any] = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "title": {"type": "string", "description": "Clear, concise title for the event or task"},
            "type": {
                "type": "string",
                "enum": ["event", "task"],
                "description": "Whether this is a calendar event or a task",
            },
            "confidence": {
                "type": "string",
                "enum": CONFIDENCE_ENUM,
                "description": "Confidence level based on specificity",
            },
            "rough_date": {
                "type": "string",
                "description": "Date mentioned (e.g., 'tomorrow', 'Oct 15', 'next Tuesday')",
            },
            "rough_time": {
                "type": "string",
                "description": "Time mentioned (e.g., '3pm', 'afternoon', '10:30')",
            },
            "people": {"type": "array", "items": {"type": "string"}, "description": "People involved"},
            "location": {"type": "string", "description": "Location if mentioned"},
            "context": {"type": "string", "description": "Brief context from conversation"},
        },
        "required": ["title", "type", "confidence"],
        "propertyOrdering": [
            "title",
            "type",
            "confidence",
            "rough_date",
            "rough_time",
            "people",
            "location",
            "context",
        ],
    },
}

_EVENT_PROPERTIES: dict[str, Any] = {
    "title": {"type": "string"},
    "start_date": {"type": "string", "description": "ISO 8601 format: yyyy-MM-ddTHH:mm:ss"},
    "end_date": {"type": "string", "description": "ISO 8601 format, null if unknown"},
    "is_all_day": {"type": "boolean"},
    "location": {"type": "string"},
    "attendees": {"type": "array", "items": {"type": "string"}},
    "notes": {"type": "string"},
    "confidence": {"type": "string", "enum": CONFIDENCE_ENUM},
}

_TASK_PROPERTIES: dict[str, Any] = {
    "title": {"type": "string"},
    "due_date": {"type": "string", "description": "ISO 8601 format, null if no deadline"},
    "priority": {"type": "string", "enum": PRIORITY_ENUM},
    "assignee": {"type": "string"},
    "notes": {"type": "string"},
    "confidence": {"type": "string", "enum": CONFIDENCE_ENUM},
}

FORMATTER_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "events": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": _EVENT_PROPERTIES,
                "required": ["title", "start_date", "confidence"],
                "propertyOrdering": [
                    "title",
                    "start_date",
                    "end_date",
                    "is_all_day",
                    "location",
                    "attendees",
                    "confidence",
                    "notes",
                ],
            },
        },
        "tasks": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": _TASK_PROPERTIES,
                "required": ["title", "confidence"],
                "propertyOrdering": ["title", "due_date", "priority", "assignee", "confidence", "notes"],
            },
        },
    },
    "required": ["events", "tasks"],
    "propertyOrdering": ["events", "tasks"],
}

VALIDATOR_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "valid_events": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    key: value for key, value in _EVENT_PROPERTIES.items() if key != "notes"
                },
                "required": ["title", "start_date", "confidence"],
                "propertyOrdering": [
                    "title",
                    "start_date",
                    "end_date",
                    "is_all_day",
                    "location",
                    "attendees",
                    "confidence",
                ],
            },
        },
        "valid_tasks": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    key: value for key, value in _TASK_PROPERTIES.items() if key != "notes"
                },
                "required": ["title", "confidence"],
                "propertyOrdering": ["title", "due_date", "priority", "assignee", "confidence"],
            },
        },
        "rejected_items": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "title": {"type": "string"},
                    "reason": {"type": "string", "description": "Why this item was rejected"},
                },
                "required": ["title", "reason"],
                "propertyOrdering": ["title", "reason"],
            },
        },
    },
    "required": ["valid_events", "valid_tasks", "rejected_items"],
    "propertyOrdering": ["valid_events", "valid_tasks", "rejected_items"],
}

CRITIC_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "quality_score": {
            "type": "number",
            "minimum": 0,
            "maximum": 10,
            "description": "Overall extraction quality 0-10",
        },
        "issues": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "item_title": {"type": "string"},
                    "issue_type": {
                        "type": "string",
                        "enum": [
                            "missing_info",
                            "wrong_date",
                            "wrong_type",
                            "duplicate",
                            "vague",
                            "hallucination",
                        ],
                    },
                    "description": {"type": "string"},
                    "suggested_fix": {"type": "string"},
                },
                "required": ["item_title", "issue_type", "description"],
                "propertyOrdering": ["item_title", "issue_type", "description", "suggested_fix"],
            },
        },
        "missing_items": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Events/tasks mentioned in story but not extracted",
        },
        "should_retry": {
            "type": "boolean",
            "description": "Whether extraction should be retried with feedback",
        },
    },
    "required": ["quality_score", "issues", "missing_items", "should_retry"],
    "propertyOrdering": ["quality_score", "issues", "missing_items", "should_retry"],
}
