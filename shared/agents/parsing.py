"""
Parsing helpers for model responses.
"""

import json
from typing import TypeVar

from pydantic import TypeAdapter, ValidationError

from shared.exceptions import ResponseParseError

T = TypeVar("T")


def clean_json(raw: str) -> str:
    """
    Strip surrounding whitespace and Markdown code fences.

    Args:
        raw: Raw response text

    Returns:
        Text with ```json / ``` fences removed
    """
    text = raw.strip()
    if text.startswith("```json"):
        text = text[7:]
    if text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def parse_response(raw: str, target: type[T]) -> T:
    """
    Validate a JSON response against a record type.

    Args:
        raw: Raw response text
        target: Record type (or generic alias such as list[Record])

    Returns:
        Validated record

    Raises:
        ResponseParseError: If the text is not JSON or does not match the record
    """
    try:
        return TypeAdapter(target).validate_json(clean_json(raw))
    except ValidationError as e:
        first_error = e.errors()[0]["msg"]
        raise ResponseParseError(f"{e.error_count()} validation error(s): {first_error}", raw) from e


def first_json_object(text: str) -> str | None:
    """
    Find the first complete JSON object embedded in free text.

    Args:
        text: Free-text response

    Returns:
        The object's JSON text, or None if no object decodes
    """
    cleaned = clean_json(text)
    decoder = json.JSONDecoder()
    index = cleaned.find("{")
    while index != -1:
        try:
            _, end = decoder.raw_decode(cleaned, index)
        except json.JSONDecodeError:
            index = cleaned.find("{", index + 1)
            continue
        return cleaned[index:end]
    return None
