"""
Pre-model filtering of raw items.
"""

from shared.filtering.config import CURRENT_EXTRACTION_VERSION, FilterSettings, get_filter_settings
from shared.filtering.smart_filter import (
    FilterDecision,
    ProcessingPriority,
    SkipReason,
    SmartFilter,
    actionable_score,
    has_time_reference,
)

__all__ = [
    "CURRENT_EXTRACTION_VERSION",
    "FilterSettings",
    "get_filter_settings",
    "FilterDecision",
    "ProcessingPriority",
    "SkipReason",
    "SmartFilter",
    "actionable_score",
    "has_time_reference",
]
