"""
Extraction agents.

Story, Extractor, Formatter, Validator and Critic agents plus the
multi-agent verifier, each a single-purpose transformer over one model call.
"""

from shared.agents.critic import CriticAgent
from shared.agents.extractor import ExtractorAgent
from shared.agents.formatter import FormatterAgent
from shared.agents.story import StoryAgent
from shared.agents.validator import ValidationOutcome, ValidatorAgent
from shared.agents.verifier import MultiAgentVerifier

__all__ = [
    "StoryAgent",
    "ExtractorAgent",
    "FormatterAgent",
    "ValidatorAgent",
    "ValidationOutcome",
    "CriticAgent",
    "MultiAgentVerifier",
]
