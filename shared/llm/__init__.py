"""
Model access layer.

Unified client over the generation providers with response caching,
complexity routing, retry with backoff, provider fallback and prompt
compression.
"""

from shared.llm.cache import CacheEntry, ResponseCache
from shared.llm.client import LLMClient, LLMStats
from shared.llm.compression import compress_prompt, optimize_context_position
from shared.llm.config import LLMSettings, get_llm_settings
from shared.llm.providers import BaseProvider, ClaudeProvider, GeminiProvider, LLMProvider
from shared.llm.retry import RetryPolicy, call_with_retry
from shared.llm.routing import ContentComplexity, estimate_complexity, provider_chain

__all__ = [
    "LLMSettings",
    "get_llm_settings",
    "LLMClient",
    "LLMStats",
    "LLMProvider",
    "BaseProvider",
    "GeminiProvider",
    "ClaudeProvider",
    "RetryPolicy",
    "call_with_retry",
    "ContentComplexity",
    "estimate_complexity",
    "provider_chain",
    "CacheEntry",
    "ResponseCache",
    "compress_prompt",
    "optimize_context_position",
]
