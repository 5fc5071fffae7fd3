"""
Configuration for the model access layer.

Settings for provider endpoints, retry policy, response caching and prompt
compression.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMSettings(BaseSettings):
    """Settings for the unified LLM client."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LLM_",
        case_sensitive=False,
        extra="ignore",
    )

    # Provider Configuration
    gemini_model: str = Field(
        default="gemini-2.0-flash-exp",
        description="Gemini generation model (cheap/fast tier)",
    )
    claude_model: str = Field(
        default="claude-3-5-haiku-20241022",
        description="Claude generation model (capable tier)",
    )
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Gemini REST API base URL",
    )
    max_output_tokens: int = Field(
        default=4096,
        ge=1,
        le=8192,
        description="Maximum tokens for a model response",
    )
    request_timeout: float = Field(
        default=120.0,
        ge=1.0,
        le=600.0,
        description="Transport-level request timeout in seconds",
    )
    default_temperature: float = Field(
        default=0.2,
        ge=0.0,
        le=1.0,
        description="Sampling temperature when the caller does not set one",
    )

    # Retry Configuration
    retry_max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts per provider before falling back",
    )
    retry_initial_delay_ms: int = Field(
        default=500,
        ge=0,
        le=60000,
        description="Delay before the second attempt in milliseconds",
    )
    retry_backoff_multiplier: float = Field(
        default=2.0,
        ge=1.0,
        le=10.0,
        description="Exponential backoff multiplier",
    )
    retry_jitter: float = Field(
        default=0.25,
        ge=0.0,
        le=1.0,
        description="Relative jitter applied to each delay",
    )
    retry_max_delay_ms: int = Field(
        default=30000,
        ge=0,
        le=300000,
        description="Upper bound for a single retry delay in milliseconds",
    )

    # Response Cache Configuration
    cache_ttl_seconds: int = Field(
        default=7200,
        ge=1,
        le=86400,
        description="Response cache entry lifetime in seconds",
    )
    cache_similarity_threshold: float = Field(
        default=0.92,
        ge=0.0,
        le=1.0,
        description="Minimum cosine similarity for a semantic cache hit",
    )
    cache_max_entries: int = Field(
        default=500,
        ge=1,
        le=100000,
        description="Response cache capacity",
    )
    cache_trim_count: int = Field(
        default=100,
        ge=1,
        le=100000,
        description="Entries evicted when the cache is full",
    )

    # Compression Configuration
    compression_max_words: int = Field(
        default=2000,
        ge=100,
        le=100000,
        description="Word budget for compressed prompts",
    )


@lru_cache
def get_llm_settings() -> LLMSettings:
    """
    Get cached LLM settings instance.

    Returns:
        Cached LLMSettings instance
    """
    return LLMSettings()
