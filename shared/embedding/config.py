"""
Configuration for embedding service.

Settings for the OpenAI embedding endpoint used by the response cache and the
narrative deduplicator.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EmbeddingSettings(BaseSettings):
    """Settings for embedding generation service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EMBEDDING_",
        case_sensitive=False,
        extra="ignore",
    )

    model: str = Field(
        default="text-embedding-3-small",
        description="OpenAI embedding model to use",
    )
    dimensions: int | None = Field(
        default=None,
        ge=256,
        le=3072,
        description="Embedding vector dimensions (model default when unset)",
    )
    timeout: float = Field(
        default=60.0,
        ge=1.0,
        le=300.0,
        description="Timeout for API requests in seconds",
    )
    max_input_chars: int = Field(
        default=8000,
        ge=1,
        le=32000,
        description="Input is truncated to this many characters",
    )


@lru_cache
def get_embedding_settings() -> EmbeddingSettings:
    """
    Get cached embedding settings instance.

    Returns:
        Cached EmbeddingSettings instance
    """
    return EmbeddingSettings()
