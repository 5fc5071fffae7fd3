"""
Configuration for the pre-filter.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

CURRENT_EXTRACTION_VERSION = "1.0"


class FilterSettings(BaseSettings):
    """Settings for pre-model filtering of raw items."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="FILTER_",
        case_sensitive=False,
        extra="ignore",
    )

    min_content_length: int = Field(
        default=20,
        ge=0,
        le=10000,
        description="Items shorter than this many characters are skipped",
    )
    hash_expiry_seconds: int = Field(
        default=3600,
        ge=1,
        le=604800,
        description="How long a passed item's content hash blocks repeats",
    )
    extraction_version: str = Field(
        default=CURRENT_EXTRACTION_VERSION,
        description="Items already extracted at this version are skipped",
    )


@lru_cache
def get_filter_settings() -> FilterSettings:
    """
    Get cached filter settings instance.

    Returns:
        Cached FilterSettings instance
    """
    return FilterSettings()
