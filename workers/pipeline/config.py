"""
Configuration for the extraction pipeline worker.

Settings for stage toggles, reflection and verification thresholds, the
background loop schedule and the narrative deduplicator.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PipelineSettings(BaseSettings):
    """Settings for the pipeline coordinator."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PIPELINE_",
        case_sensitive=False,
        extra="ignore",
    )

    # Worker Configuration
    worker_name: str = Field(
        default="pipeline-worker",
        description="Worker instance name for logging",
    )
    log_level: str = Field(default="INFO", description="Logging level")
    json_logs: bool = Field(default=True, description="Render logs as JSON")
    persistence_backend: str = Field(
        default="sql",
        pattern="^(sql|memory)$",
        description="Extraction store backend: sql or memory",
    )

    # Stage toggles
    enable_self_reflection: bool = Field(
        default=True,
        description="Run the critic and allow one re-extraction",
    )
    enable_multi_agent_verification: bool = Field(
        default=True,
        description="Run the skeptical verifier before validation",
    )
    enable_pre_filter: bool = Field(
        default=True,
        description="Drop threads with no actionable message before the story stage",
    )

    # Reflection
    min_quality_score: float = Field(
        default=7.0,
        ge=0.0,
        le=10.0,
        description="Re-extract when the critic scores below this and asks for a retry",
    )
    max_reflection_retries: int = Field(
        default=1,
        ge=0,
        le=1,
        description="Maximum re-extractions per day",
    )

    # Verification
    consensus_threshold: float = Field(
        default=0.6,
        ge=0.0,
        le=1.0,
        description="Apply verifier results only at or above this consensus",
    )

    # Background loop
    loop_interval_seconds: float = Field(
        default=300.0,
        ge=1.0,
        description="Seconds between scans of recent days",
    )
    day_delay_seconds: float = Field(
        default=2.0,
        ge=0.0,
        description="Pause between days within one scan",
    )
    lookback_days: int = Field(
        default=7,
        ge=1,
        le=31,
        description="Days scanned per pass, today included",
    )

    # Batch building
    fetch_limit: int = Field(
        default=1000,
        ge=1,
        description="Maximum raw items read per day",
    )
    compression_message_threshold: int = Field(
        default=50,
        ge=1,
        description="Compress story prompts for batches with more messages",
    )

    # Narrative deduplication
    dedup_window_seconds: float = Field(
        default=86400.0,
        ge=60.0,
        description="How long processed narratives are remembered",
    )
    dedup_similarity_threshold: float = Field(
        default=0.88,
        ge=0.0,
        le=1.0,
        description="Cosine similarity at which a batch counts as a duplicate",
    )


@lru_cache
def get_pipeline_settings() -> PipelineSettings:
    """
    Get cached pipeline settings instance.

    Returns:
        PipelineSettings: Cached settings instance
    """
    return PipelineSettings()
