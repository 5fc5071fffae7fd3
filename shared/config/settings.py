"""
Application settings using Pydantic Settings.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process-level settings shared by the worker and the HTTP service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: str = Field(
        "development", description="Environment: development, staging, production"
    )
    debug: bool = Field(False, description="Debug mode")
    log_level: str = Field("INFO", description="Logging level")
    json_logs: bool = Field(True, description="Render logs as JSON instead of console output")

    # Service Configuration
    service_name: str = Field("ambient-pipeline", description="Service name")
    service_version: str = Field("0.1.0", description="Service version")
    service_host: str = Field("127.0.0.1", description="Service host")
    service_port: int = Field(8765, description="Service port")

    # Worker
    start_background_loop: bool = Field(
        True, description="Start the coordinator's background loop with the service"
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance loaded from environment
    """
    return Settings()
