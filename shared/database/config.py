"""
Configuration settings for database connections.

SQLite through aiosqlite by default; any SQLAlchemy async URL works
(postgresql+asyncpg with the postgres extra installed).
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Settings for the extraction store database."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DATABASE_",
        case_sensitive=False,
        extra="ignore",
    )

    # Connection settings
    url: str = Field(
        default="sqlite+aiosqlite:///./ambient.db",
        description="Async SQLAlchemy database URL",
    )

    # Connection pool settings (ignored for SQLite)
    pool_size: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Number of connections to maintain in pool",
    )
    max_overflow: int = Field(
        default=10,
        ge=0,
        le=50,
        description="Maximum overflow connections beyond pool_size",
    )
    pool_timeout: float = Field(
        default=30.0,
        ge=1.0,
        le=300.0,
        description="Timeout for getting connection from pool (seconds)",
    )
    pool_recycle: int = Field(
        default=3600,
        ge=60,
        le=86400,
        description="Recycle connections after this many seconds",
    )

    # Connection behavior
    echo: bool = Field(
        default=False,
        description="Echo SQL statements for debugging",
    )
    create_tables: bool = Field(
        default=True,
        description="Create missing tables on startup",
    )

    @property
    def is_sqlite(self) -> bool:
        """Whether the URL points at SQLite."""
        return self.url.startswith("sqlite")


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """
    Get cached database settings instance.

    Returns:
        DatabaseSettings: Cached settings instance
    """
    return DatabaseSettings()
