"""Tests for database configuration."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from shared.database.config import DatabaseSettings, get_database_settings


class TestDatabaseSettings:
    """Test DatabaseSettings."""

    def test_default_settings(self):
        """Test default values point at a local SQLite file."""
        with patch.dict(os.environ, {}, clear=True):
            settings = DatabaseSettings(_env_file=None)

        assert settings.url == "sqlite+aiosqlite:///./ambient.db"
        assert settings.is_sqlite is True
        assert settings.pool_size == 5
        assert settings.max_overflow == 10
        assert settings.create_tables is True
        assert settings.echo is False

    def test_env_override(self):
        """Test DATABASE_ prefixed environment variables."""
        env = {
            "DATABASE_URL": "postgresql+asyncpg://user:pass@db/ambient",
            "DATABASE_POOL_SIZE": "20",
            "DATABASE_CREATE_TABLES": "false",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = DatabaseSettings(_env_file=None)

        assert settings.url == "postgresql+asyncpg://user:pass@db/ambient"
        assert settings.is_sqlite is False
        assert settings.pool_size == 20
        assert settings.create_tables is False

    def test_pool_size_constraints(self):
        """Test pool size bounds."""
        with pytest.raises(ValidationError):
            DatabaseSettings(pool_size=0)
        with pytest.raises(ValidationError):
            DatabaseSettings(pool_size=51)

    def test_pool_recycle_constraints(self):
        """Test pool recycle bounds."""
        with pytest.raises(ValidationError):
            DatabaseSettings(pool_recycle=30)


class TestGetDatabaseSettings:
    """Test get_database_settings."""

    def test_get_database_settings_is_cached(self):
        """Test that the settings instance is cached."""
        assert get_database_settings() is get_database_settings()
