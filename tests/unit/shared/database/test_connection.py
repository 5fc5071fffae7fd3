"""Tests for database connection management."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlalchemy.pool import StaticPool

import shared.models  # noqa: F401  (registers tables)
from shared.database.connection import DatabaseConfig, DatabaseConnection


class TestDatabaseConfig:
    """Test database configuration."""

    def test_default_config(self):
        """Test default configuration values."""
        config = DatabaseConfig(url="postgresql+asyncpg://localhost/test")

        assert config.url == "postgresql+asyncpg://localhost/test"
        assert config.pool_size == 5
        assert config.max_overflow == 10
        assert config.pool_timeout == 30.0
        assert config.pool_recycle == 3600
        assert config.echo is False
        assert config.is_sqlite is False

    def test_server_engine_kwargs(self):
        """Test pool settings are passed for server databases."""
        config = DatabaseConfig(url="postgresql+asyncpg://localhost/test", pool_size=10)

        assert config.engine_kwargs() == {
            "echo": False,
            "pool_size": 10,
            "max_overflow": 10,
            "pool_timeout": 30.0,
            "pool_recycle": 3600,
            "pool_pre_ping": True,
        }

    def test_sqlite_file_engine_kwargs(self):
        """Test SQLite files get no pool sizing."""
        config = DatabaseConfig(url="sqlite+aiosqlite:///./ambient.db", echo=True)

        assert config.is_sqlite is True
        assert config.is_in_memory is False
        assert config.engine_kwargs() == {"echo": True}

    def test_in_memory_engine_kwargs(self):
        """Test in-memory SQLite shares a single connection."""
        config = DatabaseConfig(url="sqlite+aiosqlite:///:memory:")

        kwargs = config.engine_kwargs()

        assert config.is_in_memory is True
        assert kwargs["poolclass"] is StaticPool
        assert kwargs["connect_args"] == {"check_same_thread": False}


class TestDatabaseConnection:
    """Test database connection management."""

    def test_init(self):
        """Test connection initialization."""
        config = DatabaseConfig(url="postgresql+asyncpg://localhost/test")
        connection = DatabaseConnection(config)

        assert connection.config == config
        assert connection._engine is None
        assert connection._session_factory is None

    @patch("shared.database.connection.create_async_engine")
    def test_get_engine_returns_cached(self, mock_create_engine):
        """Test engine caching on subsequent calls."""
        mock_engine = MagicMock(spec=AsyncEngine)
        mock_create_engine.return_value = mock_engine

        config = DatabaseConfig(url="postgresql+asyncpg://localhost/test")
        connection = DatabaseConnection(config)

        engine1 = connection.get_engine()
        engine2 = connection.get_engine()

        assert engine1 is engine2 is mock_engine
        assert mock_create_engine.call_count == 1

    @patch("shared.database.connection.create_async_engine")
    @patch("shared.database.connection.sessionmaker")
    def test_get_session_factory(self, mock_sessionmaker, mock_create_engine):
        """Test session factory creation."""
        mock_engine = MagicMock(spec=AsyncEngine)
        mock_create_engine.return_value = mock_engine
        mock_factory = MagicMock()
        mock_sessionmaker.return_value = mock_factory

        config = DatabaseConfig(url="postgresql+asyncpg://localhost/test")
        connection = DatabaseConnection(config)

        factory = connection.get_session_factory()

        assert factory == mock_factory
        mock_sessionmaker.assert_called_once_with(
            mock_engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False,
        )

    @pytest.mark.asyncio
    async def test_session_scope_commits(self):
        """Test successful scope commits."""
        mock_session = AsyncMock(spec=AsyncSession)
        mock_factory = MagicMock()
        mock_factory.return_value.__aenter__.return_value = mock_session
        mock_factory.return_value.__aexit__.return_value = None

        connection = DatabaseConnection(DatabaseConfig(url="postgresql+asyncpg://localhost/test"))
        connection._session_factory = mock_factory

        async with connection.session_scope() as session:
            assert session == mock_session

        mock_session.commit.assert_awaited_once()
        mock_session.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_session_scope_rolls_back(self):
        """Test failed scope rolls back and re-raises."""
        mock_session = AsyncMock(spec=AsyncSession)
        mock_factory = MagicMock()
        mock_factory.return_value.__aenter__.return_value = mock_session
        mock_factory.return_value.__aexit__.return_value = None

        connection = DatabaseConnection(DatabaseConfig(url="postgresql+asyncpg://localhost/test"))
        connection._session_factory = mock_factory

        with pytest.raises(ValueError):
            async with connection.session_scope():
                raise ValueError("boom")

        mock_session.rollback.assert_awaited_once()
        mock_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_get_session_yields_scoped_session(self):
        """Test the generator form commits like the context manager."""
        mock_session = AsyncMock(spec=AsyncSession)
        mock_factory = MagicMock()
        mock_factory.return_value.__aenter__.return_value = mock_session
        mock_factory.return_value.__aexit__.return_value = None

        connection = DatabaseConnection(DatabaseConfig(url="postgresql+asyncpg://localhost/test"))
        connection._session_factory = mock_factory

        async for session in connection.get_session():
            assert session == mock_session

        mock_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_tables_in_memory(self):
        """Test tables for every registered model are created."""
        connection = DatabaseConnection(DatabaseConfig(url="sqlite+aiosqlite:///:memory:"))

        await connection.create_tables()
        async with connection.get_engine().connect() as conn:
            tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
        await connection.close()

        assert {"events", "tasks", "activity_log", "raw_items"} <= set(tables)

    @pytest.mark.asyncio
    async def test_close(self):
        """Test connection cleanup."""
        mock_engine = AsyncMock(spec=AsyncEngine)

        connection = DatabaseConnection(DatabaseConfig(url="postgresql+asyncpg://localhost/test"))
        connection._engine = mock_engine
        connection._session_factory = MagicMock()

        await connection.close()

        mock_engine.dispose.assert_called_once()
        assert connection._engine is None
        assert connection._session_factory is None

    @pytest.mark.asyncio
    async def test_close_when_not_initialized(self):
        """Test close when connection not initialized."""
        connection = DatabaseConnection(DatabaseConfig(url="postgresql+asyncpg://localhost/test"))

        # Should not raise
        await connection.close()

        assert connection._engine is None
