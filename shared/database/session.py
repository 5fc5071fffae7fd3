"""
Database session management utilities.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from shared.database.config import DatabaseSettings, get_database_settings
from shared.database.connection import DatabaseConfig, DatabaseConnection

# Global database connection instance
_db_connection: DatabaseConnection | None = None


def get_database_url() -> str:
    """
    Get database URL from settings.

    Returns:
        Database connection URL (DATABASE_URL, SQLite by default)
    """
    return get_database_settings().url


def init_database(
    url: str | None = None,
    settings: DatabaseSettings | None = None,
) -> DatabaseConnection:
    """
    Initialize global database connection.

    Args:
        url: Database URL (defaults to the configured DATABASE_URL)
        settings: Database settings (defaults to cached settings)

    Returns:
        DatabaseConnection instance
    """
    global _db_connection

    settings = settings or get_database_settings()

    config = DatabaseConfig(
        url=url or settings.url,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
        pool_timeout=settings.pool_timeout,
        pool_recycle=settings.pool_recycle,
        echo=settings.echo,
    )

    _db_connection = DatabaseConnection(config)
    return _db_connection


def get_db_connection() -> DatabaseConnection:
    """
    Get global database connection.

    Returns:
        DatabaseConnection instance

    Raises:
        RuntimeError: If database not initialized
    """
    if _db_connection is None:
        raise RuntimeError("Database not initialized. Call init_database() first.")
    return _db_connection


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Get database session for dependency injection.

    Yields:
        AsyncSession instance
    """
    db_connection = get_db_connection()
    async for session in db_connection.get_session():
        yield session


async def close_database() -> None:
    """Close global database connection."""
    global _db_connection
    if _db_connection is not None:
        await _db_connection.close()
        _db_connection = None
