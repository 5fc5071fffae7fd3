"""
Database utilities and configuration.
"""

from shared.database.base import Base, TimestampMixin, utc_now
from shared.database.config import DatabaseSettings, get_database_settings
from shared.database.connection import DatabaseConfig, DatabaseConnection
from shared.database.session import (
    close_database,
    get_database_url,
    get_db_connection,
    get_db_session,
    init_database,
)

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "utc_now",
    # Config
    "DatabaseSettings",
    "get_database_settings",
    # Connection
    "DatabaseConfig",
    "DatabaseConnection",
    # Session
    "init_database",
    "get_database_url",
    "get_db_connection",
    "get_db_session",
    "close_database",
]
