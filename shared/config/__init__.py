"""
Configuration management.
"""

from shared.config.credentials import ProviderCredentials, get_credentials
from shared.config.logging import get_logger, setup_logging
from shared.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "ProviderCredentials",
    "get_credentials",
    "get_logger",
    "setup_logging",
]
