"""Configuration package."""

from statement_import.config.settings import (
    AppSettings,
    ImportSettings,
    LoggingSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "ImportSettings",
    "LoggingSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
