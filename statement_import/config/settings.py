"""
Configuration Management for Statement Import

Uses pydantic-settings for type-safe configuration from environment variables.

All tunables of the import pipeline live here. Values that are part of the
data contract (placeholder description, catch-all category) are constants in
the models package instead.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ImportSettings(BaseSettings):
    """Import pipeline thresholds."""

    model_config = SettingsConfigDict(
        env_prefix="STATEMENT_IMPORT_",
        extra="ignore"
    )

    duplicate_amount_tolerance: float = Field(
        default=0.01,
        gt=0.0,
        description="Maximum absolute amount difference for two rows to be duplicates"
    )
    date_sample_size: int = Field(
        default=10,
        ge=1,
        le=100,
        description="How many non-empty dates are inspected to detect the date format"
    )
    max_rows: Optional[int] = Field(
        default=None,
        ge=1,
        description="Optional cap on parsed rows processed by one import run"
    )


class LoggingSettings(BaseSettings):
    """Structured logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        extra="ignore"
    )

    level: str = Field(
        default="INFO",
        description="Standard library log level name"
    )
    json_output: bool = Field(
        default=True,
        description="Render log lines as JSON (False renders for the console)"
    )

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Only accept level names the logging module knows."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        level = v.strip().upper()
        if level not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {sorted(allowed)}")
        return level


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    debug_mode: bool = Field(
        default=False,
        description="Log at DEBUG level whatever LOG_LEVEL says"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Sub-settings are built on access so one bad section
    # does not prevent reading the others

    @property
    def importer(self) -> ImportSettings:
        return ImportSettings()

    @property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload after changing the environment.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings sections.

    Returns a dict of {section_name: is_valid}, plus a
    `<section>_error` entry holding the message of each failing section.
    """
    results = {}

    settings = get_settings()

    for name in ("importer", "logging", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
