"""
Configuration Management for the Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see what the core depends on (where data lives,
which keys hold it, how ids and money are rendered) and ensures the
configuration is validated at startup.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from LEDGER_* environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Persistence
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding the JSON key-value files"
    )
    records_key: str = Field(
        default="finance:records",
        min_length=1,
        description="Storage key for the serialized record array"
    )
    settings_key: str = Field(
        default="finance:settings",
        min_length=1,
        description="Storage key for the serialized settings object"
    )
    storage_retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="How many times a failed file write is attempted"
    )

    # Identifiers
    id_prefix: str = Field(
        default="txn_",
        description="Fixed textual prefix of record ids"
    )
    id_min_digits: int = Field(
        default=4,
        ge=1,
        le=12,
        description="Minimum zero-padded width of the numeric id suffix"
    )

    # Presentation
    locale: str = Field(
        default="en_US",
        description="Locale used for currency formatting"
    )
    trend_days: int = Field(
        default=7,
        ge=1,
        le=366,
        description="Number of calendar days in the spending trend"
    )
    default_sort: str = Field(
        default="date_desc",
        description="Sort key applied when a session starts"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Root log level"
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON lines (False = console renderer)"
    )

    @field_validator('id_prefix')
    @classmethod
    def validate_id_prefix(cls, v: str) -> str:
        """A prefix containing digits would leak into the numeric suffix scan."""
        if any(c.isdigit() for c in v):
            raise ValueError("id_prefix must not contain digits")
        return v

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.strip().upper()


class Settings(BaseSettings):
    """
    Root settings container.

    The core has a single settings group today; `app` is rebuilt on each
    access so environment changes made by tests are visible.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """Process-wide settings root. Clear with get_settings.cache_clear()."""
    return Settings()


def validate_all_settings() -> dict[str, object]:
    """
    Check that every settings group loads.

    Returns {"app": True} when healthy, otherwise {"app": False} plus an
    "app_error" entry with the validation message. Meant for a startup
    health check, so it never raises.
    """
    results: dict[str, object] = {}

    try:
        get_settings().app
        results["app"] = True
    except ValidationError as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
