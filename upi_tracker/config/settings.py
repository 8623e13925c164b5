"""
Configuration Management for UPI Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The payment core itself reads no environment variables; everything it
needs (scheme, currency, placeholder note) is handed to it from here.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TrackerSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from UPI_TRACKER_* environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="UPI_TRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Outbound payment link
    uri_scheme: str = Field(
        default="upi",
        min_length=1,
        description="Scheme of the deep-link payment URI"
    )
    currency_code: str = Field(
        default="INR",
        description="The single supported currency code"
    )

    # Ledger
    default_note: str = Field(
        default="Expense",
        min_length=1,
        description="Note recorded when the user left the note empty"
    )
    recent_history_limit: int = Field(
        default=5,
        ge=1,
        le=100,
        description="How many transactions the summary shows"
    )

    # Confirmation prompt
    confirm_prompt_delay_ms: int = Field(
        default=1500,
        ge=0,
        le=10000,
        description="Delay before prompting, lets the payment app take focus"
    )

    # Persistence
    state_file: Path = Field(
        default=Path("upi_tracker_data.json"),
        description="Where the JSON state file lives"
    )
    save_retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts before a save is reported as failed"
    )

    @field_validator('currency_code')
    @classmethod
    def validate_currency_code(cls, v: str) -> str:
        """Currency codes are three upper-case letters (ISO 4217)."""
        v = v.strip().upper()
        if len(v) != 3 or not v.isalpha():
            raise ValueError(f"Invalid currency code: {v!r}")
        return v

    @field_validator('uri_scheme')
    @classmethod
    def normalize_scheme(cls, v: str) -> str:
        """Store the scheme without '://' and in lower case."""
        return v.strip().lower().removesuffix("://")

    @property
    def uri_prefix(self) -> str:
        """Prefix every payment URI starts with, e.g. 'upi://'."""
        return f"{self.uri_scheme}://"


@lru_cache()
def get_settings() -> TrackerSettings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return TrackerSettings()
