"""
Configuration Management for Wedding Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see what external dependencies exist and
ensures all required configuration is validated at startup.
"""

from datetime import date
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets record store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        ...,
        description="ID of the spreadsheet holding the wedding records"
    )

    # Worksheets are created on demand, one per collection
    worksheet_rows: int = Field(
        default=1000,
        ge=10,
        description="Initial row count for newly created worksheets"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Make sure it exists before running the application."
            )
        return v


class ImportSettings(BaseSettings):
    """
    Bulk pledge import configuration.

    Pledges touched by an import get a fixed fulfillment date
    (30 December of the current year by default) because contributions
    are collected in a yearly seasonal cycle.
    """

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_IMPORT_",
        extra="ignore"
    )

    fulfillment_month: int = Field(
        default=12,
        ge=1,
        le=12,
        description="Month of the fulfillment date set on imported pledges"
    )
    fulfillment_day: int = Field(
        default=30,
        ge=1,
        le=31,
        description="Day of the fulfillment date set on imported pledges"
    )
    pledge_note: str = Field(
        default="Imported from WhatsApp message",
        description="Note written on pledges created by an import"
    )
    payment_note: str = Field(
        default="Pledge payment - Imported from WhatsApp message",
        description="Note on ledger entries for payment increases found by an import"
    )
    initial_payment_note: str = Field(
        default="Initial pledge payment - Imported from WhatsApp message",
        description="Note on ledger entries for pledges created already paid"
    )

    @model_validator(mode='after')
    def validate_fulfillment_day(self) -> 'ImportSettings':
        """Reject day/month pairs that never exist (e.g. 31 February)."""
        # 2000 is a leap year, so 29 February stays accepted
        date(2000, self.fulfillment_month, self.fulfillment_day)
        return self

    def fulfillment_date(self, today: date) -> date:
        """Fulfillment date for the year of `today`."""
        try:
            return date(today.year, self.fulfillment_month, self.fulfillment_day)
        except ValueError:
            # 29 February outside a leap year
            return date(today.year, self.fulfillment_month, self.fulfillment_day - 1)


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

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    default_currency: str = Field(
        default="USD",
        min_length=3,
        max_length=3,
        description="Display currency for weddings that don't set one"
    )

    @field_validator('default_currency')
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.upper()


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

    # Sub-settings are loaded lazily so the Sheets credentials are only
    # required by code paths that talk to Google Sheets

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def imports(self) -> ImportSettings:
        return ImportSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("google_sheets", "imports", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
