"""
Configuration Management for Savings Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The accounting functions themselves take plain arguments; only the
service layer and the schedule guards read from settings.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AccountingSettings(BaseSettings):
    """Schedule and payment accounting configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ACCOUNTING_",
        extra="ignore"
    )

    max_schedule_steps: int = Field(
        default=1_000_000,
        ge=1,
        description="Upper bound on cadence steps walked for one schedule"
    )
    window_poll_interval_seconds: float = Field(
        default=30.0,
        gt=0,
        description="How often callers should refresh time-window progress"
    )
    payment_category: str = Field(
        default="Other",
        min_length=1,
        description="Transaction category used for recorded room payments"
    )


class I18nSettings(BaseSettings):
    """Display string configuration."""

    model_config = SettingsConfigDict(
        env_prefix="I18N_",
        extra="ignore"
    )

    default_locale: str = Field(
        default="en",
        description="Locale used when none is requested"
    )
    supported_locales: str = Field(
        default="en,es",
        description="Comma-separated list of locales with message bundles"
    )

    @field_validator('default_locale')
    @classmethod
    def normalize_locale(cls, v: str) -> str:
        """Keep only the language part (es-ES -> es)."""
        return v.split("-")[0].strip().lower()

    @property
    def supported_locales_list(self) -> list[str]:
        """Get supported locales as a list."""
        return [loc.strip().lower() for loc in self.supported_locales.split(",") if loc.strip()]


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

    # Room limits
    min_room_name_length: int = Field(
        default=3,
        ge=1,
        description="Minimum length of a saving room name"
    )
    max_comment_length: int = Field(
        default=2000,
        ge=1,
        description="Maximum length of a discussion comment"
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

    @property
    def accounting(self) -> AccountingSettings:
        return AccountingSettings()

    @property
    def i18n(self) -> I18nSettings:
        return I18nSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries for the ones that failed.
    """
    results = {}

    settings = get_settings()

    for name in ("accounting", "i18n", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
