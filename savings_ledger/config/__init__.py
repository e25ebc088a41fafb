"""Configuration package."""

from savings_ledger.config.settings import (
    AccountingSettings,
    AppSettings,
    I18nSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AccountingSettings",
    "AppSettings",
    "I18nSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
