"""Localization package."""

from savings_ledger.i18n.translator import (
    Translator,
    UnknownLocaleError,
    get_translator,
    interpolate,
    load_messages,
    normalize_locale,
)
from savings_ledger.i18n.formatting import (
    category_label,
    describe_remaining,
    localized_period_label,
    room_card_label,
    status_label,
)

__all__ = [
    "Translator",
    "UnknownLocaleError",
    "get_translator",
    "interpolate",
    "load_messages",
    "normalize_locale",
    "category_label",
    "describe_remaining",
    "localized_period_label",
    "room_card_label",
    "status_label",
]
