"""
Translator

DESIGN DECISION: There is no process-wide "current locale". A Translator
is an explicit object ({locale, translate(key, params)}) handed to
whatever needs display strings. The accounting core never takes one.

Bundles are JSON files shipped with the package and loaded lazily, once
per locale. Missing keys fall back to English, then to the key itself.
"""

import json
import re
from functools import lru_cache
from importlib import resources
from typing import Any, Mapping, Optional

import structlog

from savings_ledger.config import get_settings

FALLBACK_LOCALE = "en"

_PLACEHOLDER = re.compile(r"\{(\w+)\}")

logger = structlog.get_logger(__name__)


class UnknownLocaleError(LookupError):
    """No message bundle exists for the locale."""
    pass


def interpolate(template: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """Replace {name} placeholders; unknown placeholders are left as-is."""
    if not params:
        return template
    return _PLACEHOLDER.sub(
        lambda match: str(params[match.group(1)]) if match.group(1) in params else match.group(0),
        template,
    )


@lru_cache(maxsize=None)
def load_messages(locale: str) -> dict:
    """Load the message bundle for a locale (cached)."""
    bundle = resources.files("savings_ledger.i18n").joinpath("messages").joinpath(f"{locale}.json")
    try:
        return json.loads(bundle.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise UnknownLocaleError(locale) from None


class Translator:
    """
    Looks up dotted keys ("status.paid") in a message bundle.

    Usage:
        t = get_translator("es")
        t("relative.days", {"count": 3})
    """

    def __init__(
        self,
        locale: str,
        messages: Mapping[str, Any],
        fallback: Optional["Translator"] = None,
    ):
        self.locale = locale
        self._messages = messages
        self._fallback = fallback

    def _lookup(self, key: str) -> Optional[str]:
        value: Any = self._messages
        for part in key.split("."):
            if isinstance(value, Mapping) and part in value:
                value = value[part]
            else:
                return None
        if isinstance(value, Mapping):
            return None
        return str(value)

    def translate(self, key: str, params: Optional[Mapping[str, Any]] = None) -> str:
        template = self._lookup(key)
        if template is None:
            if self._fallback is not None:
                return self._fallback.translate(key, params)
            return key
        return interpolate(template, params)

    __call__ = translate


def normalize_locale(locale: Optional[str]) -> str:
    """
    Map a requested locale onto a supported one.

    "es-ES" -> "es"; unsupported or empty -> the configured default.
    """
    settings = get_settings().i18n
    if not locale:
        return settings.default_locale
    language = locale.split("-")[0].strip().lower()
    if language in settings.supported_locales_list:
        return language
    return settings.default_locale


@lru_cache(maxsize=None)
def _translator_for(locale: str) -> Translator:
    fallback = None
    if locale != FALLBACK_LOCALE:
        fallback = Translator(FALLBACK_LOCALE, load_messages(FALLBACK_LOCALE))

    try:
        messages = load_messages(locale)
    except UnknownLocaleError:
        logger.warning("message_bundle_missing", locale=locale, fallback=FALLBACK_LOCALE)
        return fallback or Translator(FALLBACK_LOCALE, load_messages(FALLBACK_LOCALE))

    return Translator(locale, messages, fallback=fallback)


def get_translator(locale: Optional[str] = None) -> Translator:
    """Translator for the requested (or default) locale."""
    return _translator_for(normalize_locale(locale))
