from __future__ import annotations

from typing import Optional


SUPPORTED_LOCALES = ("es", "en", "fr")
DEFAULT_LOCALE = "es"

LOCALE_COOKIE = "locale"
LOCALE_COOKIE_MAX_AGE = 60 * 60 * 24 * 365


def is_supported(locale: Optional[str]) -> bool:
    return locale in SUPPORTED_LOCALES


def resolve_locale(cookie_value: Optional[str], *, default: str = DEFAULT_LOCALE) -> str:
    """Pick the display language from the stored cookie, falling back to the default."""
    if is_supported(cookie_value):
        return str(cookie_value)
    return default if is_supported(default) else DEFAULT_LOCALE
