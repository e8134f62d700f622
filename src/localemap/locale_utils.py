"""Locale utilities backed by Babel CLDR data.

Centralizes locale format normalization and the Babel lookups used to
validate locale codes. Provides canonical locale handling to ensure
consistent cache keys and lookups.

Python 3.13+. External dependency: Babel (CLDR locale data).
"""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING

from babel import Locale as BabelLocale
from babel import localedata
from babel.core import UnknownLocaleError, get_global
from babel.core import parse_locale as babel_parse_locale

from localemap.constants import MAX_LOCALE_CACHE_SIZE

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = [
    "get_babel_locale",
    "get_likely_territory",
    "get_territory_names",
    "is_known_language",
    "normalize_locale",
]


def normalize_locale(locale_code: str) -> str:
    """Convert BCP-47 locale code to POSIX format for Babel.

    BCP-47 uses hyphens (en-US), while Babel/POSIX uses underscores (en_US).

    Args:
        locale_code: BCP-47 locale code (e.g., "en-US", "pt-BR")

    Returns:
        POSIX-formatted locale code (e.g., "en_US", "pt_BR")

    Example:
        >>> normalize_locale("en-US")
        'en_US'
        >>> normalize_locale("en")  # Already normalized
        'en'
    """
    return locale_code.replace("-", "_")


@functools.lru_cache(maxsize=MAX_LOCALE_CACHE_SIZE)
def get_babel_locale(locale_code: str) -> BabelLocale:
    """Get a Babel Locale object with caching.

    Parses the locale code once and caches the result.

    Thread-safe via lru_cache internal locking.

    Args:
        locale_code: Locale code (BCP-47 or POSIX format accepted)

    Returns:
        Babel Locale object

    Raises:
        babel.core.UnknownLocaleError: If locale is not recognized
        ValueError: If locale format is invalid

    Example:
        >>> locale = get_babel_locale("en-US")
        >>> locale.territory
        'US'
    """
    return BabelLocale.parse(normalize_locale(locale_code))


@functools.lru_cache(maxsize=MAX_LOCALE_CACHE_SIZE)
def is_known_language(language: str) -> bool:
    """Check whether CLDR ships data for a bare language code.

    Args:
        language: Lowercase language code (e.g., "pt")

    Returns:
        True if Babel can load locale data for the language
    """
    if not language.isalpha():
        return False
    try:
        return localedata.exists(language)
    except (ValueError, OSError):
        return False


@functools.lru_cache(maxsize=MAX_LOCALE_CACHE_SIZE)
def get_territory_names(locale_code: str = "en") -> Mapping[str, str]:
    """Get CLDR territory display names for a locale.

    Returns an empty mapping if the locale is unknown to CLDR.

    Args:
        locale_code: Locale used for the display names

    Returns:
        Mapping of territory code (e.g., 'BR', '419') to display name
    """
    try:
        return get_babel_locale(locale_code).territories
    except (UnknownLocaleError, ValueError):
        return {}


@functools.lru_cache(maxsize=MAX_LOCALE_CACHE_SIZE)
def get_likely_territory(language: str) -> str | None:
    """Get the CLDR likely territory for a bare language.

    Example:
        >>> get_likely_territory("pt")
        'BR'

    Args:
        language: Lowercase language code

    Returns:
        Territory code, or None if CLDR has no likely subtags entry
    """
    likely_subtags = get_global("likely_subtags")
    expanded = likely_subtags.get(language)
    if expanded is None:
        return None
    _language, territory, _script, _variant = babel_parse_locale(expanded)[:4]
    return territory
