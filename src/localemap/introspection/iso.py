"""ISO 3166 country introspection API via Babel CLDR data.

Provides type-safe access to country data for locale regions. All types
are immutable, hashable, and thread-safe. Results are cached for
performance and never mutated after the first lookup.

Python 3.13+. External dependency: Babel (CLDR locale data).
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import TypeIs

from babel.core import get_global

from localemap.constants import MAX_LOCALE_CACHE_SIZE
from localemap.diagnostics import CountryNotFoundError, Diagnostic, DiagnosticCode
from localemap.locale_utils import get_territory_names, normalize_locale

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Type aliases
    "CountryCode",
    # Data classes
    "Country",
    # Lookup functions
    "parse_country",
    "get_country",
    "list_countries",
    # Type guards
    "is_valid_country_code",
    # Cache management
    "clear_iso_cache",
]


# ============================================================================
# TYPE ALIASES (PEP 695)
# ============================================================================

type CountryCode = str
"""ISO 3166-1 alpha-2 country code (e.g., 'US', 'BR', 'JP')."""


# ============================================================================
# DATA CLASSES
# ============================================================================


@dataclass(frozen=True, slots=True)
class Country:
    """ISO 3166-1 country data with localized name.

    Immutable, thread-safe, hashable. Safe for use as dict key or set member.

    Attributes:
        alpha2: ISO 3166-1 alpha-2 code (e.g., 'US', 'BR').
        alpha3: ISO 3166-1 alpha-3 code (e.g., 'USA', 'BRA') or None if
            CLDR has no alias for it.
        name: Localized display name (depends on locale used for lookup).
    """

    alpha2: CountryCode
    alpha3: str | None
    name: str

    def __str__(self) -> str:
        return self.name


# ============================================================================
# CLDR TABLES
# ============================================================================


@lru_cache(maxsize=1)
def _alpha3_tables() -> tuple[dict[str, str], dict[str, str]]:
    """Build alpha-3 <-> alpha-2 tables from CLDR territory aliases.

    CLDR records every ISO 3166-1 alpha-3 code as an "overlong" alias of
    its alpha-2 replacement, e.g. BRA -> BR.

    Returns:
        (alpha3 -> alpha2, alpha2 -> alpha3)
    """
    aliases: dict[str, list[str]] = get_global("territory_aliases")
    to_alpha2: dict[str, str] = {}
    to_alpha3: dict[str, str] = {}
    for alias, replacement in aliases.items():
        if len(alias) != 3 or not alias.isalpha() or len(replacement) != 1:
            continue
        alpha2 = replacement[0]
        if len(alpha2) != 2 or not alpha2.isalpha():
            continue
        to_alpha2[alias] = alpha2
        to_alpha3.setdefault(alpha2, alias)
    return to_alpha2, to_alpha3


def _is_alpha2(code: str) -> bool:
    return len(code) == 2 and code.isalpha() and code.isupper()


# ============================================================================
# CACHED LOOKUP FUNCTIONS
# ============================================================================


@lru_cache(maxsize=MAX_LOCALE_CACHE_SIZE)
def _get_country_impl(code_upper: str, locale_norm: str) -> Country | None:
    """Internal cached implementation for get_country.

    Args:
        code_upper: Pre-uppercased alpha-2 or alpha-3 code.
        locale_norm: Pre-normalized locale string.

    Returns:
        Country if found, None if unknown code.
    """
    to_alpha2, to_alpha3 = _alpha3_tables()
    alpha2 = to_alpha2.get(code_upper, code_upper) if len(code_upper) == 3 else code_upper
    if not _is_alpha2(alpha2):
        return None

    names = get_territory_names(locale_norm)
    if alpha2 not in names:
        return None

    return Country(alpha2=alpha2, alpha3=to_alpha3.get(alpha2), name=names[alpha2])


def get_country(code: str, locale: str = "en") -> Country | None:
    """Look up an ISO 3166-1 country by alpha-2 or alpha-3 code.

    Args:
        code: Alpha-2 ('BR') or alpha-3 ('BRA') code. Case-insensitive.
        locale: Locale for name localization (default: 'en'). Accepts BCP-47
            (en-US) or POSIX (en_US) formats; normalized internally.

    Returns:
        Country if found, None if unknown code.

    Thread-safe. Results cached per normalized (code, locale) pair.
    """
    return _get_country_impl(code.upper(), normalize_locale(locale))


def parse_country(code: str) -> Country:
    """Parse a country code into a Country.

    Three-letter alphabetic input is read as ISO 3166-1 alpha-3,
    anything else as alpha-2.

    Args:
        code: Country code, case-insensitive (e.g., 'br', 'BRA')

    Returns:
        Country with English display name

    Raises:
        CountryNotFoundError: If the code is not a known country

    Example:
        >>> parse_country("bra").alpha2
        'BR'
    """
    country = get_country(code) if isinstance(code, str) and code else None
    if country is None:
        diagnostic = Diagnostic(
            code=DiagnosticCode.COUNTRY_NOT_FOUND,
            message=f"Unknown country code: {code!r}",
            hint="Use an ISO 3166-1 alpha-2 (e.g. 'BR') or alpha-3 (e.g. 'BRA') code",
        )
        raise CountryNotFoundError(diagnostic)
    return country


@lru_cache(maxsize=MAX_LOCALE_CACHE_SIZE)
def _list_countries_impl(locale_norm: str) -> frozenset[Country]:
    names = get_territory_names(locale_norm)
    _to_alpha2, to_alpha3 = _alpha3_tables()
    return frozenset(
        Country(alpha2=code, alpha3=to_alpha3.get(code), name=name)
        for code, name in names.items()
        if _is_alpha2(code)
    )


def list_countries(locale: str = "en") -> frozenset[Country]:
    """List all known ISO 3166-1 countries.

    Args:
        locale: Locale for name localization (default: 'en').

    Returns:
        Frozen set of all Country objects.

    Thread-safe. Result cached per normalized locale.
    """
    return _list_countries_impl(normalize_locale(locale))


# ============================================================================
# TYPE GUARDS (PEP 742)
# ============================================================================


def is_valid_country_code(value: object) -> TypeIs[CountryCode]:
    """Check if value is a known ISO 3166-1 alpha-2 code.

    Args:
        value: Value to check.

    Returns:
        True if value is a known alpha-2 code.
    """
    if not isinstance(value, str) or len(value) != 2:
        return False
    return get_country(value) is not None


# ============================================================================
# CACHE MANAGEMENT
# ============================================================================


def clear_iso_cache() -> None:
    """Clear all ISO introspection caches.

    Thread-safe.
    """
    _alpha3_tables.cache_clear()
    _get_country_impl.cache_clear()
    _list_countries_impl.cache_clear()
