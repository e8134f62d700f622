"""LocaleMap - locale resolution and asset loading for application messages.

Resolves human-readable message strings across locales with fallback
chains, gender/quantity variant selection and $name placeholders. Assets
are flat or nested JSON dictionaries fetched from disk or over HTTP.

Public API:
    LocaleMap - Multi-locale lookups with asynchronous, coalesced loading
    LocaleMapOptions - Frozen configuration (locales, fallbacks, assets)
    AssetOptions - Asset location and transport
    Locale - Language plus optional region, parsed with parse_locale()
    Gender - Gender selector for contextual messages
    parse_country - ISO 3166-1 country lookup

Exceptions:
    LocalizationError - Base exception class
    InvalidLocaleError - Malformed or unknown locale codes
    ConfigurationError - Invalid options
    AssetError - Asset fetch or decode failures
    DuplicateKeyError - Colliding keys within one locale

Submodules:
    localemap.localization - Options, loading, merging, cache, orchestrator
    localemap.runtime - Variant selection and placeholder substitution
    localemap.introspection - Country metadata
    localemap.diagnostics - Error types and diagnostic codes
"""

# Essential Public API - Minimal exports for clean namespace
from .core import Locale, parse_locale
from .diagnostics import (
    AssetError,
    AssetNotFoundError,
    AssetTransportError,
    ConfigurationError,
    CountryNotFoundError,
    DuplicateKeyError,
    InvalidLocaleError,
    LocalizationError,
)
from .enums import Direction, Gender, LoaderType, MissingVariablePolicy
from .introspection import Country, parse_country
from .localization import AssetOptions, LocaleMap, LocaleMapOptions

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("localemap")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "AssetError",
    "AssetNotFoundError",
    "AssetOptions",
    "AssetTransportError",
    "ConfigurationError",
    "Country",
    "CountryNotFoundError",
    "Direction",
    "DuplicateKeyError",
    "Gender",
    "InvalidLocaleError",
    "Locale",
    "LocaleMap",
    "LocaleMapOptions",
    "LoaderType",
    "LocalizationError",
    "MissingVariablePolicy",
    "__version__",
    "parse_country",
    "parse_locale",
]
