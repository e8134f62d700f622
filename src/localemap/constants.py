"""Shared constants for LocaleMap.

This module provides centralized configuration constants used across
the locale, localization and runtime packages. Placing constants here
avoids circular imports and provides a single source of truth.

Constants are grouped by domain:
- Cache limits: Memory bounds for lookup caches
- Asset layout: Defaults for asset location and naming
- Message keys: Variant suffixes and placeholder syntax
- Fallback strings: Visible placeholders for lookup misses

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Cache limits
    "MAX_LOCALE_CACHE_SIZE",
    "MAX_LOAD_RESULTS",
    # Asset layout
    "DEFAULT_ASSETS_SRC",
    "DEFAULT_HTTP_TIMEOUT",
    "ASSET_FILE_SUFFIX",
    "MAX_ASSET_SIZE",
    # Locale parsing
    "LOCALE_ALIASES",
    # Message keys
    "KEY_SEPARATOR",
    "BASE_NAME_SEPARATOR",
    "SUFFIX_EMPTY",
    "SUFFIX_ONE",
    "SUFFIX_MULTIPLE",
    "NUMBER_VARIABLE",
    "VALUE_VARIABLE",
    "PLACEHOLDER_PATTERN",
    # Fallback strings
    "FALLBACK_MISSING_MESSAGE",
]

# ============================================================================
# CACHE LIMITS
# ============================================================================

# Maximum cached Babel locale / territory lookups.
# 128 covers typical multi-region applications (major locales + variants).
MAX_LOCALE_CACHE_SIZE: int = 128

# Fetch results retained for LocaleMap.get_load_summary(); oldest dropped first.
MAX_LOAD_RESULTS: int = 1000

# ============================================================================
# ASSET LAYOUT
# ============================================================================

# Default asset root, relative path or URL prefix.
DEFAULT_ASSETS_SRC: str = "res/lang"

# Seconds before an HTTP asset fetch is abandoned.
DEFAULT_HTTP_TIMEOUT: float = 10.0

# Every asset is a JSON document: {src}/{locale-code}/{base_file_name}.json
ASSET_FILE_SUFFIX: str = ".json"

# Maximum accepted asset size in bytes (10 MB).
MAX_ASSET_SIZE: int = 10 * 1024 * 1024

# ============================================================================
# LOCALE PARSING
# ============================================================================

# Region-less shorthands that name a country rather than a language.
# Note: "br" shadows the Breton language code.
LOCALE_ALIASES: dict[str, tuple[str, str]] = {
    "br": ("pt", "BR"),
    "us": ("en", "US"),
    "jp": ("ja", "JP"),
}

# ============================================================================
# MESSAGE KEYS
# ============================================================================

# Joins a base file name and a key inside that file: "common" + "hello"
KEY_SEPARATOR: str = "."

# Nested base file names ("errors/http") nest the keys they contribute.
BASE_NAME_SEPARATOR: str = "/"

# Quantity variant suffixes. Gender suffixes derive from Gender values.
SUFFIX_EMPTY: str = "empty"
SUFFIX_ONE: str = "one"
SUFFIX_MULTIPLE: str = "multiple"

# Variable bound to a quantity selector, so templates can show it: "$number"
NUMBER_VARIABLE: str = "number"

# Variable bound to a bare positional string argument: "$value"
VALUE_VARIABLE: str = "value"

# $name tokens; "$$" is an escaped dollar sign.
PLACEHOLDER_PATTERN: str = r"\$(\$|[A-Za-z0-9_-]+)"

# ============================================================================
# FALLBACK STRINGS
# ============================================================================

# Rendered when a key is absent from every locale in the chain.
# Format string - use .format(id=...), e.g. {common.missing}
FALLBACK_MISSING_MESSAGE: str = "{{{id}}}"
