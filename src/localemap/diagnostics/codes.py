"""Diagnostic codes and data structures.

Defines error codes and structured diagnostic messages.
Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
]


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Locale identity errors (locale and country codes)
        2000-2999: Configuration errors (options, fallback maps)
        3000-3999: Asset errors (fetching and decoding dictionaries)
        4000-4999: Merge errors (combining dictionaries)
        5000-5999: Lookup diagnostics (message resolution)
    """

    # Locale identity (1000-1999)
    LOCALE_EMPTY = 1001
    LOCALE_MALFORMED = 1002
    LOCALE_UNKNOWN_LANGUAGE = 1003
    LOCALE_UNKNOWN_REGION = 1004
    COUNTRY_NOT_FOUND = 1005

    # Configuration (2000-2999)
    DEFAULT_LOCALE_UNSUPPORTED = 2001
    FALLBACK_LOCALE_UNSUPPORTED = 2002
    NO_SUPPORTED_LOCALES = 2003
    UNKNOWN_OPTION = 2004
    INVALID_OPTION = 2005

    # Assets (3000-3999)
    ASSET_NOT_FOUND = 3001
    ASSET_TRANSPORT_FAILED = 3002
    ASSET_INVALID_JSON = 3003
    ASSET_INVALID_STRUCTURE = 3004
    ASSET_TOO_LARGE = 3005
    ASSET_PATH_REJECTED = 3006

    # Merging (4000-4999)
    DUPLICATE_KEY = 4001

    # Lookup (5000-5999)
    MESSAGE_NOT_FOUND = 5001
    LOCALE_NOT_LOADED = 5002


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Inspired by Rust compiler diagnostics. Carries enough context for a
    log line or a tooling report without parsing the exception text.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        hint: Suggestion for fixing the error
        locale_code: Locale involved, exactly as configured (if any)
        source_path: Asset path or URL involved (if any)
        severity: Error severity level
    """

    code: DiagnosticCode
    message: str
    hint: str | None = None
    locale_code: str | None = None
    source_path: str | None = None
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic like Rust compiler.

        Example output:
            error[ASSET_NOT_FOUND]: Asset 'common' not found for locale 'pt-BR'
              --> res/lang/pt-BR/common.json
              = locale: pt-BR
              = help: Create the file or remove the base file name

        Returns:
            Formatted error message
        """
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)
