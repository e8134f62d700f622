"""Diagnostic system for LocaleMap errors.

Provides structured error diagnostics with codes and hints.
Inspired by Rust compiler diagnostics and Elm error messages.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode
from .errors import (
    AssetError,
    AssetFormatError,
    AssetNotFoundError,
    AssetTransportError,
    ConfigurationError,
    CountryNotFoundError,
    DuplicateKeyError,
    InvalidLocaleError,
    LocalizationError,
)
from .formatter import DiagnosticFormatter, OutputFormat

__all__ = [
    "AssetError",
    "AssetFormatError",
    "AssetNotFoundError",
    "AssetTransportError",
    "ConfigurationError",
    "CountryNotFoundError",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticFormatter",
    "DuplicateKeyError",
    "InvalidLocaleError",
    "LocalizationError",
    "OutputFormat",
]
