"""Tests for diagnostics: codes, exception hierarchy and formatting."""

from __future__ import annotations

import json

import pytest
from hypothesis import given
from hypothesis import strategies as st

from localemap.diagnostics import (
    AssetError,
    AssetFormatError,
    AssetNotFoundError,
    AssetTransportError,
    ConfigurationError,
    CountryNotFoundError,
    Diagnostic,
    DiagnosticCode,
    DiagnosticFormatter,
    DuplicateKeyError,
    InvalidLocaleError,
    LocalizationError,
    OutputFormat,
)

NOT_FOUND = Diagnostic(
    code=DiagnosticCode.ASSET_NOT_FOUND,
    message="Asset not found: res/lang/pt-BR/common.json",
    hint="Create the file or remove the base file name",
    locale_code="pt-BR",
    source_path="res/lang/pt-BR/common.json",
)


class TestDiagnosticCode:
    """Code numbering by category."""

    def test_codes_unique(self) -> None:
        """No two codes share a number."""
        values = [code.value for code in DiagnosticCode]
        assert len(values) == len(set(values))

    @pytest.mark.parametrize(
        ("prefix", "low", "high"),
        [
            ("LOCALE_", 1000, 1999),
            ("ASSET_", 3000, 3999),
        ],
    )
    def test_ranges(self, prefix: str, low: int, high: int) -> None:
        """Codes of one category stay in its range."""
        for code in DiagnosticCode:
            if code.name.startswith(prefix):
                assert low <= code.value <= high


class TestExceptionHierarchy:
    """Built-in bases allow natural except clauses."""

    @pytest.mark.parametrize(
        ("error_type", "builtin"),
        [
            (InvalidLocaleError, ValueError),
            (ConfigurationError, ValueError),
            (CountryNotFoundError, LookupError),
            (DuplicateKeyError, KeyError),
        ],
    )
    def test_builtin_bases(self, error_type: type[Exception], builtin: type[Exception]) -> None:
        """Each error is catchable by its built-in base."""
        assert issubclass(error_type, builtin)
        assert issubclass(error_type, LocalizationError)

    def test_asset_errors(self) -> None:
        """Asset errors share one base and carry their asset."""
        error = AssetNotFoundError("missing", locale_code="pt-BR", base_file_name="common")
        assert isinstance(error, AssetError)
        assert error.locale_code == "pt-BR"
        assert error.base_file_name == "common"
        assert error.diagnostic is None
        assert issubclass(AssetFormatError, AssetTransportError)
        assert not issubclass(AssetNotFoundError, AssetTransportError)

    def test_diagnostic_message(self) -> None:
        """A Diagnostic becomes the exception message."""
        error = AssetNotFoundError(NOT_FOUND)
        assert str(error) == NOT_FOUND.message
        assert error.diagnostic is NOT_FOUND


class TestDiagnosticFormatter:
    """Output formats."""

    def test_rust_format(self) -> None:
        """Rust style lists location, locale and help."""
        assert NOT_FOUND.format_error() == (
            "error[ASSET_NOT_FOUND]: Asset not found: res/lang/pt-BR/common.json\n"
            "  --> res/lang/pt-BR/common.json\n"
            "  = locale: pt-BR\n"
            "  = help: Create the file or remove the base file name"
        )

    def test_rust_format_minimal(self) -> None:
        """Optional parts are omitted."""
        diagnostic = Diagnostic(code=DiagnosticCode.DUPLICATE_KEY, message="dup")
        assert DiagnosticFormatter().format(diagnostic) == "error[DUPLICATE_KEY]: dup"

    def test_simple_format(self) -> None:
        """Simple style is one line."""
        formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        assert formatter.format(NOT_FOUND) == (
            "ASSET_NOT_FOUND: Asset not found: res/lang/pt-BR/common.json"
        )

    def test_json_format(self) -> None:
        """JSON style carries every populated field."""
        formatter = DiagnosticFormatter(output_format=OutputFormat.JSON)
        data = json.loads(formatter.format(NOT_FOUND))
        assert data == {
            "code": "ASSET_NOT_FOUND",
            "code_value": 3001,
            "message": NOT_FOUND.message,
            "severity": "error",
            "locale_code": "pt-BR",
            "source_path": "res/lang/pt-BR/common.json",
            "hint": NOT_FOUND.hint,
        }

    def test_format_all(self) -> None:
        """Diagnostics are separated by a blank line."""
        formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        other = Diagnostic(code=DiagnosticCode.UNKNOWN_OPTION, message="Unknown option: 'x'")
        assert formatter.format_all([NOT_FOUND, other]).split("\n\n") == [
            formatter.format(NOT_FOUND),
            "UNKNOWN_OPTION: Unknown option: 'x'",
        ]

    @given(st.text(min_size=0, max_size=300))
    def test_sanitize_truncates(self, message: str) -> None:
        """Sanitized output never exceeds the limit plus ellipsis."""
        formatter = DiagnosticFormatter(
            output_format=OutputFormat.SIMPLE, sanitize=True, max_content_length=50
        )
        diagnostic = Diagnostic(code=DiagnosticCode.ASSET_INVALID_JSON, message=message)
        rendered = formatter.format(diagnostic).removeprefix("ASSET_INVALID_JSON: ")
        assert len(rendered) <= 53
        if len(message) <= 50:
            assert rendered == message
