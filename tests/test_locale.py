"""Tests for locale identity: parse_locale() and Locale metadata."""

from __future__ import annotations

import pytest
from hypothesis import given

from localemap import Direction, InvalidLocaleError, Locale, parse_locale
from localemap.diagnostics import DiagnosticCode
from tests.strategies.locale_map import locale_codes


class TestParseLocale:
    """parse_locale() normalization and validation."""

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("en", Locale("en")),
            ("EN", Locale("en")),
            ("en-US", Locale("en", "US")),
            ("en-us", Locale("en", "US")),
            ("EN_us", Locale("en", "US")),
            ("pt-BR", Locale("pt", "BR")),
            ("es-419", Locale("es", "419")),
        ],
    )
    def test_valid_codes_normalize(self, source: str, expected: Locale) -> None:
        """Language is lowercased, region uppercased, '_' accepted."""
        assert parse_locale(source) == expected

    @pytest.mark.parametrize(
        ("alias", "expected"),
        [("br", "pt-BR"), ("us", "en-US"), ("jp", "ja-JP"), ("BR", "pt-BR")],
    )
    def test_country_shorthands_expand(self, alias: str, expected: str) -> None:
        """Region-less country shorthands expand to a full locale."""
        assert str(parse_locale(alias)) == expected

    def test_empty_code_rejected(self) -> None:
        """Empty string raises with the LOCALE_EMPTY code."""
        with pytest.raises(InvalidLocaleError) as exc_info:
            parse_locale("")
        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code == DiagnosticCode.LOCALE_EMPTY

    @pytest.mark.parametrize(
        "source",
        [
            "en-", "-US", "en--US", "en-US-POSIX", " en", "en ",
            "e", "engl", "e1", "en-U", "en-1234",
        ],
    )
    def test_malformed_codes_rejected(self, source: str) -> None:
        """Bad separators and bad part shapes are rejected."""
        with pytest.raises(InvalidLocaleError) as exc_info:
            parse_locale(source)
        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code == DiagnosticCode.LOCALE_MALFORMED

    def test_unknown_language_rejected(self) -> None:
        """Languages absent from CLDR are rejected."""
        with pytest.raises(InvalidLocaleError, match="unknown language"):
            parse_locale("xq")

    def test_unknown_region_rejected(self) -> None:
        """Regions absent from CLDR are rejected."""
        with pytest.raises(InvalidLocaleError, match="unknown region"):
            parse_locale("en-QQ")

    def test_invalid_locale_error_is_value_error(self) -> None:
        """Callers can catch the built-in ValueError."""
        with pytest.raises(ValueError, match="Invalid locale code"):
            parse_locale("en-")

    @given(code=locale_codes())
    def test_canonical_form_is_stable(self, code: str) -> None:
        """Parsing the canonical tag yields the same locale."""
        locale = parse_locale(code)
        assert parse_locale(locale.tag) == locale
        assert locale.language == locale.language.lower()
        assert locale.region is None or locale.region == locale.region.upper()


class TestLocaleValue:
    """Locale equality, hashing and string forms."""

    def test_structural_equality(self) -> None:
        """Equal parts mean equal locales and equal hashes."""
        assert parse_locale("pt_BR") == parse_locale("pt-br")
        assert hash(parse_locale("pt_BR")) == hash(Locale("pt", "BR"))

    def test_string_forms(self) -> None:
        """tag uses '-', posix uses '_'."""
        locale = parse_locale("pt-BR")
        assert str(locale) == "pt-BR"
        assert locale.tag == "pt-BR"
        assert locale.posix == "pt_BR"
        assert parse_locale("en").posix == "en"

    def test_immutable(self) -> None:
        """Locale is frozen."""
        locale = parse_locale("en")
        with pytest.raises(AttributeError):
            locale.language = "pt"  # type: ignore[misc]


class TestLocaleMetadata:
    """CLDR metadata exposed on Locale."""

    def test_universal_name_is_english(self) -> None:
        """universal_name is the English language name."""
        assert parse_locale("pt-BR").universal_name == "Portuguese"

    def test_native_name(self) -> None:
        """native_name is the language name in the language itself."""
        assert parse_locale("pt-BR").native_name.lower() == "português"

    def test_country_from_region(self) -> None:
        """country() uses the explicit region."""
        country = parse_locale("pt-BR").country()
        assert country is not None
        assert country.alpha2 == "BR"
        assert country.alpha3 == "BRA"

    def test_country_from_likely_subtags(self) -> None:
        """country() falls back to the CLDR likely territory."""
        country = parse_locale("ja").country()
        assert country is not None
        assert country.alpha2 == "JP"

    def test_display_name(self) -> None:
        """display_name combines native name and country name."""
        assert parse_locale("pt-BR").display_name.lower() == "português (brazil)"

    def test_direction(self) -> None:
        """Direction metadata comes from CLDR."""
        assert parse_locale("en").direction is Direction.LEFT_TO_RIGHT
        assert parse_locale("ar").direction is Direction.RIGHT_TO_LEFT
        assert parse_locale("he").direction == "rtl"
