"""Locale identity: parsing, normalization and CLDR metadata.

A Locale is the pair (language, region). It is immutable once parsed and
compares structurally, so it is safe as a dict key in fallback maps and
caches. The canonical string form is ``language`` or ``language-REGION``.

Python 3.13+. External dependency: Babel (CLDR locale data).
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import TYPE_CHECKING

from babel.core import UnknownLocaleError

from localemap.constants import LOCALE_ALIASES
from localemap.diagnostics import Diagnostic, DiagnosticCode, InvalidLocaleError
from localemap.enums import Direction
from localemap.introspection.iso import Country, get_country
from localemap.locale_utils import (
    get_babel_locale,
    get_likely_territory,
    get_territory_names,
    is_known_language,
)

if TYPE_CHECKING:
    from babel import Locale as BabelLocale

__all__ = ["Locale", "parse_locale"]


@dataclass(frozen=True, slots=True)
class Locale:
    """Language code plus optional region code.

    Construct through parse_locale(); the constructor does not validate
    against CLDR.

    Attributes:
        language: Lowercase language code (e.g., 'pt')
        region: Uppercase region code (e.g., 'BR') or None
    """

    language: str
    region: str | None = None

    def __str__(self) -> str:
        return self.tag

    @property
    def tag(self) -> str:
        """Canonical BCP-47 form: 'pt' or 'pt-BR'."""
        if self.region is None:
            return self.language
        return f"{self.language}-{self.region}"

    @property
    def posix(self) -> str:
        """Babel/POSIX form: 'pt' or 'pt_BR'."""
        if self.region is None:
            return self.language
        return f"{self.language}_{self.region}"

    @property
    def babel_locale(self) -> BabelLocale:
        """Closest Babel locale; drops the region when CLDR lacks the pair."""
        try:
            return get_babel_locale(self.posix)
        except (UnknownLocaleError, ValueError):
            return get_babel_locale(self.language)

    @property
    def native_name(self) -> str:
        """Language name in the language itself (e.g., 'português')."""
        babel_locale = get_babel_locale(self.language)
        return babel_locale.get_display_name(babel_locale) or self.language

    @property
    def universal_name(self) -> str:
        """English language name (e.g., 'Portuguese')."""
        return get_babel_locale(self.language).english_name or self.language

    @property
    def direction(self) -> Direction:
        """Script direction of the language."""
        if self.babel_locale.text_direction == "rtl":
            return Direction.RIGHT_TO_LEFT
        return Direction.LEFT_TO_RIGHT

    def country(self) -> Country | None:
        """Country of the region, or the CLDR likely country for the language."""
        territory = self.region or get_likely_territory(self.language)
        if territory is None:
            return None
        return get_country(territory)

    @property
    def display_name(self) -> str:
        """Native language name with country, e.g. 'português (Brazil)'."""
        country = self.country()
        if country is None:
            return self.native_name
        return f"{self.native_name} ({country.name})"


def _invalid(code: DiagnosticCode, source: str, reason: str) -> InvalidLocaleError:
    diagnostic = Diagnostic(
        code=code,
        message=f"Invalid locale code {source!r}: {reason}",
        hint="Use 'language' or 'language-REGION', e.g. 'en' or 'pt-BR'",
    )
    return InvalidLocaleError(diagnostic)


@functools.lru_cache(maxsize=512)
def parse_locale(source: str) -> Locale:
    """Parse and normalize a locale code.

    Accepts ``language`` or ``language-REGION`` (``_`` also accepted as
    separator), case-insensitive. The language must be known to CLDR; the
    region must be a CLDR territory (two letters or three digits).

    Region-less country shorthands are expanded: 'br' -> pt-BR,
    'us' -> en-US, 'jp' -> ja-JP.

    Args:
        source: Locale code to parse

    Returns:
        Normalized Locale

    Raises:
        InvalidLocaleError: If the code is empty, malformed or unknown

    Example:
        >>> parse_locale("PT_br")
        Locale(language='pt', region='BR')
        >>> str(parse_locale("en-us"))
        'en-US'
    """
    if not isinstance(source, str) or not source:
        raise _invalid(DiagnosticCode.LOCALE_EMPTY, str(source), "empty locale code")

    if source.strip() != source:
        raise _invalid(
            DiagnosticCode.LOCALE_MALFORMED, source, "leading or trailing whitespace"
        )

    normalized = source.replace("_", "-")
    parts = normalized.split("-")

    if len(parts) > 2 or any(not part for part in parts):
        raise _invalid(DiagnosticCode.LOCALE_MALFORMED, source, "malformed separators")

    language = parts[0].lower()
    region = parts[1] if len(parts) == 2 else None

    if region is None and language in LOCALE_ALIASES:
        language, region = LOCALE_ALIASES[language]

    if not (2 <= len(language) <= 3 and language.isascii() and language.isalpha()):
        raise _invalid(
            DiagnosticCode.LOCALE_MALFORMED, source, "language must be 2-3 ASCII letters"
        )

    if region is not None:
        region = region.upper()
        is_alpha = len(region) == 2 and region.isascii() and region.isalpha()
        is_numeric = len(region) == 3 and region.isascii() and region.isdigit()
        if not (is_alpha or is_numeric):
            raise _invalid(
                DiagnosticCode.LOCALE_MALFORMED,
                source,
                "region must be 2 letters or 3 digits",
            )

    if not is_known_language(language):
        raise _invalid(
            DiagnosticCode.LOCALE_UNKNOWN_LANGUAGE, source, f"unknown language {language!r}"
        )

    if region is not None and region not in get_territory_names("en"):
        raise _invalid(
            DiagnosticCode.LOCALE_UNKNOWN_REGION, source, f"unknown region {region!r}"
        )

    return Locale(language=language, region=region)
