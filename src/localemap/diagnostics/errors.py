"""LocaleMap exception hierarchy with structured diagnostics.

All exceptions optionally store a Diagnostic object for rich error
information. Built-in bases (ValueError, LookupError, KeyError) are mixed
in where callers would naturally catch them.

Message lookups never raise: a missing message renders a visible
placeholder instead. These exceptions cover parsing, configuration and
asset loading.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic


class LocalizationError(Exception):
    """Base exception for all LocaleMap errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize LocalizationError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.message)
        else:
            self.diagnostic = None
            super().__init__(message)


class InvalidLocaleError(LocalizationError, ValueError):
    """Malformed or unknown locale code.

    Raised by parse_locale() for empty input, bad separators, or a
    language/region absent from CLDR.
    """


class CountryNotFoundError(LocalizationError, LookupError):
    """Country code not present in the ISO 3166-1 table."""


class ConfigurationError(LocalizationError, ValueError):
    """Invalid LocaleMap configuration.

    Examples:
    - default locale not in the supported set
    - fallback map naming an unsupported locale
    - unknown option key in a configuration mapping
    """


class AssetError(LocalizationError):
    """Base class for failures fetching or decoding a locale asset.

    Attributes:
        locale_code: Locale path segment of the asset
        base_file_name: Base file name of the asset
    """

    def __init__(
        self,
        message: str | Diagnostic,
        *,
        locale_code: str = "",
        base_file_name: str = "",
    ) -> None:
        super().__init__(message)
        self.locale_code = locale_code
        self.base_file_name = base_file_name


class AssetNotFoundError(AssetError):
    """Asset does not exist (missing file, HTTP 404).

    Expected for partially translated fallback locales; absorbed when the
    locale is not required by the load.
    """


class AssetTransportError(AssetError):
    """Asset exists but could not be retrieved (I/O error, HTTP failure)."""


class AssetFormatError(AssetTransportError):
    """Asset was retrieved but is not a JSON object of string templates."""


class DuplicateKeyError(LocalizationError, KeyError):
    """Two base files of one locale produce the same message key.

    Attributes:
        key: The colliding flat key
        locale_code: Locale whose dictionaries collide
    """

    def __init__(self, message: str | Diagnostic, *, key: str, locale_code: str = "") -> None:
        super().__init__(message)
        self.key = key
        self.locale_code = locale_code

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0]) if self.args else ""
