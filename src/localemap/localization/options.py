"""Immutable configuration for LocaleMap.

Two frozen dataclasses replace a mutable builder: AssetOptions describes
where and how locale assets are fetched, LocaleMapOptions adds the locale
set, default locale and fallback map. Both validate in __post_init__ and
never change after construction, so a LocaleMap can share them freely.

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from localemap.constants import DEFAULT_ASSETS_SRC, DEFAULT_HTTP_TIMEOUT
from localemap.core.locale import Locale, parse_locale
from localemap.diagnostics import (
    ConfigurationError,
    Diagnostic,
    DiagnosticCode,
    InvalidLocaleError,
)
from localemap.enums import LoaderType, MissingVariablePolicy
from localemap.localization.types import BaseFileName, LocaleCode

__all__ = ["AssetOptions", "LocaleMapOptions"]


def _config_error(
    code: DiagnosticCode, message: str, hint: str | None = None
) -> ConfigurationError:
    return ConfigurationError(Diagnostic(code=code, message=message, hint=hint))


def _coerce_loader_type(value: LoaderType | str) -> LoaderType:
    if isinstance(value, LoaderType):
        return value
    if isinstance(value, str):
        wanted = value.replace("_", "").replace("-", "").lower()
        for member in LoaderType:
            if member.value.lower() == wanted or member.name.replace("_", "").lower() == wanted:
                return member
    msg = f"Unknown loader_type {value!r}; expected one of {[m.value for m in LoaderType]}"
    raise _config_error(DiagnosticCode.INVALID_OPTION, msg)


def _coerce_policy(value: MissingVariablePolicy | str) -> MissingVariablePolicy:
    try:
        return MissingVariablePolicy(value)
    except ValueError:
        msg = (
            f"Unknown missing_variable policy {value!r}; "
            f"expected one of {[m.value for m in MissingVariablePolicy]}"
        )
        raise _config_error(DiagnosticCode.INVALID_OPTION, msg) from None


def _string_tuple(value: Iterable[str] | str, option: str) -> tuple[str, ...]:
    # A bare string is iterable too; "common" must not become ("c", "o", ...)
    if isinstance(value, str) or not isinstance(value, Iterable):
        msg = f"{option} must be a sequence of strings, got {type(value).__name__}"
        raise _config_error(DiagnosticCode.INVALID_OPTION, msg)
    items = tuple(value)
    for item in items:
        if not isinstance(item, str) or not item:
            msg = f"{option} entries must be non-empty strings, got {item!r}"
            raise _config_error(DiagnosticCode.INVALID_OPTION, msg)
    return items


@dataclass(frozen=True, slots=True)
class AssetOptions:
    """Where and how locale assets are fetched.

    Assets live at ``{src}/{locale-code}/{base_file_name}.json``.

    Attributes:
        src: Filesystem root or URL prefix (default: 'res/lang')
        base_file_names: Asset groups loaded for every locale, in order
        auto_clean: Evict cached locales outside the current chain after
            each successful load (default: True)
        loader_type: FileSystem or Http transport (default: Http)
        http_timeout: Seconds before an HTTP fetch is abandoned

    Example:
        >>> assets = AssetOptions(
        ...     src="res/lang",
        ...     base_file_names=("common",),
        ...     loader_type=LoaderType.FILE_SYSTEM,
        ... )
    """

    src: str = DEFAULT_ASSETS_SRC
    base_file_names: tuple[BaseFileName, ...] = ()
    auto_clean: bool = True
    loader_type: LoaderType = LoaderType.HTTP
    http_timeout: float = DEFAULT_HTTP_TIMEOUT

    def __post_init__(self) -> None:
        """Normalize and validate asset options.

        Raises:
            ConfigurationError: If any option has an invalid value
        """
        if not isinstance(self.src, str) or not self.src:
            msg = "assets.src must be a non-empty string"
            raise _config_error(DiagnosticCode.INVALID_OPTION, msg)

        names = _string_tuple(self.base_file_names, "assets.base_file_names")
        if len(set(names)) != len(names):
            msg = f"assets.base_file_names contains duplicates: {names}"
            raise _config_error(DiagnosticCode.INVALID_OPTION, msg)
        object.__setattr__(self, "base_file_names", names)
        object.__setattr__(self, "loader_type", _coerce_loader_type(self.loader_type))

        if self.http_timeout <= 0:
            msg = "assets.http_timeout must be positive"
            raise _config_error(DiagnosticCode.INVALID_OPTION, msg)


@dataclass(frozen=True, slots=True)
class LocaleMapOptions:
    """Immutable configuration snapshot for a LocaleMap.

    Locale codes are kept exactly as supplied: the supplied string is the
    asset path segment ('en-US' maps to '{src}/en-US/...'). Parsed views
    (``supported``, ``default``, ``fallback_map``) are computed once.

    Attributes:
        supported_locales: Locale codes the application ships assets for
        default_locale: Last resort of every fallback chain; must be supported
        fallbacks: Locale code -> ordered fallback locale codes
        assets: Asset location and transport options
        missing_variable: Rendering of $name tokens with no value

    Example:
        >>> options = LocaleMapOptions(
        ...     supported_locales=("en", "en-US", "pt-BR"),
        ...     default_locale="en",
        ...     fallbacks={"en-US": ["en"], "pt-BR": ["en-US"]},
        ...     assets=AssetOptions(src="res/lang", base_file_names=("common",)),
        ... )
    """

    supported_locales: tuple[LocaleCode, ...] = ("en",)
    default_locale: LocaleCode = "en"
    fallbacks: Mapping[LocaleCode, tuple[LocaleCode, ...]] = field(default_factory=dict)
    assets: AssetOptions = field(default_factory=AssetOptions)
    missing_variable: MissingVariablePolicy = MissingVariablePolicy.LITERAL
    _locale_codes: Mapping[Locale, LocaleCode] = field(init=False, repr=False, compare=False)
    _default: Locale = field(init=False, repr=False, compare=False)
    _fallback_map: Mapping[Locale, tuple[Locale, ...]] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        """Parse every locale code and freeze the derived lookup tables.

        Raises:
            ConfigurationError: If a code is invalid, the default locale is
                not supported, or a fallback names an unsupported locale
        """
        codes = _string_tuple(self.supported_locales, "supported_locales")
        if not codes:
            raise _config_error(
                DiagnosticCode.NO_SUPPORTED_LOCALES, "At least one supported locale is required"
            )
        object.__setattr__(self, "supported_locales", codes)

        locale_codes: dict[Locale, LocaleCode] = {}
        for code in codes:
            locale = self._parse(code, "supported_locales")
            if locale in locale_codes:
                msg = (
                    f"supported_locales lists {locale_codes[locale]!r} and {code!r}, "
                    f"which are the same locale"
                )
                raise _config_error(DiagnosticCode.INVALID_OPTION, msg)
            locale_codes[locale] = code
        object.__setattr__(self, "_locale_codes", MappingProxyType(locale_codes))

        default = self._parse(self.default_locale, "default_locale")
        if default not in locale_codes:
            msg = f"Default locale {self.default_locale!r} is not in supported_locales {codes}"
            raise _config_error(
                DiagnosticCode.DEFAULT_LOCALE_UNSUPPORTED,
                msg,
                hint="Add the default locale to supported_locales",
            )
        object.__setattr__(self, "_default", default)

        if not isinstance(self.fallbacks, Mapping):
            msg = f"fallbacks must be a mapping, got {type(self.fallbacks).__name__}"
            raise _config_error(DiagnosticCode.INVALID_OPTION, msg)

        frozen_fallbacks: dict[LocaleCode, tuple[LocaleCode, ...]] = {}
        fallback_map: dict[Locale, tuple[Locale, ...]] = {}
        for source_code, target_codes in self.fallbacks.items():
            source = self._require_supported(source_code, locale_codes)
            targets = _string_tuple(target_codes, f"fallbacks[{source_code!r}]")
            frozen_fallbacks[source_code] = targets
            fallback_map[source] = tuple(
                self._require_supported(code, locale_codes) for code in targets
            )
        object.__setattr__(self, "fallbacks", MappingProxyType(frozen_fallbacks))
        object.__setattr__(self, "_fallback_map", MappingProxyType(fallback_map))
        object.__setattr__(self, "missing_variable", _coerce_policy(self.missing_variable))

        if not isinstance(self.assets, AssetOptions):
            msg = f"assets must be AssetOptions, got {type(self.assets).__name__}"
            raise _config_error(DiagnosticCode.INVALID_OPTION, msg)

    @staticmethod
    def _parse(code: LocaleCode, option: str) -> Locale:
        try:
            return parse_locale(code)
        except InvalidLocaleError as e:
            msg = f"{option}: {e}"
            raise _config_error(DiagnosticCode.INVALID_OPTION, msg) from e

    def _require_supported(
        self, code: LocaleCode, locale_codes: Mapping[Locale, LocaleCode]
    ) -> Locale:
        locale = self._parse(code, "fallbacks")
        if locale not in locale_codes:
            msg = f"Fallback locale {code!r} is not in supported_locales {self.supported_locales}"
            raise _config_error(
                DiagnosticCode.FALLBACK_LOCALE_UNSUPPORTED,
                msg,
                hint="Every fallback source and target must be a supported locale",
            )
        return locale

    @property
    def supported(self) -> frozenset[Locale]:
        """Parsed supported locales."""
        return frozenset(self._locale_codes)

    @property
    def default(self) -> Locale:
        """Parsed default locale."""
        return self._default

    @property
    def fallback_map(self) -> Mapping[Locale, tuple[Locale, ...]]:
        """Parsed fallback map (read-only)."""
        return self._fallback_map

    @property
    def locale_codes(self) -> Mapping[Locale, LocaleCode]:
        """Parsed locale -> code exactly as supplied (asset path segment)."""
        return self._locale_codes

    def code_for(self, locale: Locale) -> LocaleCode:
        """Return the configured code for a supported locale.

        Raises:
            ConfigurationError: If the locale is not supported
        """
        try:
            return self._locale_codes[locale]
        except KeyError:
            msg = f"Locale {locale} is not in supported_locales {self.supported_locales}"
            raise _config_error(DiagnosticCode.FALLBACK_LOCALE_UNSUPPORTED, msg) from None

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> LocaleMapOptions:
        """Build options from a plain configuration mapping.

        Asset options may be nested (``{"assets": {"src": ...}}``) or
        dotted (``{"assets.src": ...}``).

        Args:
            config: Mapping with keys supported_locales, default_locale,
                fallbacks, assets, missing_variable

        Returns:
            Validated LocaleMapOptions

        Raises:
            ConfigurationError: On unknown keys or invalid values

        Example:
            >>> LocaleMapOptions.from_mapping({
            ...     "supported_locales": ["en", "pt-BR"],
            ...     "default_locale": "en",
            ...     "fallbacks": {"pt-BR": ["en"]},
            ...     "assets": {"src": "res/lang", "base_file_names": ["common"],
            ...                "loader_type": "FileSystem"},
            ... })
        """
        top_level = {"supported_locales", "default_locale", "fallbacks", "missing_variable"}
        asset_keys = {"src", "base_file_names", "auto_clean", "loader_type", "http_timeout"}

        kwargs: dict[str, Any] = {}
        asset_kwargs: dict[str, Any] = {}
        for key, value in config.items():
            if key in top_level:
                kwargs[key] = value
            elif key == "assets":
                if not isinstance(value, Mapping):
                    msg = f"assets must be a mapping, got {type(value).__name__}"
                    raise _config_error(DiagnosticCode.INVALID_OPTION, msg)
                for asset_key, asset_value in value.items():
                    if asset_key not in asset_keys:
                        msg = f"Unknown asset option: {asset_key!r}"
                        raise _config_error(DiagnosticCode.UNKNOWN_OPTION, msg)
                    asset_kwargs[asset_key] = asset_value
            elif key.startswith("assets.") and key.removeprefix("assets.") in asset_keys:
                asset_kwargs[key.removeprefix("assets.")] = value
            else:
                msg = f"Unknown option: {key!r}"
                raise _config_error(
                    DiagnosticCode.UNKNOWN_OPTION,
                    msg,
                    hint=f"Known options: {sorted(top_level | {'assets'})}",
                )

        if "supported_locales" in kwargs:
            kwargs["supported_locales"] = _string_tuple(
                kwargs["supported_locales"], "supported_locales"
            )
        return cls(assets=AssetOptions(**asset_kwargs), **kwargs)
