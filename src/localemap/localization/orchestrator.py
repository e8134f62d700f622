"""Locale map orchestration: fallback chains, loading and lookups.

LocaleMap ties the pieces together:

- LocaleMapOptions: frozen configuration (locales, fallbacks, assets)
- resolve_chain: ordered fallback chain per requested locale
- LocaleCache: coalesced asynchronous loads and layered views
- resolver: variant selection and placeholder substitution

Loading is asynchronous (the only suspension point is the asset fetch);
lookups are synchronous and run against already layered, read-only views.
A lookup miss never raises: the key is rendered as ``{key}``.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from localemap.core.locale import Locale, parse_locale
from localemap.diagnostics import InvalidLocaleError
from localemap.enums import LoadState
from localemap.localization.cache import LocaleCache
from localemap.localization.fallback import resolve_chain
from localemap.localization.loading import create_asset_source
from localemap.localization.options import LocaleMapOptions
from localemap.runtime.resolver import find_template, resolve

if TYPE_CHECKING:
    import httpx

    from localemap.localization.loading import AssetSource, LoadSummary
    from localemap.localization.types import MergedDictionary, MessageKey
    from localemap.runtime.resolver import Argument

__all__ = ["LocaleMap"]

logger = logging.getLogger(__name__)

_EMPTY: MergedDictionary = MappingProxyType({})


class LocaleMap:
    """Multi-locale message lookup with fallback chains.

    Example - Filesystem assets:
        >>> options = LocaleMapOptions(
        ...     supported_locales=("en", "en-US", "pt-BR"),
        ...     default_locale="en",
        ...     fallbacks={"en-US": ["en"], "pt-BR": ["en-US"]},
        ...     assets=AssetOptions(
        ...         src="res/lang",
        ...         base_file_names=("common",),
        ...         loader_type=LoaderType.FILE_SYSTEM,
        ...     ),
        ... )
        >>> locale_map = LocaleMap(options)
        >>> await locale_map.load("pt-BR")
        >>> locale_map.get("common.message_id")
        'Alguma mensagem'
        >>> locale_map.get_formatted("common.qty", [3])
        '3 itens'
        >>> locale_map.get_formatted("common.contextual", [Gender.FEMALE])
        'Ela'

    Per-request lookups in a server: load each locale once, then pass
    ``locale=`` to get()/get_formatted(). Disable ``assets.auto_clean`` so
    loading one locale does not evict the others.
    """

    __slots__ = ("_cache", "_current", "_options")

    def __init__(
        self,
        options: LocaleMapOptions | None = None,
        *,
        source: AssetSource | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the locale map.

        Nothing is fetched until load() is awaited.

        Args:
            options: Configuration (default: LocaleMapOptions())
            source: Custom asset source; overrides assets.loader_type
            http_client: Shared httpx client for the HTTP asset source
        """
        self._options = options if options is not None else LocaleMapOptions()
        if source is None:
            source = create_asset_source(self._options.assets, client=http_client)
        self._cache = LocaleCache(
            source, self._options.locale_codes, self._options.assets.base_file_names
        )
        self._current: Locale | None = None

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any], **kwargs: Any) -> LocaleMap:
        """Create a LocaleMap from a plain configuration mapping.

        See LocaleMapOptions.from_mapping() for the recognized keys.
        """
        return cls(LocaleMapOptions.from_mapping(config), **kwargs)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def options(self) -> LocaleMapOptions:
        """Immutable configuration snapshot."""
        return self._options

    @property
    def supported_locales(self) -> tuple[Locale, ...]:
        """Supported locales in configured order."""
        return tuple(self._options.locale_codes)

    @property
    def default_locale(self) -> Locale:
        """Default locale, last member of every fallback chain."""
        return self._options.default

    @property
    def current_locale(self) -> Locale | None:
        """Locale of the last successful load(), None before the first."""
        return self._current

    def supports_locale(self, locale: Locale | str) -> bool:
        """Check whether a locale is supported; invalid codes are not."""
        try:
            return self._coerce(locale) in self._options.supported
        except InvalidLocaleError:
            return False

    def fallback_chain(self, locale: Locale | str | None = None) -> tuple[Locale, ...]:
        """Fallback chain of a locale (default: current, else default locale)."""
        return resolve_chain(self._target(locale), self._options)

    @staticmethod
    def _coerce(locale: Locale | str) -> Locale:
        return locale if isinstance(locale, Locale) else parse_locale(locale)

    def _target(self, locale: Locale | str | None) -> Locale:
        if locale is not None:
            return self._coerce(locale)
        if self._current is not None:
            return self._current
        return self._options.default

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(
        self, locale: Locale | str | None = None, *, reload: bool = False
    ) -> MergedDictionary:
        """Load a locale and its fallback chain, then make it current.

        An unsupported locale falls through to the default locale. When
        ``assets.auto_clean`` is set, cached locales outside the new chain
        are evicted afterwards.

        Args:
            locale: Locale to load (default: current, else default locale)
            reload: Fetch every chain member again

        Returns:
            Layered read-only view of the loaded locale

        Raises:
            InvalidLocaleError: If the locale code is malformed
            AssetError: Asset failure of the requested or default locale
            DuplicateKeyError: Colliding keys within one locale
            asyncio.CancelledError: The load was cancelled
        """
        requested = self._target(locale)
        if requested not in self._options.supported:
            logger.warning(
                "Locale %s is not supported, using default %s", requested, self.default_locale
            )
        chain = resolve_chain(requested, self._options)
        view = await self._cache.load_chain(chain, reload=reload)
        self._current = chain[0]
        if self._options.assets.auto_clean:
            self._cache.auto_clean(self._options.supported, keep=chain)
        return view

    async def update_locale(self, locale: Locale | str) -> MergedDictionary:
        """Switch the current locale, loading it if needed."""
        return await self.load(locale)

    async def reload(self, locale: Locale | str | None = None) -> MergedDictionary:
        """Fetch a locale's chain again and replace its cached view."""
        return await self.load(locale, reload=True)

    def cancel_load(self, locale: Locale | str) -> bool:
        """Cancel in-flight loads of a locale.

        Returns:
            True if a load was in flight
        """
        return self._cache.cancel(self._coerce(locale))

    def auto_clean(self) -> tuple[Locale, ...]:
        """Evict cached locales outside the current chain.

        Returns:
            Evicted locales
        """
        keep = None if self._current is None else resolve_chain(self._current, self._options)
        return self._cache.auto_clean(self._options.supported, keep=keep)

    def load_state(self, locale: Locale | str) -> LoadState:
        """Cache state of one locale's own dictionary."""
        return self._cache.state(self._coerce(locale))

    def is_loaded(self, locale: Locale | str | None = None) -> bool:
        """Check whether a layered view is available for a locale."""
        return self._view(locale) is not None

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def _view(self, locale: Locale | str | None) -> MergedDictionary | None:
        target = self._target(locale)
        if target not in self._options.supported:
            target = self._options.default
        return self._cache.view(target)

    def _view_or_empty(self, locale: Locale | str | None) -> MergedDictionary:
        view = self._view(locale)
        if view is None:
            logger.debug("Locale %s not loaded, lookups render placeholders", self._target(locale))
            return _EMPTY
        return view

    def get(self, key: MessageKey, *, locale: Locale | str | None = None) -> str:
        """Return the template of a key with placeholders resolved.

        Args:
            key: Dotted key, e.g. 'common.message_id'
            locale: Loaded locale to read (default: current locale)

        Returns:
            Message text, or ``{key}`` when absent from the whole chain
        """
        return self.get_formatted(key, locale=locale)

    def get_formatted(
        self,
        key: MessageKey,
        args: Sequence[Argument] = (),
        *,
        locale: Locale | str | None = None,
    ) -> str:
        """Resolve a key with arguments into the final string.

        Args:
            key: Dotted key, e.g. 'common.qty'
            args: At most one selector (Gender or quantity), plus strings
                and variable mappings
            locale: Loaded locale to read (default: current locale)

        Returns:
            Formatted message, or ``{key}`` when absent from the whole chain

        Raises:
            TypeError: If an argument has an unsupported type
            ValueError: If more than one selector is supplied

        Example:
            >>> locale_map.get_formatted("common.parameterized", [{"x": "foo"}])
            'Value: foo'
        """
        return resolve(
            self._view_or_empty(locale),
            key,
            args,
            missing_variable=self._options.missing_variable,
        )

    def has_message(
        self,
        key: MessageKey,
        args: Sequence[Argument] = (),
        *,
        locale: Locale | str | None = None,
    ) -> bool:
        """Check whether a key (or the variant args select) resolves."""
        return find_template(self._view_or_empty(locale), key, args) is not None

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def get_load_summary(self) -> LoadSummary:
        """Summary of recent asset fetch attempts.

        Example:
            >>> summary = locale_map.get_load_summary()
            >>> if summary.errors:
            ...     for result in summary.get_errors():
            ...         print(f"Failed: {result.source_path}: {result.error}")
        """
        return self._cache.load_summary()

    def get_cache_stats(self) -> dict[str, int]:
        """Cache statistics (see LocaleCache.get_stats())."""
        return self._cache.get_stats()

    def clear_cache(self) -> None:
        """Cancel in-flight loads and drop every cached locale."""
        self._cache.clear()
        self._current = None

    def __repr__(self) -> str:
        """Return string representation for debugging.

        Example:
            >>> repr(locale_map)
            "LocaleMap(current='pt-BR', default='en', loaded=3/3)"
        """
        current = str(self._current) if self._current is not None else None
        loaded = self._cache.get_stats()["loaded"]
        total = len(self._options.supported)
        return (
            f"LocaleMap(current={current!r}, default={str(self.default_locale)!r}, "
            f"loaded={loaded}/{total})"
        )
