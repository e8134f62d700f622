"""Locale cache with coalesced asynchronous loads.

Holds, per locale, the merged dictionary of all its base files and its load
state, plus the layered fallback view per requested locale.

Architecture:
    - One asyncio.Task per locale in flight; concurrent requests for the
      same locale await the same task (at most one fetch per
      (locale, base file) in flight)
    - One asyncio.Task per requested locale while its chain is layered;
      concurrent callers receive the same view object
    - Entries are immutable snapshots; every transition replaces the entry
    - Published dictionaries are MappingProxyType views, never mutated

State machine per entry:
    NOT_LOADED -> LOADING -> LOADED | FAILED
    LOADED -> LOADING (reload), FAILED -> LOADING (retry)
    LOADING -> NOT_LOADED (cancelled)

Concurrency:
    Designed for a single event loop. Readers never suspend; a reader sees
    either the previous view or the complete new one.

Python 3.13+.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from functools import partial
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from localemap.constants import MAX_LOAD_RESULTS
from localemap.diagnostics import (
    AssetError,
    AssetNotFoundError,
    ConfigurationError,
    Diagnostic,
    DiagnosticCode,
)
from localemap.enums import LoadState, LoadStatus
from localemap.localization.loading import LoadSummary, ResourceLoadResult
from localemap.localization.merging import layer, merge_locale

if TYPE_CHECKING:
    from localemap.core.locale import Locale
    from localemap.localization.loading import AssetSource
    from localemap.localization.types import (
        BaseFileName,
        LocaleCode,
        MergedDictionary,
        RawDictionary,
    )

__all__ = ["CacheEntry", "LocaleCache"]

logger = logging.getLogger(__name__)

_EMPTY: MergedDictionary = MappingProxyType({})


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """Snapshot of one locale's cache state.

    Attributes:
        locale: Locale of the entry
        state: Current load state
        dictionary: Merged dictionary of all base files (LOADED, or the
            previous dictionary while a reload is LOADING)
        error: Failure of the last attempt (FAILED only)
    """

    locale: Locale
    state: LoadState
    dictionary: MergedDictionary | None = None
    error: BaseException | None = None


class LocaleCache:
    """Per-instance table of locale dictionaries and their load state.

    Example:
        >>> cache = LocaleCache(source, {parse_locale("en"): "en"}, ("common",))
        >>> view = await cache.load_chain((parse_locale("en"),))
        >>> view["common.message_id"]
        'Some message'
    """

    __slots__ = (
        "_base_file_names",
        "_chain_tasks",
        "_coalesced",
        "_entries",
        "_evictions",
        "_fetches",
        "_hits",
        "_locale_codes",
        "_results",
        "_source",
        "_tasks",
        "_views",
        "_waiters",
    )

    def __init__(
        self,
        source: AssetSource,
        locale_codes: Mapping[Locale, LocaleCode],
        base_file_names: Iterable[BaseFileName],
    ) -> None:
        """Initialize the cache.

        Args:
            source: Asset source used for every fetch
            locale_codes: Supported locale -> asset path segment
            base_file_names: Base files fetched for every locale, in order
        """
        self._source = source
        self._locale_codes = dict(locale_codes)
        self._base_file_names = tuple(base_file_names)
        self._entries: dict[Locale, CacheEntry] = {}
        self._views: dict[Locale, MergedDictionary] = {}
        self._tasks: dict[Locale, asyncio.Task[MergedDictionary]] = {}
        self._chain_tasks: dict[Locale, asyncio.Task[MergedDictionary]] = {}
        self._waiters: dict[asyncio.Task[MergedDictionary], int] = {}
        self._results: deque[ResourceLoadResult] = deque(maxlen=MAX_LOAD_RESULTS)
        self._fetches = 0
        self._hits = 0
        self._coalesced = 0
        self._evictions = 0

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    def _code_for(self, locale: Locale) -> LocaleCode:
        try:
            return self._locale_codes[locale]
        except KeyError:
            diagnostic = Diagnostic(
                code=DiagnosticCode.FALLBACK_LOCALE_UNSUPPORTED,
                message=f"Locale {locale} has no configured asset location",
            )
            raise ConfigurationError(diagnostic) from None

    async def _fetch_one(
        self, locale_code: LocaleCode, base_file_name: BaseFileName
    ) -> RawDictionary:
        source_path = self._source.describe_path(locale_code, base_file_name)
        self._fetches += 1
        try:
            raw = await self._source.fetch(locale_code, base_file_name)
        except AssetNotFoundError as e:
            self._results.append(
                ResourceLoadResult(
                    locale_code, base_file_name, LoadStatus.NOT_FOUND, e, source_path
                )
            )
            raise
        except AssetError as e:
            self._results.append(
                ResourceLoadResult(locale_code, base_file_name, LoadStatus.ERROR, e, source_path)
            )
            raise
        self._results.append(
            ResourceLoadResult(
                locale_code,
                base_file_name,
                LoadStatus.SUCCESS,
                source_path=source_path,
                key_count=len(raw),
            )
        )
        return raw

    async def _fetch_locale(self, locale: Locale, locale_code: LocaleCode) -> MergedDictionary:
        """Fetch every base file of one locale and publish the merged entry."""
        current = asyncio.current_task()
        try:
            outcomes = await asyncio.gather(
                *(self._fetch_one(locale_code, name) for name in self._base_file_names),
                return_exceptions=True,
            )
            raw: dict[BaseFileName, RawDictionary] = {}
            for name, outcome in zip(self._base_file_names, outcomes, strict=True):
                if isinstance(outcome, BaseException):
                    raise outcome
                raw[name] = outcome
            dictionary: MergedDictionary = MappingProxyType(merge_locale(locale_code, raw))
        except asyncio.CancelledError:
            if self._tasks.get(locale) is current:
                self._entries[locale] = CacheEntry(locale, LoadState.NOT_LOADED)
            logger.info("Load of locale %s cancelled", locale_code)
            raise
        except Exception as e:
            if self._tasks.get(locale) is current:
                self._entries[locale] = CacheEntry(locale, LoadState.FAILED, error=e)
            raise
        finally:
            if self._tasks.get(locale) is current:
                del self._tasks[locale]

        self._entries[locale] = CacheEntry(locale, LoadState.LOADED, dictionary)
        logger.debug("Locale %s loaded (%d keys)", locale_code, len(dictionary))
        return dictionary

    def _fetch_done(self, locale: Locale, task: asyncio.Task[MergedDictionary]) -> None:
        # Still registered only when cancelled before its first step
        if self._tasks.get(locale) is not task:
            return
        del self._tasks[locale]
        if task.cancelled():
            self._entries[locale] = CacheEntry(locale, LoadState.NOT_LOADED)
            logger.info("Load of locale %s cancelled before it started", locale)

    def _chain_done(self, requested: Locale, task: asyncio.Task[MergedDictionary]) -> None:
        if self._chain_tasks.get(requested) is task:
            del self._chain_tasks[requested]

    @staticmethod
    def _joinable(task: asyncio.Task[MergedDictionary]) -> bool:
        return not task.done() and not task.cancelling()

    async def _await_shared(self, task: asyncio.Task[MergedDictionary]) -> MergedDictionary:
        """Await a shared task; cancel it when its last waiter goes away."""
        self._waiters[task] = self._waiters.get(task, 0) + 1
        try:
            return await asyncio.shield(task)
        finally:
            remaining = self._waiters[task] - 1
            if remaining:
                self._waiters[task] = remaining
            else:
                del self._waiters[task]
                if not task.done():
                    task.cancel()

    async def ensure(
        self, locale: Locale, *, required: bool, reload: bool = False
    ) -> MergedDictionary:
        """Return the merged dictionary of one locale, loading it if needed.

        Args:
            locale: Supported locale
            required: Whether an asset failure propagates; otherwise the
                locale contributes an empty dictionary
            reload: Fetch again even if the entry is LOADED

        Returns:
            Read-only merged dictionary of the locale

        Raises:
            AssetError: Asset failure of a required locale
            DuplicateKeyError: Colliding keys within the locale
            asyncio.CancelledError: The load was cancelled
        """
        task = self._tasks.get(locale)
        if task is not None and not self._joinable(task):
            task = None
        if task is not None:
            self._coalesced += 1
            logger.debug("Joining in-flight load of %s", locale)
        else:
            entry = self._entries.get(locale)
            if (
                entry is not None
                and entry.state is LoadState.LOADED
                and entry.dictionary is not None
                and not reload
            ):
                self._hits += 1
                return entry.dictionary
            locale_code = self._code_for(locale)
            task = asyncio.create_task(
                self._fetch_locale(locale, locale_code), name=f"localemap-load-{locale_code}"
            )
            self._tasks[locale] = task
            task.add_done_callback(partial(self._fetch_done, locale))
            previous = entry.dictionary if entry is not None else None
            self._entries[locale] = CacheEntry(locale, LoadState.LOADING, previous)

        try:
            return await self._await_shared(task)
        except AssetError as e:
            if required:
                raise
            logger.warning(
                "Fallback locale %s unavailable, using no messages from it: %s", locale, e
            )
            return _EMPTY

    async def _build_view(self, chain: tuple[Locale, ...], reload: bool) -> MergedDictionary:
        requested = chain[0]
        required = {requested, chain[-1]}
        try:
            dictionaries = await asyncio.gather(
                *(self.ensure(loc, required=loc in required, reload=reload) for loc in chain)
            )
            view = layer(dictionaries)
        finally:
            if self._chain_tasks.get(requested) is asyncio.current_task():
                del self._chain_tasks[requested]
        self._views[requested] = view
        logger.info(
            "Loaded locale %s (chain: %s, %d keys)",
            requested,
            " -> ".join(str(loc) for loc in chain),
            len(view),
        )
        return view

    async def load_chain(
        self, chain: tuple[Locale, ...], *, reload: bool = False
    ) -> MergedDictionary:
        """Load every locale of a fallback chain and layer them.

        The first locale of the chain (the requested one) and the last (the
        default) are required. Concurrent calls for the same requested
        locale share one task and receive the same view object.

        Args:
            chain: Fallback chain, most specific first, ending with the default
            reload: Fetch every member again

        Returns:
            Read-only layered view, also stored as view(chain[0])

        Raises:
            AssetError: Asset failure of a required locale
            DuplicateKeyError: Colliding keys within one locale
            asyncio.CancelledError: The load was cancelled
        """
        if not chain:
            msg = "Fallback chain must contain at least one locale"
            raise ValueError(msg)
        requested = chain[0]
        task = self._chain_tasks.get(requested)
        if task is None or not self._joinable(task):
            task = asyncio.create_task(
                self._build_view(chain, reload), name=f"localemap-chain-{requested}"
            )
            self._chain_tasks[requested] = task
            task.add_done_callback(partial(self._chain_done, requested))
        else:
            self._coalesced += 1
            logger.debug("Joining in-flight chain load of %s", requested)
        return await self._await_shared(task)

    def cancel(self, locale: Locale) -> bool:
        """Cancel in-flight loads for a locale.

        Cancels both the chain layered for the locale and the fetch of the
        locale itself. Waiters receive asyncio.CancelledError; the entry
        reverts to NOT_LOADED.

        Returns:
            True if anything was in flight
        """
        cancelled = False
        for tasks in (self._chain_tasks, self._tasks):
            task = tasks.get(locale)
            if task is not None and not task.done():
                task.cancel()
                cancelled = True
        return cancelled

    # ------------------------------------------------------------------
    # Eviction
    # ------------------------------------------------------------------

    def auto_clean(
        self, supported: Iterable[Locale], keep: Iterable[Locale] | None = None
    ) -> tuple[Locale, ...]:
        """Evict entries and views no longer needed.

        Removes locales outside ``supported``; when ``keep`` is given, also
        removes supported locales not in ``keep``. In-flight loads are never
        evicted.

        Args:
            supported: Locales that may stay cached
            keep: Locales to retain (None retains every supported locale)

        Returns:
            Locales whose entry or view was evicted
        """
        allowed = set(supported)
        if keep is not None:
            allowed &= set(keep)

        evicted: set[Locale] = set()
        for locale in list(self._entries):
            if locale not in allowed and locale not in self._tasks:
                del self._entries[locale]
                evicted.add(locale)
        for locale in list(self._views):
            if locale not in allowed and locale not in self._chain_tasks:
                del self._views[locale]
                evicted.add(locale)

        if evicted:
            self._evictions += len(evicted)
            logger.info("Evicted locales: %s", ", ".join(sorted(str(loc) for loc in evicted)))
        return tuple(evicted)

    def clear(self) -> None:
        """Cancel in-flight loads and drop every entry, view and statistic."""
        for task in (*self._chain_tasks.values(), *self._tasks.values()):
            task.cancel()
        self._chain_tasks.clear()
        self._tasks.clear()
        self._entries.clear()
        self._views.clear()
        self._results.clear()
        self._fetches = 0
        self._hits = 0
        self._coalesced = 0
        self._evictions = 0

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def state(self, locale: Locale) -> LoadState:
        """Load state of a locale (NOT_LOADED when absent)."""
        entry = self._entries.get(locale)
        return entry.state if entry is not None else LoadState.NOT_LOADED

    def entry(self, locale: Locale) -> CacheEntry | None:
        """Current entry snapshot of a locale."""
        return self._entries.get(locale)

    def view(self, locale: Locale) -> MergedDictionary | None:
        """Layered view of a requested locale, if loaded."""
        return self._views.get(locale)

    def locales(self) -> tuple[Locale, ...]:
        """Locales that currently have an entry."""
        return tuple(self._entries)

    def is_loading(self, locale: Locale) -> bool:
        """Check whether a fetch or chain load for the locale is in flight."""
        return locale in self._tasks or locale in self._chain_tasks

    def load_summary(self) -> LoadSummary:
        """Summary of recent fetch attempts (oldest dropped first)."""
        return LoadSummary(tuple(self._results))

    def get_stats(self) -> dict[str, int]:
        """Get cache statistics.

        Returns:
            Dict with keys:
            - entries (int): Locales with an entry
            - loaded (int): Entries in LOADED state
            - views (int): Layered views of requested locales
            - in_flight (int): Fetch tasks currently running
            - fetches (int): Asset fetches issued
            - hits (int): Loads served from a LOADED entry
            - coalesced (int): Loads that joined an in-flight task
            - evictions (int): Entries and views removed by auto_clean
        """
        return {
            "entries": len(self._entries),
            "loaded": sum(1 for e in self._entries.values() if e.state is LoadState.LOADED),
            "views": len(self._views),
            "in_flight": len(self._tasks),
            "fetches": self._fetches,
            "hits": self._hits,
            "coalesced": self._coalesced,
            "evictions": self._evictions,
        }
