"""Multi-locale localization package for LocaleMap.

Provides the full localization stack: configuration, fallback chains,
asset loading, dictionary merging, the locale cache and the orchestrator.

Submodules:
    types        - PEP 695 type aliases (MessageKey, LocaleCode, BaseFileName, ...)
    options      - AssetOptions, LocaleMapOptions (frozen configuration)
    fallback     - resolve_chain (ordered fallback chains)
    loading      - AssetSource protocol, FileSystemAssetSource, HttpAssetSource,
                   ResourceLoadResult, LoadSummary
    merging      - merge_locale, layer
    cache        - LocaleCache, CacheEntry
    orchestrator - LocaleMap (multi-locale orchestration)

Python 3.13+. External dependency: httpx (HTTP asset source).
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability

from localemap.enums import LoaderType, LoadState, LoadStatus
from localemap.localization.cache import CacheEntry, LocaleCache
from localemap.localization.fallback import resolve_chain
from localemap.localization.loading import (
    AssetSource,
    FileSystemAssetSource,
    HttpAssetSource,
    LoadSummary,
    ResourceLoadResult,
    create_asset_source,
    parse_asset,
)
from localemap.localization.merging import key_prefix, layer, merge_locale
from localemap.localization.options import AssetOptions, LocaleMapOptions
from localemap.localization.orchestrator import LocaleMap
from localemap.localization.types import (
    BaseFileName,
    LocaleCode,
    MergedDictionary,
    MessageKey,
    RawDictionary,
    Template,
)

__all__ = [
    # Main orchestrator
    "LocaleMap",
    # Configuration
    "AssetOptions",
    "LocaleMapOptions",
    "LoaderType",
    # Fallback chains
    "resolve_chain",
    # Asset sources
    "AssetSource",
    "FileSystemAssetSource",
    "HttpAssetSource",
    "create_asset_source",
    "parse_asset",
    # Merging
    "key_prefix",
    "layer",
    "merge_locale",
    # Cache
    "CacheEntry",
    "LocaleCache",
    "LoadState",
    # Load tracking
    "LoadStatus",
    "LoadSummary",
    "ResourceLoadResult",
    # Type aliases for user code type annotations
    "BaseFileName",
    "LocaleCode",
    "MergedDictionary",
    "MessageKey",
    "RawDictionary",
    "Template",
]
