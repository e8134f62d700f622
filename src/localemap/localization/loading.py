"""Asset loading infrastructure for LocaleMap.

Provides the protocol for locale asset sources, filesystem and HTTP
implementations, JSON decoding into flat dictionaries, and result/summary
data structures for tracking fetch attempts.

Components:
    AssetSource - Protocol for fetching locale assets (structural typing)
    FileSystemAssetSource - Disk-based source with path-traversal prevention
    HttpAssetSource - httpx-based source for assets served over HTTP
    parse_asset - Decode one JSON asset into a flat key -> template dict
    create_asset_source - Choose a source from AssetOptions.loader_type
    ResourceLoadResult - Immutable result of a single fetch attempt
    LoadSummary - Immutable aggregate of fetch results

Every asset lives at ``{src}/{locale-code}/{base_file_name}.json``.

Python 3.13+. External dependency: httpx (HTTP asset source).
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Protocol
from urllib.parse import quote

import httpx

from localemap.constants import ASSET_FILE_SUFFIX, KEY_SEPARATOR, MAX_ASSET_SIZE
from localemap.diagnostics import (
    AssetError,
    AssetFormatError,
    AssetNotFoundError,
    AssetTransportError,
    Diagnostic,
    DiagnosticCode,
)
from localemap.enums import LoaderType, LoadStatus
from localemap.localization.types import BaseFileName, LocaleCode, RawDictionary

if TYPE_CHECKING:
    from localemap.localization.options import AssetOptions

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Protocol
    "AssetSource",
    # Concrete sources
    "FileSystemAssetSource",
    "HttpAssetSource",
    "create_asset_source",
    # Decoding
    "parse_asset",
    # Load result types
    "ResourceLoadResult",
    "LoadSummary",
]

logger = logging.getLogger(__name__)


class AssetSource(Protocol):
    """Protocol for fetching one locale asset.

    Implementations return the decoded flat dictionary of one
    (locale code, base file name) pair. Fetching must be idempotent and
    free of side effects on failure.

    This is a Protocol (structural typing) rather than ABC to allow
    custom sources (in-memory, database, object storage).

    Example:
        >>> class MemorySource:
        ...     def __init__(self, data):
        ...         self.data = data
        ...     async def fetch(self, locale_code, base_file_name):
        ...         try:
        ...             return dict(self.data[locale_code][base_file_name])
        ...         except KeyError:
        ...             raise AssetNotFoundError("missing") from None
        ...     def describe_path(self, locale_code, base_file_name):
        ...         return f"memory:{locale_code}/{base_file_name}"
    """

    async def fetch(self, locale_code: LocaleCode, base_file_name: BaseFileName) -> RawDictionary:
        """Fetch and decode one asset.

        Args:
            locale_code: Locale path segment, exactly as configured
            base_file_name: Base file name without the .json suffix

        Returns:
            Flat key -> template dictionary, keys relative to the file

        Raises:
            AssetNotFoundError: If the asset does not exist
            AssetTransportError: If the asset exists but cannot be retrieved
                or decoded
        """
        ...

    def describe_path(self, locale_code: LocaleCode, base_file_name: BaseFileName) -> str:
        """Return a human-readable asset location for diagnostics."""
        ...


# ============================================================================
# DECODING
# ============================================================================


def _asset_error[E: AssetError](
    error_type: type[E],
    code: DiagnosticCode,
    message: str,
    *,
    locale_code: LocaleCode,
    base_file_name: BaseFileName,
    source_path: str,
    hint: str | None = None,
) -> E:
    diagnostic = Diagnostic(
        code=code,
        message=message,
        hint=hint,
        locale_code=locale_code or None,
        source_path=source_path or None,
    )
    return error_type(diagnostic, locale_code=locale_code, base_file_name=base_file_name)


def _flatten(node: Mapping[str, object], prefix: str, out: RawDictionary) -> list[str]:
    """Flatten nested objects into dotted keys; return offending paths."""
    problems: list[str] = []
    for key, value in node.items():
        if not key or KEY_SEPARATOR in key:
            problems.append(f"{prefix}{key!r}: keys must be non-empty and contain no '.'")
            continue
        flat_key = f"{prefix}{key}"
        match value:
            case str():
                out[flat_key] = value
            case Mapping():
                problems.extend(_flatten(value, flat_key + KEY_SEPARATOR, out))
            case _:
                problems.append(f"{flat_key}: expected string, got {type(value).__name__}")
    return problems


def parse_asset(
    text: str,
    source_path: str = "",
    *,
    locale_code: LocaleCode = "",
    base_file_name: BaseFileName = "",
) -> RawDictionary:
    """Decode one JSON asset into a flat key -> template dictionary.

    Nested objects are flattened to dotted keys::

        {"greeting": {"formal": "Good day"}}  ->  {"greeting.formal": "Good day"}

    Args:
        text: JSON document
        source_path: Asset location used in error messages
        locale_code: Locale of the asset (error context)
        base_file_name: Base file name of the asset (error context)

    Returns:
        Flat dictionary; keys are relative to the asset (no base prefix)

    Raises:
        AssetFormatError: If the text is not a JSON object whose leaves are
            all strings
    """
    context = {
        "locale_code": locale_code,
        "base_file_name": base_file_name,
        "source_path": source_path,
    }
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        msg = (
            f"Invalid JSON in {source_path or 'asset'}: {e.msg} "
            f"(line {e.lineno}, column {e.colno})"
        )
        raise _asset_error(
            AssetFormatError, DiagnosticCode.ASSET_INVALID_JSON, msg, **context
        ) from e

    if not isinstance(document, dict):
        msg = f"Asset {source_path or ''} must be a JSON object, got {type(document).__name__}"
        raise _asset_error(
            AssetFormatError, DiagnosticCode.ASSET_INVALID_STRUCTURE, msg, **context
        )

    flat: RawDictionary = {}
    problems = _flatten(document, "", flat)
    if problems:
        msg = f"Asset {source_path or ''} has invalid entries: " + "; ".join(problems)
        raise _asset_error(
            AssetFormatError,
            DiagnosticCode.ASSET_INVALID_STRUCTURE,
            msg,
            hint="Values must be strings or objects of strings",
            **context,
        )
    return flat


# ============================================================================
# PATH VALIDATION
# ============================================================================


def _validate_segments(locale_code: LocaleCode, base_file_name: BaseFileName) -> None:
    """Reject locale codes and base names that could escape the asset root.

    Raises:
        ValueError: If either component is unsafe
    """
    if not locale_code:
        msg = "Locale code cannot be empty"
        raise ValueError(msg)
    if ".." in locale_code or "/" in locale_code or "\\" in locale_code:
        msg = f"Path separators and traversal not allowed in locale code: {locale_code!r}"
        raise ValueError(msg)

    if not base_file_name or base_file_name.strip() != base_file_name:
        msg = f"Base file name is empty or has surrounding whitespace: {base_file_name!r}"
        raise ValueError(msg)
    if base_file_name.startswith("/") or "\\" in base_file_name:
        msg = f"Absolute paths and backslashes not allowed in base file name: {base_file_name!r}"
        raise ValueError(msg)
    if any(part in ("", ".", "..") for part in base_file_name.split("/")):
        msg = f"Empty or relative segments not allowed in base file name: {base_file_name!r}"
        raise ValueError(msg)


# ============================================================================
# FILESYSTEM
# ============================================================================


@dataclass(frozen=True, slots=True)
class FileSystemAssetSource:
    """Filesystem asset source.

    Reads ``{src}/{locale-code}/{base_file_name}.json`` as UTF-8. Blocking
    file I/O runs in a worker thread via asyncio.to_thread so the event
    loop is never stalled.

    Security:
        Locale codes and base file names containing traversal sequences
        are rejected, and every resolved path is checked against the
        resolved root directory.

    Example:
        >>> source = FileSystemAssetSource("res/lang")
        >>> await source.fetch("en-US", "common")
        # Reads: res/lang/en-US/common.json

    Attributes:
        src: Asset root directory
    """

    src: str
    _resolved_root: Path = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_resolved_root", Path(self.src).resolve())

    @staticmethod
    def _is_safe_path(base_dir: Path, full_path: Path) -> bool:
        """Check if full_path is within base_dir after resolution."""
        try:
            full_path.resolve().relative_to(base_dir.resolve())
            return True
        except ValueError:
            return False

    def describe_path(self, locale_code: LocaleCode, base_file_name: BaseFileName) -> str:
        """Return the asset path as configured (not resolved)."""
        return f"{self.src.rstrip('/')}/{locale_code}/{base_file_name}{ASSET_FILE_SUFFIX}"

    def _read(self, locale_code: LocaleCode, base_file_name: BaseFileName) -> str:
        path_desc = self.describe_path(locale_code, base_file_name)
        context = {
            "locale_code": locale_code,
            "base_file_name": base_file_name,
            "source_path": path_desc,
        }
        try:
            _validate_segments(locale_code, base_file_name)
        except ValueError as e:
            raise _asset_error(
                AssetTransportError, DiagnosticCode.ASSET_PATH_REJECTED, str(e), **context
            ) from e

        full_path = self._resolved_root / locale_code / f"{base_file_name}{ASSET_FILE_SUFFIX}"
        if not self._is_safe_path(self._resolved_root, full_path):
            msg = (
                f"Path traversal detected: {path_desc} escapes root directory "
                f"{self._resolved_root}"
            )
            raise _asset_error(
                AssetTransportError, DiagnosticCode.ASSET_PATH_REJECTED, msg, **context
            )

        try:
            size = full_path.stat().st_size
            if size > MAX_ASSET_SIZE:
                msg = f"Asset {path_desc} is {size} bytes, limit is {MAX_ASSET_SIZE}"
                raise _asset_error(
                    AssetTransportError, DiagnosticCode.ASSET_TOO_LARGE, msg, **context
                )
            return full_path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            msg = f"Asset not found: {path_desc}"
            raise _asset_error(
                AssetNotFoundError, DiagnosticCode.ASSET_NOT_FOUND, msg, **context
            ) from e
        except UnicodeDecodeError as e:
            msg = f"Asset {path_desc} is not valid UTF-8: {e.reason}"
            raise _asset_error(
                AssetFormatError, DiagnosticCode.ASSET_INVALID_JSON, msg, **context
            ) from e
        except OSError as e:
            msg = f"Cannot read asset {path_desc}: {e.strerror or e}"
            raise _asset_error(
                AssetTransportError, DiagnosticCode.ASSET_TRANSPORT_FAILED, msg, **context
            ) from e

    async def fetch(self, locale_code: LocaleCode, base_file_name: BaseFileName) -> RawDictionary:
        """Read and decode one asset from disk.

        Raises:
            AssetNotFoundError: If the file does not exist
            AssetTransportError: If the path is rejected or the file
                cannot be read
            AssetFormatError: If the file is not a valid asset
        """
        text = await asyncio.to_thread(self._read, locale_code, base_file_name)
        logger.debug("Read asset %s", self.describe_path(locale_code, base_file_name))
        return parse_asset(
            text,
            self.describe_path(locale_code, base_file_name),
            locale_code=locale_code,
            base_file_name=base_file_name,
        )


# ============================================================================
# HTTP
# ============================================================================


class HttpAssetSource:
    """HTTP asset source backed by httpx.

    Issues ``GET {src}/{locale-code}/{base_file_name}.json``. A shared
    ``httpx.AsyncClient`` may be supplied; it is never closed by the
    source. Without one, a short-lived client is opened per fetch.

    Status mapping:
        404 -> AssetNotFoundError
        other non-2xx, network errors, timeouts -> AssetTransportError

    Example:
        >>> async with httpx.AsyncClient() as client:
        ...     source = HttpAssetSource("https://cdn.example.com/lang", client=client)
        ...     await source.fetch("pt-BR", "common")
    """

    __slots__ = ("_client", "_src", "_timeout")

    def __init__(
        self,
        src: str,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._src = src.rstrip("/")
        self._client = client
        self._timeout = timeout

    @property
    def src(self) -> str:
        """URL prefix of every asset."""
        return self._src

    def describe_path(self, locale_code: LocaleCode, base_file_name: BaseFileName) -> str:
        """Return the asset URL."""
        return (
            f"{self._src}/{quote(locale_code, safe='')}/"
            f"{quote(base_file_name, safe='/')}{ASSET_FILE_SUFFIX}"
        )

    async def _get(self, url: str) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(url, timeout=self._timeout)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.get(url)

    async def fetch(self, locale_code: LocaleCode, base_file_name: BaseFileName) -> RawDictionary:
        """GET and decode one asset.

        Raises:
            AssetNotFoundError: On HTTP 404
            AssetTransportError: On other HTTP errors or network failures
            AssetFormatError: If the body is not a valid asset
        """
        url = self.describe_path(locale_code, base_file_name)
        context = {"locale_code": locale_code, "base_file_name": base_file_name, "source_path": url}
        try:
            _validate_segments(locale_code, base_file_name)
        except ValueError as e:
            raise _asset_error(
                AssetTransportError, DiagnosticCode.ASSET_PATH_REJECTED, str(e), **context
            ) from e

        try:
            response = await self._get(url)
            if response.status_code == httpx.codes.NOT_FOUND:
                msg = f"Asset not found: {url} (HTTP 404)"
                raise _asset_error(
                    AssetNotFoundError, DiagnosticCode.ASSET_NOT_FOUND, msg, **context
                )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            msg = f"Asset request failed: {url} (HTTP {e.response.status_code})"
            raise _asset_error(
                AssetTransportError, DiagnosticCode.ASSET_TRANSPORT_FAILED, msg, **context
            ) from e
        except httpx.RequestError as e:
            msg = f"Asset request failed: {url}: {e}"
            raise _asset_error(
                AssetTransportError, DiagnosticCode.ASSET_TRANSPORT_FAILED, msg, **context
            ) from e

        if len(response.content) > MAX_ASSET_SIZE:
            msg = f"Asset {url} is {len(response.content)} bytes, limit is {MAX_ASSET_SIZE}"
            raise _asset_error(AssetTransportError, DiagnosticCode.ASSET_TOO_LARGE, msg, **context)

        logger.debug("Fetched asset %s (%d bytes)", url, len(response.content))
        return parse_asset(
            response.text, url, locale_code=locale_code, base_file_name=base_file_name
        )


def create_asset_source(
    assets: AssetOptions, *, client: httpx.AsyncClient | None = None
) -> AssetSource:
    """Create the asset source selected by ``assets.loader_type``.

    Args:
        assets: Asset options
        client: Shared httpx client for the HTTP source (optional)

    Returns:
        FileSystemAssetSource or HttpAssetSource
    """
    match assets.loader_type:
        case LoaderType.FILE_SYSTEM:
            return FileSystemAssetSource(assets.src)
        case LoaderType.HTTP:
            return HttpAssetSource(assets.src, client=client, timeout=assets.http_timeout)


# ============================================================================
# LOAD RESULTS
# ============================================================================


@dataclass(frozen=True, slots=True)
class ResourceLoadResult:
    """Result of fetching a single asset.

    Attributes:
        locale_code: Locale path segment of the asset
        base_file_name: Base file name of the asset
        status: Load status (success, not_found, error)
        error: Exception if status is not SUCCESS, None otherwise
        source_path: Human-readable asset location (if available)
        key_count: Number of keys decoded from the asset
    """

    locale_code: LocaleCode
    base_file_name: BaseFileName
    status: LoadStatus
    error: Exception | None = None
    source_path: str | None = None
    key_count: int = 0

    @property
    def is_success(self) -> bool:
        """Check if the asset loaded successfully."""
        return self.status == LoadStatus.SUCCESS

    @property
    def is_not_found(self) -> bool:
        """Check if the asset was missing (expected for partial translations)."""
        return self.status == LoadStatus.NOT_FOUND

    @property
    def is_error(self) -> bool:
        """Check if the fetch failed with an error."""
        return self.status == LoadStatus.ERROR


@dataclass(frozen=True, slots=True)
class LoadSummary:
    """Immutable aggregate of asset fetch results.

    All statistics are computed properties derived from ``results``.

    Example:
        >>> summary = locale_map.get_load_summary()
        >>> for result in summary.get_errors():
        ...     print(f"Failed: {result.source_path}: {result.error}")
    """

    results: tuple[ResourceLoadResult, ...]

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return (
            f"LoadSummary(total={self.total_attempted}, "
            f"ok={self.successful}, "
            f"not_found={self.not_found}, "
            f"errors={self.errors})"
        )

    @property
    def total_attempted(self) -> int:
        """Total number of fetch attempts."""
        return len(self.results)

    @property
    def successful(self) -> int:
        """Number of successful fetches."""
        return sum(1 for r in self.results if r.is_success)

    @property
    def not_found(self) -> int:
        """Number of missing assets."""
        return sum(1 for r in self.results if r.is_not_found)

    @property
    def errors(self) -> int:
        """Number of failed fetches."""
        return sum(1 for r in self.results if r.is_error)

    @property
    def all_successful(self) -> bool:
        """Check if every attempted fetch succeeded."""
        return all(r.is_success for r in self.results)

    def get_errors(self) -> tuple[ResourceLoadResult, ...]:
        """Get all results with errors."""
        return tuple(r for r in self.results if r.is_error)

    def get_not_found(self) -> tuple[ResourceLoadResult, ...]:
        """Get all results where the asset was missing."""
        return tuple(r for r in self.results if r.is_not_found)

    def get_by_locale(self, locale_code: LocaleCode) -> tuple[ResourceLoadResult, ...]:
        """Get all results for one locale code."""
        return tuple(r for r in self.results if r.locale_code == locale_code)
