"""Dictionary merging for one locale and layering across a fallback chain.

merge_locale() combines the per-base-file dictionaries of a single locale
into one flat dictionary, prefixing each key with its base file name.
layer() stacks per-locale dictionaries, most specific first, into the
read-only view that message lookups run against.

Neither function mutates its inputs.

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from localemap.constants import BASE_NAME_SEPARATOR, KEY_SEPARATOR
from localemap.diagnostics import Diagnostic, DiagnosticCode, DuplicateKeyError
from localemap.localization.types import (
    BaseFileName,
    LocaleCode,
    MergedDictionary,
    MessageKey,
    RawDictionary,
    Template,
)

__all__ = ["key_prefix", "layer", "merge_locale"]


def key_prefix(base_file_name: BaseFileName) -> str:
    """Return the key prefix contributed by a base file name.

    Example:
        >>> key_prefix("common")
        'common.'
        >>> key_prefix("errors/http")
        'errors.http.'
    """
    return base_file_name.replace(BASE_NAME_SEPARATOR, KEY_SEPARATOR) + KEY_SEPARATOR


def merge_locale(
    locale_code: LocaleCode, raw: Mapping[BaseFileName, RawDictionary]
) -> dict[MessageKey, Template]:
    """Merge the dictionaries of every base file of one locale.

    Args:
        locale_code: Locale the dictionaries belong to (error context)
        raw: Base file name -> flat dictionary, in configured order

    Returns:
        New dictionary with keys prefixed by their base file name

    Raises:
        DuplicateKeyError: If two base files produce the same key (for
            example base files 'a' with key 'b.c' and 'a/b' with key 'c')
    """
    merged: dict[MessageKey, Template] = {}
    origin: dict[MessageKey, BaseFileName] = {}
    for base_file_name, dictionary in raw.items():
        prefix = key_prefix(base_file_name)
        for key, template in dictionary.items():
            full_key = prefix + key
            if full_key in merged:
                diagnostic = Diagnostic(
                    code=DiagnosticCode.DUPLICATE_KEY,
                    message=(
                        f"Key {full_key!r} is defined by both {origin[full_key]!r} and "
                        f"{base_file_name!r} for locale {locale_code!r}"
                    ),
                    hint="Rename one of the keys or merge the base files",
                    locale_code=locale_code,
                )
                raise DuplicateKeyError(diagnostic, key=full_key, locale_code=locale_code)
            merged[full_key] = template
            origin[full_key] = base_file_name
    return merged


def layer(chain_dictionaries: Iterable[Mapping[MessageKey, Template]]) -> MergedDictionary:
    """Layer per-locale dictionaries into one read-only view.

    The first dictionary is the most specific locale. A key takes the
    template of the first dictionary that defines it; keys missing from
    every dictionary are simply absent.

    Args:
        chain_dictionaries: Per-locale dictionaries, most specific first

    Returns:
        Read-only mapping (MappingProxyType over a fresh dict)
    """
    layered: dict[MessageKey, Template] = {}
    # Least specific first so more specific entries overwrite
    for dictionary in reversed(list(chain_dictionaries)):
        layered.update(dictionary)
    return MappingProxyType(layered)
