"""Type aliases for the localization domain.

Provides semantic type aliases used throughout the localization package
and by user code when annotating LocaleMap call sites.

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Mapping

__all__ = [
    "BaseFileName",
    "LocaleCode",
    "MergedDictionary",
    "MessageKey",
    "RawDictionary",
    "Template",
]

type MessageKey = str
"""Dotted message key (e.g., 'common.message_id', 'common.qty_one')."""

type LocaleCode = str
"""Locale code exactly as configured (e.g., 'en', 'pt-BR')."""

type BaseFileName = str
"""Logical asset group name (e.g., 'common', 'validation')."""

type Template = str
"""Message template with $name placeholders."""

type RawDictionary = dict[MessageKey, Template]
"""Flat key -> template mapping decoded from one asset file."""

type MergedDictionary = Mapping[MessageKey, Template]
"""Read-only, fallback-resolved key -> template view of one locale."""
