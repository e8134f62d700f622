"""Fallback chain resolution.

Computes, for a requested locale, the ordered list of locales consulted
when a message is looked up. The chain is de-duplicated and always ends
with the default locale.

Python 3.13+.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from localemap.diagnostics import ConfigurationError, Diagnostic, DiagnosticCode

if TYPE_CHECKING:
    from localemap.core.locale import Locale
    from localemap.localization.options import LocaleMapOptions

__all__ = ["resolve_chain"]

logger = logging.getLogger(__name__)


def resolve_chain(requested: Locale, options: LocaleMapOptions) -> tuple[Locale, ...]:
    """Resolve the fallback chain for a requested locale.

    Every locale listed in ``fallbacks[current]`` is walked in order,
    depth first; a locale already in the chain is skipped, so cyclic
    fallback maps terminate. An unsupported requested locale starts the
    chain at the default locale.

    The default locale is always the last member. A fallback entry naming
    it is deferred to the end, and fallbacks listed for the default
    itself are never walked.

    Args:
        requested: Locale the caller asked for
        options: Validated LocaleMap options

    Returns:
        Ordered, duplicate-free chain ending with the default locale

    Raises:
        ConfigurationError: If the default locale is not supported

    Example:
        >>> # supported: en, en-US, pt-BR; default en
        >>> # fallbacks: {"pt-BR": ["en-US"], "en-US": ["en"]}
        >>> [str(loc) for loc in resolve_chain(parse_locale("pt-BR"), options)]
        ['pt-BR', 'en-US', 'en']
    """
    default = options.default
    supported = options.supported
    if default not in supported:
        diagnostic = Diagnostic(
            code=DiagnosticCode.DEFAULT_LOCALE_UNSUPPORTED,
            message=f"Default locale {default} is not a supported locale",
        )
        raise ConfigurationError(diagnostic)

    start = requested
    if requested not in supported:
        logger.debug("Locale %s not supported, chain starts at default %s", requested, default)
        start = default

    fallbacks = options.fallback_map
    chain: list[Locale] = []
    visited: set[Locale] = {default}
    stack = [] if start == default else [start]
    while stack:
        current = stack.pop()
        if current in visited:
            continue
        visited.add(current)
        chain.append(current)
        # Reversed so the first listed fallback is visited first
        stack.extend(reversed(fallbacks.get(current, ())))

    chain.append(default)
    return tuple(chain)
