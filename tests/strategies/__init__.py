"""Hypothesis strategies for LocaleMap property-based testing.

Usage:
    from tests.strategies import fallback_configs, quantities
    from tests.strategies.locale_map import LOCALE_POOL, flat_dictionaries

Event-Emitting Strategies (HypoFuzz-Optimized):
    These strategies emit hypothesis.event() calls for coverage-guided fuzzing:
    - locale_codes, fallback_configs, quantities
"""

from .locale_map import (
    LOCALE_POOL,
    fallback_configs,
    flat_dictionaries,
    locale_codes,
    plain_text,
    quantities,
    variable_names,
)

__all__ = [
    "LOCALE_POOL",
    "fallback_configs",
    "flat_dictionaries",
    "locale_codes",
    "plain_text",
    "quantities",
    "variable_names",
]
