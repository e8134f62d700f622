"""Message resolution runtime.

Variant selection (gender, quantity) and $name placeholder substitution
over layered locale dictionaries.

Python 3.13+.
"""

from localemap.enums import Gender, MissingVariablePolicy

from .resolver import (
    Argument,
    Quantity,
    collect_variables,
    effective_key,
    find_template,
    resolve,
    select_variant_suffix,
    substitute,
)

__all__ = [
    "Argument",
    "Gender",
    "MissingVariablePolicy",
    "Quantity",
    "collect_variables",
    "effective_key",
    "find_template",
    "resolve",
    "select_variant_suffix",
    "substitute",
]
