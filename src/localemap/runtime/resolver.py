"""Message resolution: variant selection and placeholder substitution.

A lookup takes a dotted key and an ordered sequence of arguments:

- a Gender tag selects ``{key}_male`` / ``{key}_female`` / ``{key}_neutral``
- a quantity (int, float, Decimal) selects ``{key}_empty`` (0),
  ``{key}_one`` (1) or ``{key}_multiple`` (anything else) and is bound to
  ``$number``
- a bare string is bound to ``$value``
- a mapping binds its items to ``$name`` tokens; later mappings win

At most one argument may be a selector (Gender or quantity).

Resolution never raises for a missing message: the visible placeholder
``{key}`` is returned instead. Argument misuse (two selectors, unsupported
types) is a programming error and raises.

Python 3.13+.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import TYPE_CHECKING, TypeIs

from localemap.constants import (
    FALLBACK_MISSING_MESSAGE,
    NUMBER_VARIABLE,
    PLACEHOLDER_PATTERN,
    SUFFIX_EMPTY,
    SUFFIX_MULTIPLE,
    SUFFIX_ONE,
    VALUE_VARIABLE,
)
from localemap.enums import Gender, MissingVariablePolicy

if TYPE_CHECKING:
    from localemap.localization.types import MergedDictionary, MessageKey, Template

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Type aliases
    "Argument",
    "Quantity",
    # Variant selection
    "select_variant_suffix",
    "effective_key",
    # Lookup and substitution
    "find_template",
    "collect_variables",
    "substitute",
    "resolve",
]

logger = logging.getLogger(__name__)

type Quantity = int | float | Decimal
"""Numeric selector value (bool is rejected)."""

type Argument = str | Quantity | Gender | Mapping[str, object]
"""One positional argument of get_formatted()."""

_PLACEHOLDER_RE = re.compile(PLACEHOLDER_PATTERN)


def _is_quantity(value: object) -> TypeIs[Quantity]:
    return isinstance(value, int | float | Decimal) and not isinstance(value, bool)


def _quantity_suffix(value: Quantity) -> str:
    if value == 0:
        return SUFFIX_EMPTY
    if value == 1:
        return SUFFIX_ONE
    return SUFFIX_MULTIPLE


def _validate_arguments(args: Sequence[Argument]) -> Gender | Quantity | None:
    """Type-check arguments and return the selector, if any.

    Raises:
        TypeError: If an argument has an unsupported type
        ValueError: If more than one selector is supplied
    """
    selector: Gender | Quantity | None = None
    for arg in args:
        # Gender is a StrEnum: test it before plain str
        if isinstance(arg, Gender) or _is_quantity(arg):
            if selector is not None:
                msg = (
                    f"At most one gender or quantity argument allowed, "
                    f"got {selector!r} and {arg!r}"
                )
                raise ValueError(msg)
            selector = arg
        elif not isinstance(arg, str | Mapping):
            msg = (
                f"Unsupported argument type {type(arg).__name__}; expected str, int, "
                f"float, Decimal, Gender or a mapping"
            )
            raise TypeError(msg)
    return selector


def select_variant_suffix(args: Sequence[Argument]) -> str | None:
    """Return the variant suffix selected by the arguments.

    Example:
        >>> select_variant_suffix([Gender.FEMALE])
        'female'
        >>> select_variant_suffix([{"name": "Ana"}, 0])
        'empty'
        >>> select_variant_suffix(["plain"]) is None
        True

    Raises:
        TypeError: If an argument has an unsupported type
        ValueError: If more than one selector is supplied
    """
    selector = _validate_arguments(args)
    match selector:
        case None:
            return None
        case Gender():
            return selector.value
        case _:
            return _quantity_suffix(selector)


def effective_key(key: MessageKey, args: Sequence[Argument] = ()) -> MessageKey:
    """Return the variant key the arguments select, or ``key`` unchanged.

    Example:
        >>> effective_key("common.qty", [2])
        'common.qty_multiple'
    """
    suffix = select_variant_suffix(args)
    return key if suffix is None else f"{key}_{suffix}"


def find_template(
    dictionary: MergedDictionary, key: MessageKey, args: Sequence[Argument] = ()
) -> Template | None:
    """Look up the variant key, then the bare key.

    Returns:
        Template, or None if neither key is present
    """
    variant = effective_key(key, args)
    template = dictionary.get(variant)
    if template is None and variant != key:
        template = dictionary.get(key)
    return template


def collect_variables(args: Sequence[Argument]) -> dict[str, str]:
    """Merge arguments into one name -> text mapping, left to right.

    Quantities bind ``number``, bare strings bind ``value``; mapping items
    bind their own names. Later bindings override earlier ones.
    """
    variables: dict[str, str] = {}
    for arg in args:
        match arg:
            case Gender():
                continue
            case str():
                variables[VALUE_VARIABLE] = arg
            case Mapping():
                for name, value in arg.items():
                    variables[str(name)] = str(value)
            case _ if _is_quantity(arg):
                variables[NUMBER_VARIABLE] = str(arg)
    return variables


def substitute(
    template: Template,
    variables: Mapping[str, str],
    missing_variable: MissingVariablePolicy = MissingVariablePolicy.LITERAL,
) -> str:
    """Replace ``$name`` tokens in a template.

    ``$$`` renders a literal ``$``. Names with no value are kept as written
    (LITERAL) or removed (BLANK).

    Example:
        >>> substitute("Hello, $name! You owe $$5", {"name": "Ana"})
        'Hello, Ana! You owe $5'
    """

    def replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name == "$":
            return "$"
        value = variables.get(name)
        if value is not None:
            return value
        if missing_variable is MissingVariablePolicy.BLANK:
            return ""
        return match.group(0)

    return _PLACEHOLDER_RE.sub(replace, template)


def resolve(
    dictionary: MergedDictionary,
    key: MessageKey,
    args: Sequence[Argument] = (),
    *,
    missing_variable: MissingVariablePolicy = MissingVariablePolicy.LITERAL,
) -> str:
    """Resolve a key and arguments into the final string.

    Args:
        dictionary: Layered view of the active locale
        key: Dotted message key (e.g., 'common.qty')
        args: Selector, strings and variable mappings
        missing_variable: Rendering of tokens with no value

    Returns:
        Formatted message, or ``{key}`` when the key is absent

    Raises:
        TypeError: If an argument has an unsupported type
        ValueError: If more than one selector is supplied

    Example:
        >>> resolve({"common.qty_one": "$number item"}, "common.qty", [1])
        '1 item'
        >>> resolve({}, "common.missing")
        '{common.missing}'
    """
    template = find_template(dictionary, key, args)
    if template is None:
        logger.warning("Message %r not found", effective_key(key, args))
        return FALLBACK_MISSING_MESSAGE.format(id=key)
    return substitute(template, collect_variables(args), missing_variable)
