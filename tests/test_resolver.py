"""Tests for variant selection and placeholder substitution.

Property-based tests cover suffix selection for arbitrary quantities and
substitution over arbitrary text and variable names.
"""

from __future__ import annotations

import logging
from decimal import Decimal

import pytest
from hypothesis import event, example, given
from hypothesis import strategies as st

from localemap.enums import Gender, MissingVariablePolicy
from localemap.runtime import (
    collect_variables,
    effective_key,
    find_template,
    resolve,
    select_variant_suffix,
    substitute,
)
from tests.strategies.locale_map import plain_text, quantities, variable_names

DICTIONARY = {
    "common.message_id": "Some message",
    "common.parameterized": "Value: $x",
    "common.contextual_male": "He",
    "common.contextual_female": "She",
    "common.qty_empty": "No items",
    "common.qty_one": "One item",
    "common.qty_multiple": "$number items",
    "common.greeting": "Hello, $name!",
    "common.price": "Costs $$$amount",
    "errors.http.not_found": "Page $value not found",
}


class TestSelectVariantSuffix:
    """Selector arguments choose the variant suffix."""

    @pytest.mark.parametrize(
        ("gender", "suffix"),
        [(Gender.MALE, "male"), (Gender.FEMALE, "female"), (Gender.NEUTRAL, "neutral")],
    )
    def test_gender(self, gender: Gender, suffix: str) -> None:
        """A Gender selects its own value as suffix."""
        assert select_variant_suffix([gender]) == suffix

    @pytest.mark.parametrize(
        ("quantity", "suffix"),
        [
            (0, "empty"),
            (1, "one"),
            (2, "multiple"),
            (-1, "multiple"),
            (0.5, "multiple"),
            (1.0, "one"),
            (Decimal("0"), "empty"),
            (Decimal("1.00"), "one"),
            (Decimal("2.5"), "multiple"),
        ],
    )
    def test_quantity(self, quantity: int | float | Decimal, suffix: str) -> None:
        """0 is empty, 1 is one, everything else multiple."""
        assert select_variant_suffix([quantity]) == suffix

    @pytest.mark.parametrize("args", [[], ["text"], [{"x": "1"}], ["a", {"b": "c"}]])
    def test_no_selector(self, args: list[object]) -> None:
        """Strings and mappings never select a variant."""
        assert select_variant_suffix(args) is None  # type: ignore[arg-type]

    def test_selector_position_is_free(self) -> None:
        """The selector may follow variable arguments."""
        assert select_variant_suffix([{"name": "Ana"}, "x", Gender.FEMALE]) == "female"

    def test_two_selectors_rejected(self) -> None:
        """At most one Gender or quantity is allowed."""
        with pytest.raises(ValueError, match="At most one"):
            select_variant_suffix([2, Gender.MALE])
        with pytest.raises(ValueError, match="At most one"):
            select_variant_suffix([1, 2])

    @pytest.mark.parametrize("bad", [True, None, ["list"], object(), b"bytes"])
    def test_unsupported_type_rejected(self, bad: object) -> None:
        """bool, None and other types raise TypeError."""
        with pytest.raises(TypeError, match="Unsupported argument type"):
            select_variant_suffix([bad])  # type: ignore[list-item]

    @given(quantities())
    @example(0)
    @example(1)
    def test_quantity_property(self, quantity: int | float | Decimal) -> None:
        """Every quantity selects exactly one of the three suffixes."""
        suffix = select_variant_suffix([quantity])
        event(f"suffix={suffix}")
        expected = "empty" if quantity == 0 else "one" if quantity == 1 else "multiple"
        assert suffix == expected


class TestEffectiveKeyAndLookup:
    """Variant keys and the bare-key fallback."""

    def test_effective_key(self) -> None:
        """The suffix is appended with an underscore."""
        assert effective_key("common.qty", [3]) == "common.qty_multiple"
        assert effective_key("common.contextual", [Gender.MALE]) == "common.contextual_male"
        assert effective_key("common.message_id") == "common.message_id"

    def test_variant_found(self) -> None:
        """The variant key is preferred."""
        assert find_template(DICTIONARY, "common.qty", [0]) == "No items"

    def test_bare_key_fallback(self) -> None:
        """A missing variant falls back to the bare key."""
        assert find_template(DICTIONARY, "common.message_id", [Gender.NEUTRAL]) == "Some message"

    def test_absent(self) -> None:
        """Neither key present gives None."""
        assert find_template(DICTIONARY, "common.contextual", [Gender.NEUTRAL]) is None
        assert find_template(DICTIONARY, "common.unknown") is None


class TestCollectVariables:
    """Arguments bind variables left to right."""

    def test_bindings(self) -> None:
        """Quantities bind number, strings bind value, mappings bind names."""
        variables = collect_variables([3, "404", {"name": "Ana", "count": 7}])
        assert variables == {"number": "3", "value": "404", "name": "Ana", "count": "7"}

    def test_later_wins(self) -> None:
        """Later mappings override earlier ones."""
        variables = collect_variables([{"x": "first"}, {"x": "second"}, "a", "b"])
        assert variables == {"x": "second", "value": "b"}

    def test_mapping_can_override_number(self) -> None:
        """A mapping after a quantity may rebind number."""
        assert collect_variables([2, {"number": "two"}]) == {"number": "two"}

    def test_gender_binds_nothing(self) -> None:
        """A Gender is a selector only."""
        assert collect_variables([Gender.FEMALE]) == {}


class TestSubstitute:
    """$name token replacement."""

    def test_replaces_known_names(self) -> None:
        """Known names are replaced everywhere they appear."""
        assert substitute("$a and $a, $b", {"a": "1", "b": "2"}) == "1 and 1, 2"

    def test_names_with_hyphen_and_digits(self) -> None:
        """Names use letters, digits, '_' and '-'."""
        assert substitute("$first-name $x_2!", {"first-name": "Ana", "x_2": "y"}) == "Ana y!"

    def test_escaped_dollar(self) -> None:
        """$$ renders a literal dollar sign."""
        assert substitute("Costs $$$amount", {"amount": "5"}) == "Costs $5"
        assert substitute("$$name", {"name": "Ana"}) == "$name"

    def test_missing_literal(self) -> None:
        """LITERAL keeps unknown tokens as written."""
        assert substitute("Hello, $name!", {}) == "Hello, $name!"

    def test_missing_blank(self) -> None:
        """BLANK removes unknown tokens."""
        assert substitute("Hello, $name!", {}, MissingVariablePolicy.BLANK) == "Hello, !"

    def test_lone_dollar_kept(self) -> None:
        """A $ not followed by a name is plain text."""
        assert substitute("50 $ only", {}) == "50 $ only"

    @given(plain_text)
    def test_text_without_tokens_unchanged(self, text: str) -> None:
        """Templates without $ are returned unchanged."""
        assert substitute(text, {"x": "y"}) == text

    @given(variable_names, st.text(alphabet="abc XYZ", max_size=10))
    def test_known_variable_substituted(self, name: str, value: str) -> None:
        """A bound name renders its value."""
        event(f"name_has_hyphen={'-' in name}")
        assert substitute(f"<${name}>", {name: value}) == f"<{value}>"


class TestResolve:
    """resolve() end to end over one dictionary."""

    def test_plain(self) -> None:
        """A key without placeholders is returned as is."""
        assert resolve(DICTIONARY, "common.message_id") == "Some message"

    def test_mapping_argument(self) -> None:
        """Mappings fill named placeholders."""
        assert resolve(DICTIONARY, "common.parameterized", [{"x": "foo"}]) == "Value: foo"

    def test_quantity_renders_number(self) -> None:
        """The quantity selects the variant and fills $number."""
        assert resolve(DICTIONARY, "common.qty", [0]) == "No items"
        assert resolve(DICTIONARY, "common.qty", [1]) == "One item"
        assert resolve(DICTIONARY, "common.qty", [42]) == "42 items"
        assert resolve(DICTIONARY, "common.qty", [Decimal("2.5")]) == "2.5 items"

    def test_gender(self) -> None:
        """Gender picks the contextual variant."""
        assert resolve(DICTIONARY, "common.contextual", [Gender.FEMALE]) == "She"

    def test_bare_string_binds_value(self) -> None:
        """A bare string fills $value."""
        assert resolve(DICTIONARY, "errors.http.not_found", ["/home"]) == "Page /home not found"

    def test_missing_variable_policy(self) -> None:
        """The policy applies to unfilled tokens."""
        assert resolve(DICTIONARY, "common.greeting") == "Hello, $name!"
        blank = resolve(
            DICTIONARY, "common.greeting", missing_variable=MissingVariablePolicy.BLANK
        )
        assert blank == "Hello, !"

    def test_missing_key_renders_placeholder(self, caplog: pytest.LogCaptureFixture) -> None:
        """A miss renders {key} and logs a warning."""
        with caplog.at_level(logging.WARNING, logger="localemap.runtime.resolver"):
            assert resolve(DICTIONARY, "common.unknown") == "{common.unknown}"
        assert "common.unknown" in caplog.text

    def test_missing_variant_placeholder_uses_bare_key(self) -> None:
        """The placeholder names the key asked for, not the variant."""
        assert resolve(DICTIONARY, "common.contextual", [Gender.NEUTRAL]) == "{common.contextual}"

    def test_argument_errors_raise(self) -> None:
        """Argument misuse is not absorbed into the placeholder."""
        with pytest.raises(ValueError, match="At most one"):
            resolve(DICTIONARY, "common.qty", [1, Gender.MALE])
        with pytest.raises(TypeError):
            resolve(DICTIONARY, "common.qty", [None])  # type: ignore[list-item]
