"""Tests for Token construction and the category invariant."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from tokencalc.tokens import OPERATORS, Token, TokenCategory, Variable, parse_number


class TestFromText:
    def test_integer(self) -> None:
        tok = Token.from_text("12")
        assert tok.category == TokenCategory.number
        assert tok.value == 12.0
        assert tok.name == "12"

    def test_negative_float(self) -> None:
        tok = Token.from_text("-1.5")
        assert tok.category == TokenCategory.number
        assert tok.value == -1.5

    def test_exponent_literal(self) -> None:
        assert Token.from_text("1e3").value == 1000.0

    def test_name_is_custom(self) -> None:
        tok = Token.from_text("revenue")
        assert tok.category == TokenCategory.custom
        assert tok.value == 0.0

    def test_custom_placeholder(self) -> None:
        assert Token.from_text("revenue", placeholder=3.0).value == 3.0

    def test_trailing_garbage_is_custom(self) -> None:
        assert Token.from_text("12abc").category == TokenCategory.custom

    def test_non_finite_spellings_are_custom(self) -> None:
        assert Token.from_text("nan").category == TokenCategory.custom
        assert Token.from_text("inf").category == TokenCategory.custom

    def test_empty_text_is_custom(self) -> None:
        assert Token.from_text("").category == TokenCategory.custom

    @pytest.mark.parametrize("symbol", OPERATORS)
    def test_operator_symbols(self, symbol: str) -> None:
        tok = Token.from_text(symbol)
        assert tok.category == TokenCategory.operator
        assert tok.value == symbol

    def test_reuses_given_id(self) -> None:
        assert Token.from_text("7", token_id="abc").id == "abc"


class TestInvariant:
    def test_ids_are_unique(self) -> None:
        ids = {Token.from_text("x").id for _ in range(100)}
        assert len(ids) == 100

    def test_operator_constructor_rejects_non_operator(self) -> None:
        with pytest.raises(ValueError, match="Unknown operator"):
            Token.operator("%")

    def test_operator_name_with_other_category(self) -> None:
        with pytest.raises(ValueError):
            Token(name="+", category=TokenCategory.custom, value=0.0)

    def test_operator_category_with_other_name(self) -> None:
        with pytest.raises(ValueError):
            Token(name="x", category=TokenCategory.operator, value="x")

    def test_operator_value_must_mirror_name(self) -> None:
        with pytest.raises(ValueError):
            Token(name="+", category=TokenCategory.operator, value="-")

    def test_number_value_must_be_numeric(self) -> None:
        with pytest.raises(ValueError):
            Token(name="5", category=TokenCategory.number, value="five")

    def test_number_value_coerced_to_float(self) -> None:
        assert Token(name="5", category=TokenCategory.number, value=5).value == 5.0

    def test_tokens_are_frozen(self) -> None:
        tok = Token.from_text("5")
        with pytest.raises(ValidationError):
            tok.name = "6"  # type: ignore[misc]

    def test_to_record(self) -> None:
        tok = Token.operator("*")
        assert tok.to_record() == {
            "id": tok.id,
            "name": "*",
            "category": "operator",
            "value": "*",
        }


class TestVariables:
    def test_int_id_is_coerced(self) -> None:
        var = Variable(id=3, name="revenue", category="finance", value=10)
        assert var.id == "3"

    def test_numeric_string_value(self) -> None:
        assert Variable(id="1", name="a", value="3.5").numeric_value() == 3.5

    def test_non_numeric_value(self) -> None:
        assert Variable(id="1", name="a", value="n/a").numeric_value() is None

    def test_from_variable_takes_numeric_value(self) -> None:
        var = Variable(id="1", name="revenue", value=7)
        tok = Token.from_variable(var)
        assert tok.category == TokenCategory.custom
        assert tok.name == "revenue"
        assert tok.value == 7.0

    def test_from_variable_uses_fresh_ids(self) -> None:
        var = Variable(id="1", name="revenue", value="unknown")
        first = Token.from_variable(var, placeholder=2.0)
        second = Token.from_variable(var, placeholder=2.0)
        assert first.id != second.id
        assert first.id != var.id
        assert first.value == 2.0


def test_parse_number() -> None:
    assert parse_number(" 4 ") == 4.0
    assert parse_number("four") is None
    assert parse_number("1e999") is None
