"""Formula tokens and catalog variables.

A formula is a left-to-right run of tokens.  Each token is one of three
categories:

- ``number``   -- a numeric literal, ``value`` is the parsed float
- ``custom``   -- a named variable, ``value`` is a placeholder or a resolved number
- ``operator`` -- one of ``+ - * / ^ ( )``, ``value`` mirrors ``name``

Tokens are immutable.  Editing a token means replacing it in its sequence.
"""

from __future__ import annotations

import math
import uuid
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


OPERATORS: tuple[str, ...] = ("+", "-", "*", "/", "^", "(", ")")


class TokenCategory(str, Enum):
    number = "number"
    custom = "custom"
    operator = "operator"


def _new_id() -> str:
    return uuid.uuid4().hex


def parse_number(text: str) -> float | None:
    """Parse *text* as a finite numeric literal.

    Returns:
        The float value, or ``None`` if *text* is not a number.
        ``nan`` and ``inf`` spellings are not numbers here.
    """
    try:
        value = float(text.strip())
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


class Variable(BaseModel):
    """A candidate variable from the suggestion catalog."""

    id: str
    name: str
    category: str = "custom"
    value: float | str = 0

    @model_validator(mode="before")
    @classmethod
    def _coerce_id(cls, data: Any) -> Any:
        # Catalogs commonly ship integer ids
        if isinstance(data, dict) and isinstance(data.get("id"), int):
            data = {**data, "id": str(data["id"])}
        return data

    def numeric_value(self) -> float | None:
        """Return the carried value as a float, if it is numeric."""
        if isinstance(self.value, (int, float)):
            return float(self.value) if math.isfinite(self.value) else None
        return parse_number(self.value)


class Token(BaseModel):
    """One element of a formula."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    name: str
    category: TokenCategory
    value: float | str = 0.0

    @model_validator(mode="after")
    def _check_category(self) -> Token:
        is_op = self.name in OPERATORS
        if is_op != (self.category == TokenCategory.operator):
            raise ValueError(
                f"Token {self.name!r} cannot have category {self.category.value!r}"
            )
        if is_op and self.value != self.name:
            raise ValueError(f"Operator token value must mirror its name: {self.name!r}")
        if self.category == TokenCategory.number and isinstance(self.value, str):
            raise ValueError(f"Number token value must be numeric: {self.value!r}")
        return self

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def operator(cls, symbol: str) -> Token:
        """Build an operator token for *symbol*."""
        if symbol not in OPERATORS:
            raise ValueError(f"Unknown operator: {symbol!r}")
        return cls(name=symbol, category=TokenCategory.operator, value=symbol)

    @classmethod
    def from_text(
        cls,
        text: str,
        *,
        placeholder: float = 0.0,
        token_id: str | None = None,
    ) -> Token:
        """Build a token from user-typed text.

        Operator symbols become ``operator`` tokens, numeric literals
        become ``number`` tokens and everything else is ``custom`` with
        *placeholder* as its value.

        Args:
            text: The typed text; stored verbatim as the token name.
            placeholder: Value carried by a ``custom`` token.
            token_id: Reuse an existing id (used when committing an edit).
        """
        extra: dict[str, Any] = {"id": token_id} if token_id is not None else {}
        if text in OPERATORS:
            return cls(name=text, category=TokenCategory.operator, value=text, **extra)
        number = parse_number(text)
        if number is not None:
            return cls(name=text, category=TokenCategory.number, value=number, **extra)
        return cls(name=text, category=TokenCategory.custom, value=placeholder, **extra)

    @classmethod
    def from_variable(cls, variable: Variable, *, placeholder: float = 0.0) -> Token:
        """Build a ``custom`` token for a selected catalog variable.

        The token gets a fresh id so the same variable can appear twice.
        """
        resolved = variable.numeric_value()
        return cls(
            name=variable.name,
            category=TokenCategory.custom,
            value=resolved if resolved is not None else placeholder,
        )

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def is_operator(self) -> bool:
        return self.category == TokenCategory.operator

    def to_record(self) -> dict[str, Any]:
        """Return the ``{id, name, category, value}`` snapshot record."""
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "value": self.value,
        }
