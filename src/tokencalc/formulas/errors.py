"""Error types for formula tokenizing and evaluation."""

from __future__ import annotations

from enum import Enum


class FormulaError(Exception):
    """Base class for all formula-related errors."""


class FormulaParseError(FormulaError):
    """Text that cannot be split into formula tokens.

    Attributes:
        position: Character position where the error was detected.
        message: Human-readable description.
    """

    def __init__(self, message: str, position: int | None = None) -> None:
        self.position = position
        full = f"Formula parse error: {message}"
        if position is not None:
            full += f" (at position {position})"
        super().__init__(full)


class ErrorKind(str, Enum):
    EmptyExpression = "empty_expression"
    MalformedExpression = "malformed_expression"
    DivisionByZero = "division_by_zero"
    InvalidResult = "invalid_result"


_DEFAULT_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.EmptyExpression: "Formula is empty",
    ErrorKind.MalformedExpression: "Formula is malformed",
    ErrorKind.DivisionByZero: "Division by zero",
    ErrorKind.InvalidResult: "Result is not a real number",
}


class EvaluationError(FormulaError):
    """A token sequence that cannot be evaluated.

    Attributes:
        kind: Which of the four failure kinds occurred.
        index: Position of the offending token, when one can be named.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str | None = None,
        index: int | None = None,
    ) -> None:
        self.kind = kind
        self.index = index
        self.message = message or _DEFAULT_MESSAGES[kind]
        full = self.message
        if index is not None:
            full += f" (at token {index})"
        super().__init__(full)


ENGINE_ERRORS: tuple[type[Exception], ...] = (FormulaError,)
