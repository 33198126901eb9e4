"""Operator-precedence evaluator for token sequences.

Tokens are reordered into postfix form with the shunting-yard algorithm
and then reduced on a value stack.  Precedence, highest first:

    unary -      5   (prefix, so -2^2 = (-2)^2)
    ^            4   right-associative
    * /          3   left-associative
    + -          2   left-associative

Every failure surfaces as an ``EvaluationError``; arithmetic exceptions
from the runtime never escape.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Mapping

from pydantic import BaseModel

from tokencalc.formulas.errors import ErrorKind, EvaluationError
from tokencalc.tokens import Token, TokenCategory, parse_number


# symbol -> (precedence, right_associative)
_BINARY: dict[str, tuple[int, bool]] = {
    "+": (2, False),
    "-": (2, False),
    "*": (3, False),
    "/": (3, False),
    "^": (4, True),
}

_NEG = "neg"
_NEG_PRECEDENCE = 5

_OPERAND = "operand"
_OPERATOR = "operator"


class EvaluationResult(BaseModel):
    """Outcome of an evaluation, with failures carried as values."""

    value: float | None = None
    error_kind: ErrorKind | None = None
    index: int | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error_kind is None


def evaluate(
    tokens: Iterable[Token],
    bindings: Mapping[str, float] | None = None,
) -> float:
    """Evaluate a token sequence to a finite float.

    Args:
        tokens: A ``TokenSequence`` or any iterable of tokens.
        bindings: Optional values for ``custom`` tokens, keyed by name.
            Unbound custom tokens use the value they carry (0 by default).

    Returns:
        The computed value.

    Raises:
        EvaluationError: If the sequence is empty, malformed, divides by
            zero or yields a non-real/non-finite value.
    """
    token_list = list(tokens)
    if not token_list:
        raise EvaluationError(ErrorKind.EmptyExpression)
    postfix = _to_postfix(token_list, bindings or {})
    return _reduce(postfix)


def evaluate_result(
    tokens: Iterable[Token],
    bindings: Mapping[str, float] | None = None,
) -> EvaluationResult:
    """Like ``evaluate`` but returns failures instead of raising."""
    try:
        return EvaluationResult(value=evaluate(tokens, bindings))
    except EvaluationError as exc:
        return EvaluationResult(
            error_kind=exc.kind,
            index=exc.index,
            message=exc.message,
        )


def unresolved_names(
    tokens: Iterable[Token],
    bindings: Mapping[str, float] | None = None,
) -> list[str]:
    """Return names of custom tokens that will evaluate as their placeholder."""
    bound = bindings or {}
    return [
        t.name
        for t in tokens
        if t.category == TokenCategory.custom and t.name not in bound
    ]


# ---------- Shunting-yard ----------


def _operand_value(token: Token, bindings: Mapping[str, float]) -> float:
    if token.category == TokenCategory.custom and token.name in bindings:
        return float(bindings[token.name])
    if isinstance(token.value, (int, float)):
        return float(token.value)
    parsed = parse_number(token.value)
    return parsed if parsed is not None else 0.0


def _precedence(symbol: str) -> int:
    if symbol == _NEG:
        return _NEG_PRECEDENCE
    return _BINARY[symbol][0]


def _malformed(message: str, index: int) -> EvaluationError:
    return EvaluationError(ErrorKind.MalformedExpression, message, index)


def _to_postfix(
    tokens: list[Token], bindings: Mapping[str, float]
) -> list[tuple[str, Any, int]]:
    """Reorder *tokens* into postfix, validating structure on the way.

    Output entries are ``(kind, payload, index)`` where payload is the
    operand value or the operator symbol.
    """
    output: list[tuple[str, Any, int]] = []
    stack: list[tuple[str, int]] = []
    expect_operand = True

    for i, token in enumerate(tokens):
        if not token.is_operator:
            if not expect_operand:
                raise _malformed(f"Missing operator before {token.name!r}", i)
            output.append((_OPERAND, _operand_value(token, bindings), i))
            expect_operand = False
            continue

        symbol = token.name
        if symbol == "(":
            if not expect_operand:
                raise _malformed("Missing operator before '('", i)
            stack.append(("(", i))
        elif symbol == ")":
            if expect_operand:
                raise _malformed("Missing operand before ')'", i)
            while stack and stack[-1][0] != "(":
                op, op_index = stack.pop()
                output.append((_OPERATOR, op, op_index))
            if not stack:
                raise _malformed("Unmatched ')'", i)
            stack.pop()
        elif expect_operand:
            # Only minus may stand in prefix position
            if symbol != "-":
                raise _malformed(f"Missing operand before {symbol!r}", i)
            stack.append((_NEG, i))
        else:
            precedence, right_assoc = _BINARY[symbol]
            while stack and stack[-1][0] != "(":
                top = _precedence(stack[-1][0])
                if top > precedence or (top == precedence and not right_assoc):
                    op, op_index = stack.pop()
                    output.append((_OPERATOR, op, op_index))
                else:
                    break
            stack.append((symbol, i))
            expect_operand = True

    if expect_operand:
        raise _malformed("Formula ends with an operator", len(tokens) - 1)

    while stack:
        op, op_index = stack.pop()
        if op == "(":
            raise _malformed("Unmatched '('", op_index)
        output.append((_OPERATOR, op, op_index))
    return output


# ---------- Reduction ----------


def _reduce(postfix: list[tuple[str, Any, int]]) -> float:
    values: list[float] = []
    for kind, payload, index in postfix:
        if kind == _OPERAND:
            values.append(payload)
        elif payload == _NEG:
            values.append(-values.pop())
        else:
            right = values.pop()
            left = values.pop()
            values.append(_apply(payload, left, right, index))

    result = values.pop()
    if not math.isfinite(result):
        raise EvaluationError(ErrorKind.InvalidResult)
    return result


def _apply(symbol: str, left: float, right: float, index: int) -> float:
    if symbol == "+":
        result = left + right
    elif symbol == "-":
        result = left - right
    elif symbol == "*":
        result = left * right
    elif symbol == "/":
        if right == 0:
            raise EvaluationError(ErrorKind.DivisionByZero, index=index)
        result = left / right
    else:
        try:
            result = math.pow(left, right)
        except (ValueError, OverflowError) as exc:
            raise EvaluationError(
                ErrorKind.InvalidResult,
                f"{left:g} ^ {right:g} is not a real number",
                index,
            ) from exc

    if not math.isfinite(result):
        raise EvaluationError(ErrorKind.InvalidResult, index=index)
    return result
