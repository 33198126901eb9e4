"""Lark-based tokenizer turning typed formula text into tokens.

Supports:
- Numeric literals: ``12``, ``1.5``, ``.5``, ``1e3``
- Variable names: ``revenue``, ``tax_rate``, ``q1.sales``
- Operators and parentheses: ``+ - * / ^ ( )``

The tokenizer does not check structure; ``2 + + 3`` tokenizes fine and
is rejected by the evaluator.
"""

from __future__ import annotations

from lark import Lark
from lark.exceptions import LarkError

from tokencalc.formulas.errors import FormulaParseError
from tokencalc.sequence import TokenSequence
from tokencalc.tokens import Token

GRAMMAR = r"""
start: _item*

_item: NUMBER | NAME | OPERATOR

NUMBER.2: /(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?/

NAME.1: /[A-Za-z_][A-Za-z0-9_.]*/

OPERATOR: /[-+*\/^()]/

%import common.WS
%ignore WS
"""

_parser = Lark(GRAMMAR, parser="lalr", start="start")


def tokenize(text: str, *, placeholder: float = 0.0) -> TokenSequence:
    """Split formula text into a new token sequence.

    Args:
        text: The formula, e.g. ``"revenue * (1 - tax_rate)"``.
        placeholder: Value carried by variable tokens.

    Returns:
        A ``TokenSequence`` in reading order.

    Raises:
        FormulaParseError: If the text holds a character that cannot
            start a token.
    """
    try:
        tree = _parser.parse(text)
    except LarkError as exc:
        pos = getattr(exc, "column", None)
        raise FormulaParseError(str(exc).splitlines()[0], position=pos) from exc

    sequence = TokenSequence()
    for lark_token in tree.children:
        if lark_token.type == "OPERATOR":
            sequence.append(Token.operator(str(lark_token)))
        else:
            sequence.append(Token.from_text(str(lark_token), placeholder=placeholder))
    return sequence
