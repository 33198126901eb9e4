"""Ordered, position-addressed token storage for a single formula."""

from __future__ import annotations

from typing import Any, Iterable, Iterator

import polars as pl

from tokencalc.tokens import Token


class TokenSequence:
    """The authoritative state of one formula.

    Tokens are kept in reading order and are only ever mutated by
    position.  Out-of-range removals and replacements are silent no-ops
    since indices drift during interactive editing.

    The sequence knows nothing about edit sessions: callers must commit or
    cancel a session that points at a shifted or removed index *before*
    mutating.
    """

    def __init__(self, tokens: Iterable[Token] | None = None) -> None:
        self._tokens: list[Token] = list(tokens) if tokens is not None else []

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def append(self, token: Token) -> None:
        self._tokens.append(token)

    def insert_at(self, index: int, token: Token) -> None:
        """Insert *token* before *index*, clamped to ``[0, len]``."""
        index = max(0, min(index, len(self._tokens)))
        self._tokens.insert(index, token)

    def remove_at(self, index: int) -> Token | None:
        """Remove the token at *index*.

        Returns:
            The removed token, or ``None`` when *index* is out of range.
        """
        if not self._in_range(index):
            return None
        return self._tokens.pop(index)

    def replace_at(self, index: int, token: Token) -> Token | None:
        """Swap the token at *index* for *token*.

        Returns:
            The replaced token, or ``None`` when *index* is out of range.
        """
        if not self._in_range(index):
            return None
        previous = self._tokens[index]
        self._tokens[index] = token
        return previous

    def clear(self) -> None:
        """Drop every token so a new formula can start."""
        self._tokens.clear()

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def at(self, index: int) -> Token | None:
        if not self._in_range(index):
            return None
        return self._tokens[index]

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens)

    def __repr__(self) -> str:
        return f"TokenSequence({self.render()!r})"

    @property
    def tokens(self) -> tuple[Token, ...]:
        return tuple(self._tokens)

    def snapshot(self) -> list[dict[str, Any]]:
        """Return the ordered ``{id, name, category, value}`` records."""
        return [t.to_record() for t in self._tokens]

    def to_frame(self) -> pl.DataFrame:
        """Return the tabular view: one row per token in reading order.

        Values are rendered as strings since operators carry their symbol.
        """
        return pl.DataFrame(
            {
                "position": list(range(len(self._tokens))),
                "id": [t.id for t in self._tokens],
                "name": [t.name for t in self._tokens],
                "category": [t.category.value for t in self._tokens],
                "value": [str(t.value) for t in self._tokens],
            },
            schema={
                "position": pl.Int64,
                "id": pl.Utf8,
                "name": pl.Utf8,
                "category": pl.Utf8,
                "value": pl.Utf8,
            },
        )

    def render(self) -> str:
        """Return the formula as space-separated token names."""
        return " ".join(t.name for t in self._tokens)

    def _in_range(self, index: int) -> bool:
        return 0 <= index < len(self._tokens)
