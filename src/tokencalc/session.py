"""In-place editing of a single token.

An ``EditSession`` is either idle or editing exactly one index of a
``TokenSequence``.  Committing re-derives the token from the edited text
the same way a freshly typed token is built; cancelling leaves the
sequence untouched.
"""

from __future__ import annotations

from enum import Enum

from tokencalc.logging.events import EventType, emit_info
from tokencalc.sequence import TokenSequence
from tokencalc.tokens import Token


class EditState(str, Enum):
    idle = "idle"
    editing = "editing"


class EditSession:
    """At most one token in edit mode at a time."""

    def __init__(self, sequence: TokenSequence, *, placeholder: float = 0.0) -> None:
        self.sequence = sequence
        self.placeholder = placeholder
        self._index: int | None = None
        self._buffer = ""

    @property
    def state(self) -> EditState:
        return EditState.idle if self._index is None else EditState.editing

    @property
    def is_editing(self) -> bool:
        return self._index is not None

    @property
    def index(self) -> int | None:
        return self._index

    @property
    def buffer(self) -> str:
        return self._buffer

    def begin(self, index: int) -> bool:
        """Start editing the token at *index*.

        Operators and out-of-range indices cannot be edited; the call is
        then a no-op and any running edit is left alone.  Otherwise a
        running edit is committed first.

        Returns:
            ``True`` if editing started.
        """
        token = self.sequence.at(index)
        if token is None or token.is_operator:
            return False
        if self.is_editing:
            self.commit()
            # The commit may have replaced the target token
            token = self.sequence.at(index)
            if token is None or token.is_operator:
                return False
        self._index = index
        self._buffer = token.name
        return True

    def update(self, text: str) -> None:
        """Replace the edit buffer; ignored while idle."""
        if self.is_editing:
            self._buffer = text

    def commit(self) -> Token | None:
        """Write the buffer back to the sequence and return to idle.

        Returns:
            The new token, or ``None`` if nothing was being edited or the
            edited index no longer exists.
        """
        if self._index is None:
            return None
        index = self._index
        previous = self.sequence.at(index)
        token = Token.from_text(
            self._buffer,
            placeholder=self.placeholder,
            token_id=previous.id if previous is not None else None,
        )
        replaced = self.sequence.replace_at(index, token)
        self._reset()
        if replaced is None:
            return None
        emit_info(
            EventType.edit_committed,
            f"Token {index} set to {token.name!r}",
            {"index": index, "category": token.category.value},
        )
        return token

    def cancel(self) -> None:
        """Discard the buffer and return to idle."""
        if self._index is None:
            return
        emit_info(EventType.edit_cancelled, f"Edit of token {self._index} cancelled", {"index": self._index})
        self._reset()

    def _reset(self) -> None:
        self._index = None
        self._buffer = ""
