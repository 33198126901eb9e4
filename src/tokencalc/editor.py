"""Keystroke-level formula building on top of the token engine.

``FormulaEditor`` holds the free-text input box, the token sequence, the
edit session and the latest candidate snapshot, and maps user actions to
engine calls.  Nothing here renders anything.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from tokencalc.formulas.evaluator import EvaluationResult, evaluate_result, unresolved_names
from tokencalc.logging.events import EventType, emit_info, emit_warning
from tokencalc.sequence import TokenSequence
from tokencalc.session import EditSession
from tokencalc.suggestions import match
from tokencalc.tokens import OPERATORS, Token, Variable


class FormulaEditor:
    """One formula being built from typed text, operator keys and suggestions.

    Args:
        candidates: Initial suggestion snapshot.
        suggestion_limit: Maximum suggestions offered; ``None`` for no cap.
        placeholder: Value carried by unresolved variable tokens.
    """

    def __init__(
        self,
        candidates: Sequence[Variable] | None = None,
        *,
        suggestion_limit: int | None = None,
        placeholder: float = 0.0,
    ) -> None:
        self.sequence = TokenSequence()
        self.session = EditSession(self.sequence, placeholder=placeholder)
        self.candidates: list[Variable] = list(candidates or [])
        self.suggestion_limit = suggestion_limit
        self.placeholder = placeholder
        self.input_text = ""
        self.last_result: EvaluationResult | None = None

    @classmethod
    def from_config(
        cls, config: Mapping[str, Any], candidates: Sequence[Variable] | None = None
    ) -> FormulaEditor:
        return cls(
            candidates,
            suggestion_limit=config.get("suggestion_limit"),
            placeholder=float(config.get("custom_placeholder", 0.0)),
        )

    # ------------------------------------------------------------------
    # Input box
    # ------------------------------------------------------------------

    def set_candidates(self, candidates: Sequence[Variable]) -> None:
        """Replace the candidate snapshot (e.g. after a catalog fetch)."""
        self.candidates = list(candidates)

    def type_text(self, text: str) -> None:
        self.input_text = text

    def suggestions(self) -> list[Variable]:
        """Candidates matching the current input.

        Nothing is suggested for empty input or a bare operator.
        """
        if not self.input_text or self.input_text in OPERATORS:
            return []
        found = match(self.candidates, self.input_text)
        if self.suggestion_limit is not None:
            found = found[: self.suggestion_limit]
        return found

    def press_key(self, key: str) -> EvaluationResult | None:
        """Apply a key press to the formula.

        Returns:
            The evaluation result for ``=`` and for ``Enter`` on empty
            input, otherwise ``None``.
        """
        if key in OPERATORS:
            self._flush_input()
            self.sequence.append(Token.operator(key))
            return None

        if key == "Backspace":
            if not self.input_text and len(self.sequence) > 0:
                self.remove(len(self.sequence) - 1)
            return None

        if key == "Enter" and self.input_text:
            found = self.suggestions()
            if found:
                self.select_suggestion(found[0])
            else:
                self._flush_input()
            return None

        if key in ("Enter", "="):
            return self.evaluate()

        if key == "Tab":
            found = self.suggestions()
            if found:
                self.select_suggestion(found[0])
            return None

        if key == "Escape":
            self.session.cancel()
        return None

    def select_suggestion(self, variable: Variable) -> Token:
        token = Token.from_variable(variable, placeholder=self.placeholder)
        self.sequence.append(token)
        self.input_text = ""
        return token

    # ------------------------------------------------------------------
    # Token operations
    # ------------------------------------------------------------------

    def remove(self, index: int) -> Token | None:
        """Remove a token, settling any edit that the removal would shift.

        Out-of-range indices are a no-op and leave a running edit alone.
        """
        if self.sequence.at(index) is None:
            return None
        editing = self.session.index
        if editing is not None and editing >= index:
            if editing == index:
                self.session.cancel()
            else:
                self.session.commit()
        removed = self.sequence.remove_at(index)
        if removed is not None:
            emit_info(
                EventType.token_removed,
                f"Removed token {index}",
                {"index": index, "name": removed.name},
            )
        return removed

    def replace_with_suggestion(self, index: int, variable: Variable) -> Token | None:
        """Swap the token at *index* for a catalog variable.

        An edit of that token is cancelled first.  Out-of-range indices are
        a no-op.

        Returns:
            The new token, or ``None`` if nothing was replaced.
        """
        if self.sequence.at(index) is None:
            return None
        if self.session.index == index:
            self.session.cancel()
        token = Token.from_variable(variable, placeholder=self.placeholder)
        self.sequence.replace_at(index, token)
        return token

    def evaluate(self, bindings: Mapping[str, float] | None = None) -> EvaluationResult:
        """Flush pending input and evaluate the formula.

        An active edit is committed first so the result reflects it.  A
        failed evaluation leaves the sequence unchanged.
        """
        self.session.commit()
        self._flush_input()
        result = evaluate_result(self.sequence, bindings)
        self.last_result = result
        context: dict[str, Any] = {
            "formula": self.sequence.render(),
            "unresolved": unresolved_names(self.sequence, bindings),
        }
        if result.ok:
            emit_info(EventType.formula_evaluated, f"Evaluated to {result.value:g}", context)
        else:
            context["index"] = result.index
            emit_warning(
                EventType.formula_eval_error,
                result.message,
                context,
                error_code=result.error_kind.value,
            )
        return result

    def reset(self) -> None:
        """Start a new formula."""
        self.session.cancel()
        self.sequence.clear()
        self.input_text = ""
        self.last_result = None

    def _flush_input(self) -> None:
        if self.input_text:
            self.sequence.append(Token.from_text(self.input_text, placeholder=self.placeholder))
            self.input_text = ""
