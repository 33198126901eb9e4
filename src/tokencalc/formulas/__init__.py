"""Token-sequence formula tokenizing and evaluation.

Public API::

    from tokencalc.formulas import tokenize, evaluate, evaluate_result
"""

from tokencalc.formulas.errors import (
    ENGINE_ERRORS,
    ErrorKind,
    EvaluationError,
    FormulaError,
    FormulaParseError,
)
from tokencalc.formulas.evaluator import (
    EvaluationResult,
    evaluate,
    evaluate_result,
    unresolved_names,
)
from tokencalc.formulas.parser import tokenize

__all__ = [
    "ENGINE_ERRORS",
    "ErrorKind",
    "EvaluationError",
    "EvaluationResult",
    "FormulaError",
    "FormulaParseError",
    "evaluate",
    "evaluate_result",
    "tokenize",
    "unresolved_names",
]
