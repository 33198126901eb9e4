"""Autocomplete matching against a caller-supplied candidate snapshot."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Sequence

import polars as pl
from pydantic import TypeAdapter

from tokencalc.tokens import Variable


_VARIABLE_LIST = TypeAdapter(list[Variable])


def match(candidates: Sequence[Variable], query: str) -> list[Variable]:
    """Return candidates whose name contains *query*, ignoring case.

    The relative order of *candidates* is preserved and no cap is
    applied.  An empty query returns every candidate.
    """
    if not query:
        return list(candidates)
    needle = query.casefold()
    return [c for c in candidates if needle in c.name.casefold()]


def load_catalog(path: Path) -> list[Variable]:
    """Load a candidate snapshot from a ``.json`` or ``.csv`` file.

    JSON files hold a list of ``{id, name, category, value}`` records.
    CSV files need at least ``id`` and ``name`` columns.

    Raises:
        ValueError: For an unsupported file extension.
        pydantic.ValidationError: For records that do not fit ``Variable``.
    """
    suffix = path.suffix.lower()
    if suffix == ".json":
        records: list[dict[str, Any]] = json.loads(path.read_text(encoding="utf-8"))
    elif suffix == ".csv":
        df = pl.read_csv(path, infer_schema_length=0)
        records = [
            {k: v for k, v in row.items() if v is not None}
            for row in df.to_dicts()
        ]
    else:
        raise ValueError(f"Unsupported catalog format: {path.suffix!r}")
    return _VARIABLE_LIST.validate_python(records)
