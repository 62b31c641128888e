from __future__ import annotations

from typing import Any, Dict, List

import pandas as pd

from .models import MISSING, Cell, Stats, TypedTable

PREVIEW_ROWS = 10


def _is_numeric(value: Any) -> bool:
    return isinstance(value, float)


def numeric_columns(table: TypedTable, *, strict: bool = False) -> List[str]:
    """
    Headers classified as numeric, in header order.

    Default is the single-sample heuristic: a column is numeric iff its value
    in the first row is a float. With strict=True every non-missing value
    must be a float (and at least one must be present).
    """
    if table.is_empty:
        return []

    out: List[str] = []
    for h in table.headers:
        if not strict:
            if _is_numeric(table.rows[0].get(h, MISSING)):
                out.append(h)
            continue
        present = [r.get(h, MISSING) for r in table.rows]
        present = [v for v in present if v is not MISSING]
        if present and all(_is_numeric(v) for v in present):
            out.append(h)
    return out


def summarize(table: TypedTable, *, strict: bool = False) -> Stats:
    total_cols = len(table.headers)
    numeric = len(numeric_columns(table, strict=strict))
    return Stats(
        total_rows=table.row_count,
        total_cols=total_cols,
        numeric_cols=numeric,
        categorical_cols=total_cols - numeric,
    )


def format_cell(value: Cell) -> str:
    if isinstance(value, float):
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    return str(value)


def preview(table: TypedTable, limit: int = PREVIEW_ROWS) -> List[Dict[str, str]]:
    return [
        {h: format_cell(row.get(h, MISSING)) for h in table.headers}
        for row in table.rows[:limit]
    ]


def to_frame(table: TypedTable, limit: int = PREVIEW_ROWS) -> pd.DataFrame:
    """Preview rows as a string DataFrame. Duplicate headers collapse to one column."""
    headers = list(dict.fromkeys(table.headers))
    return pd.DataFrame(preview(table, limit), columns=headers)


def chart_series(table: TypedTable, limit: int = 20) -> tuple[str, List[float]] | None:
    """First numeric column and up to `limit` of its float values, or None."""
    cols = numeric_columns(table)
    if not cols:
        return None
    col = cols[0]
    values = [v for v in (r.get(col, MISSING) for r in table.rows) if _is_numeric(v)]
    return col, values[:limit]
