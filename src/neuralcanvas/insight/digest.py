from __future__ import annotations

import json
from typing import Any, Dict, List

from ..models import MISSING, DataDigest, Row, TypedTable

SAMPLE_ROWS = 3

_RESPONSE_SHAPE = {
    "summary": "brief overview of the data",
    "key_findings": ["finding 1", "finding 2", "finding 3"],
    "patterns": ["pattern 1", "pattern 2"],
    "recommendations": ["recommendation 1", "recommendation 2"],
    "data_quality": "excellent/good/fair/poor",
    "interesting_columns": ["col1", "col2"],
}


def build_digest(table: TypedTable, *, sample_rows: int = SAMPLE_ROWS) -> DataDigest:
    return DataDigest(
        columns=table.headers,
        row_count=table.row_count,
        sample=table.rows[:sample_rows],
    )


def row_to_jsonable(row: Row) -> Dict[str, Any]:
    """
    JSON-ready copy of a record.

    Missing cells are dropped and integral floats are written as integers,
    so `{"a": 1.0}` serializes as `{"a":1}`.
    """
    out: Dict[str, Any] = {}
    for k, v in row.items():
        if v is MISSING:
            continue
        if isinstance(v, float) and v.is_integer() and abs(v) <= 2**53:
            out[k] = int(v)
        else:
            out[k] = v
    return out


def sample_to_json(digest: DataDigest) -> str:
    sample: List[Dict[str, Any]] = [row_to_jsonable(r) for r in digest.sample]
    return json.dumps(sample, separators=(",", ":"), ensure_ascii=False)


def build_prompt(digest: DataDigest) -> str:
    shape = json.dumps(_RESPONSE_SHAPE, indent=2)
    return (
        "Analyze this dataset and return ONLY valid JSON (no markdown):\n\n"
        f"{shape}\n\n"
        "Dataset info:\n"
        f"Columns: {', '.join(digest.columns)}\n"
        f"Rows: {digest.row_count}\n"
        f"Sample data: {sample_to_json(digest)}"
    )
