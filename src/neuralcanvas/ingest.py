from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from .config import DEFAULT_MAX_UPLOAD_BYTES
from .errors import FileTooLargeError, ParseError, UnsupportedFormatError
from .models import MISSING, Cell, TypedTable

logger = logging.getLogger(__name__)

# Plain base-10 decimal literal in ASCII digits. Anything float() would also accept beyond
# this (nan, inf, underscores, non-ASCII digits) stays a string.
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def coerce_cell(raw: str) -> Cell:
    """
    Classify one raw field.

    The trimmed string becomes a float iff it is non-empty and is entirely a
    base-10 number; otherwise the trimmed string itself is kept (including
    the empty string).
    """
    s = raw.strip()
    if s and _DECIMAL_RE.fullmatch(s):
        value = float(s)
        # Overflowing literals like 1e999 are not finite numbers.
        if value not in (float("inf"), float("-inf")):
            return value
    return s


def _split_fields(line: str) -> List[str]:
    # No quoting support: embedded commas split the field.
    return line.split(",")


def parse_csv(text: str) -> TypedTable:
    lines = [line for line in text.split("\n") if line.strip()]
    if not lines:
        raise ParseError("CSV content has no header row.")

    headers = [h.strip() for h in _split_fields(lines[0])]
    rows: List[Dict[str, Cell]] = []
    for line in lines[1:]:
        values = _split_fields(line)
        row: Dict[str, Cell] = {}
        for i, header in enumerate(headers):
            # Duplicate headers: the later position overwrites the earlier.
            row[header] = coerce_cell(values[i]) if i < len(values) else MISSING
        rows.append(row)
    return TypedTable.build(headers, rows)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _json_cell(value: Any) -> Cell:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            return str(value)
    if isinstance(value, str):
        return coerce_cell(value)
    if value is None:
        return "null"
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def parse_json(text: str) -> TypedTable:
    try:
        obj = json.loads(text, parse_constant=_reject_constant)
    except ValueError as e:
        raise ParseError(f"JSON content is not valid: {e}") from e

    records = obj if isinstance(obj, list) else [obj]
    first = records[0] if records else None
    # No reconciliation across heterogeneous records: the first record's keys win.
    headers = [str(k) for k in first.keys()] if isinstance(first, dict) else []

    rows: List[Dict[str, Cell]] = []
    for rec in records:
        source = rec if isinstance(rec, dict) else {}
        rows.append({h: _json_cell(source[h]) if h in source else MISSING for h in headers})
    return TypedTable.build(headers, rows)


_PARSERS: Dict[str, Callable[[str], TypedTable]] = {
    ".csv": parse_csv,
    ".json": parse_json,
}


def supported_suffixes() -> List[str]:
    return sorted(_PARSERS)


def _parser_for(filename: str) -> Optional[Callable[[str], TypedTable]]:
    # Name ending, not Path.suffix: a file called ".csv" is still CSV.
    name = filename.lower()
    for suffix, parser in _PARSERS.items():
        if name.endswith(suffix):
            return parser
    return None


def _decode(raw: bytes) -> str:
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ParseError(f"File is not valid UTF-8 text: {e}") from e


def ingest(
    filename: str,
    raw: Union[bytes, str],
    *,
    max_bytes: Optional[int] = DEFAULT_MAX_UPLOAD_BYTES,
) -> TypedTable:
    """
    Turn an uploaded file into a TypedTable.

    Dispatches on the declared filename suffix (.csv or .json). Raises
    UnsupportedFormatError for any other suffix, FileTooLargeError when a
    bytes payload exceeds max_bytes, and ParseError for unreadable content.
    """
    parser = _parser_for(filename)
    if parser is None:
        raise UnsupportedFormatError(
            f"Unsupported file type '{Path(filename).suffix or filename}'. Expected one of: {', '.join(supported_suffixes())}."
        )

    if isinstance(raw, bytes):
        if max_bytes is not None and len(raw) > max_bytes:
            raise FileTooLargeError(
                f"File is {len(raw):,} bytes; the limit is {max_bytes:,} bytes."
            )
        text = _decode(raw)
    else:
        text = raw

    logger.debug("Parsing %s with %s", filename, parser.__name__)
    table = parser(text)
    logger.info("Ingested %s: %d rows x %d columns", filename, table.row_count, len(table.headers))
    return table


def ingest_path(path: Path, *, max_bytes: Optional[int] = DEFAULT_MAX_UPLOAD_BYTES) -> TypedTable:
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    return ingest(path.name, path.read_bytes(), max_bytes=max_bytes)
