from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Union

from pydantic import BaseModel, Field


class _Missing:
    """Sentinel for a header the source record had no value for."""

    _instance: "_Missing | None" = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __str__(self) -> str:
        # Previews show what the browser build showed for an absent cell.
        return "undefined"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "MISSING"


MISSING = _Missing()

Cell = Union[float, str, _Missing]
Row = Mapping[str, Cell]


@dataclass(frozen=True)
class TypedTable:
    """
    Typed row set produced by ingestion.

    headers: column names in source order (duplicates allowed)
    rows: one read-only mapping per record; every header is a key, holding a
          float, a str, or MISSING
    """
    headers: tuple[str, ...]
    rows: tuple[Row, ...]

    @classmethod
    def build(cls, headers: list[str], rows: list[dict[str, Cell]]) -> "TypedTable":
        return cls(
            headers=tuple(headers),
            rows=tuple(MappingProxyType(dict(r)) for r in rows),
        )

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def is_empty(self) -> bool:
        return not self.rows


@dataclass(frozen=True)
class Stats:
    total_rows: int = 0
    total_cols: int = 0
    numeric_cols: int = 0
    categorical_cols: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "totalRows": self.total_rows,
            "totalCols": self.total_cols,
            "numericCols": self.numeric_cols,
            "categoricalCols": self.categorical_cols,
        }


@dataclass(frozen=True)
class DataDigest:
    """Bounded subset of a TypedTable that is allowed to leave the process."""

    columns: tuple[str, ...]
    row_count: int
    sample: tuple[Row, ...] = field(default_factory=tuple)


class Insight(BaseModel):
    """
    Structured insight shown next to the table.

    Produced either by the external analysis service or by the local
    fallback; both must populate all six fields. data_quality is expected to
    be one of excellent/good/fair/poor but is not enforced.
    """
    summary: str
    key_findings: list[str]
    patterns: list[str]
    recommendations: list[str]
    data_quality: str
    interesting_columns: list[str]
    generated_by: str = Field(default="service", exclude=True)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump()
