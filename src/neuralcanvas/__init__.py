"""NeuralCanvas: tabular ingestion, summary statistics and AI insight acquisition."""

from .errors import (
    FileTooLargeError,
    IngestError,
    InsightAcquisitionError,
    NeuralCanvasError,
    ParseError,
    UnsupportedFormatError,
)
from .ingest import ingest, ingest_path
from .insight import acquire_insight, fallback_insight
from .models import MISSING, DataDigest, Insight, Stats, TypedTable
from .stats import summarize

__version__ = "0.1.0"

__all__ = [
    "FileTooLargeError",
    "IngestError",
    "InsightAcquisitionError",
    "NeuralCanvasError",
    "ParseError",
    "UnsupportedFormatError",
    "ingest",
    "ingest_path",
    "acquire_insight",
    "fallback_insight",
    "MISSING",
    "DataDigest",
    "Insight",
    "Stats",
    "TypedTable",
    "summarize",
]
