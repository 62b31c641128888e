from __future__ import annotations


class NeuralCanvasError(Exception):
    """Base class for errors raised by neuralcanvas."""


class IngestError(NeuralCanvasError, ValueError):
    """Raised when an uploaded file cannot be turned into a TypedTable.

    Ingest errors are scoped to the triggering upload: callers report them
    and keep whatever table was loaded before.
    """


class UnsupportedFormatError(IngestError):
    """Raised when the declared filename has no recognised suffix."""


class ParseError(IngestError):
    """Raised when file content cannot be read as its declared format."""


class FileTooLargeError(IngestError):
    """Raised when an upload exceeds the configured size limit."""


class InsightAcquisitionError(NeuralCanvasError, RuntimeError):
    """Raised by insight clients on network, HTTP status or response-shape failures.

    `acquire_insight` recovers from it with the deterministic fallback, so it
    never reaches the view.
    """
