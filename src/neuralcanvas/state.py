from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Optional, Union

from .config import DEFAULT_MAX_UPLOAD_BYTES
from .errors import IngestError
from .ingest import ingest
from .insight import InsightClient, acquire_insight
from .models import Insight, Stats, TypedTable
from .stats import summarize

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """
    What the view currently shows.

    table/insight are replaced, never mutated. request_token identifies the
    latest analysis request; results carrying an older token are dropped.
    """
    filename: Optional[str] = None
    table: Optional[TypedTable] = None
    insight: Optional[Insight] = None
    analyzing: bool = False
    error: Optional[str] = None
    request_token: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def stats(self) -> Optional[Stats]:
        return summarize(self.table) if self.table is not None else None


def load_table(
    state: AppState,
    filename: str,
    raw: Union[bytes, str],
    *,
    max_bytes: Optional[int] = DEFAULT_MAX_UPLOAD_BYTES,
) -> TypedTable:
    """Ingest an upload and make it current.

    On IngestError the previous table stays in place, the message is kept in
    `state.error`, and the error is re-raised for the caller to report.
    """
    try:
        table = ingest(filename, raw, max_bytes=max_bytes)
    except IngestError as e:
        state.error = str(e)
        raise
    with state._lock:
        state.filename = filename
        state.table = table
        state.insight = None
        state.error = None
        # Pending analyses belong to the old table.
        state.request_token += 1
        state.analyzing = False
    return table


def begin_analysis(state: AppState) -> int:
    with state._lock:
        state.request_token += 1
        state.analyzing = True
        return state.request_token


def end_analysis(state: AppState, token: int) -> None:
    """Clear the analyzing flag if `token` is still the latest request."""
    with state._lock:
        if token == state.request_token:
            state.analyzing = False


def set_insight(state: AppState, insight: Insight, token: int) -> bool:
    """Apply an analysis result if it belongs to the latest request."""
    with state._lock:
        if token != state.request_token:
            logger.debug("Dropping stale insight (token %d, latest %d)", token, state.request_token)
            return False
        state.insight = insight
        state.analyzing = False
        return True


def analyze(state: AppState, client: Optional[InsightClient] = None) -> Optional[Insight]:
    """Acquire an insight for the current table. Returns None when no table is loaded."""
    table = state.table
    if table is None:
        return None
    token = begin_analysis(state)
    try:
        insight = acquire_insight(table, client=client)
    finally:
        end_analysis(state, token)
    set_insight(state, insight, token)
    return insight


def reset(state: AppState) -> None:
    with state._lock:
        state.filename = None
        state.table = None
        state.insight = None
        state.error = None
        state.analyzing = False
        state.request_token += 1
