from __future__ import annotations

import json
import logging
import re
from typing import Optional

from pydantic import ValidationError

from ..config import Settings
from ..errors import InsightAcquisitionError
from ..models import Insight, TypedTable
from .client import InsightClient, make_client
from .digest import build_digest, build_prompt

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```json\n?|```\n?")


def strip_fences(text: str) -> str:
    """Remove Markdown code-fence delimiters anywhere in the text, then trim."""
    return _FENCE_RE.sub("", text).strip()


def parse_insight_text(text: str) -> Insight:
    """Parse service output into an Insight or raise InsightAcquisitionError."""
    cleaned = strip_fences(text)
    try:
        obj = json.loads(cleaned)
    except ValueError as e:
        raise InsightAcquisitionError(f"Insight text is not valid JSON: {e}") from e
    if not isinstance(obj, dict):
        raise InsightAcquisitionError("Insight JSON must be an object.")
    try:
        return Insight.model_validate({**obj, "generated_by": "service"})
    except ValidationError as e:
        raise InsightAcquisitionError(f"Insight JSON does not match the expected shape: {e}") from e


def fallback_insight(table: TypedTable) -> Insight:
    """Deterministic local insight; depends only on the row count and headers."""
    return Insight(
        summary=f"Dataset loaded successfully with {table.row_count} records",
        key_findings=[
            "Multiple data columns detected",
            "Numeric and categorical data present",
            "Ready for visualization",
        ],
        patterns=["Data appears structured", "No major anomalies detected"],
        recommendations=["Explore correlations", "Check for outliers"],
        data_quality="good",
        interesting_columns=list(table.headers[:3]),
        generated_by="fallback",
    )


def acquire_insight(
    table: TypedTable,
    client: Optional[InsightClient] = None,
    settings: Optional[Settings] = None,
) -> Insight:
    """Request an Insight for the table; never raises.

    - Sends only the bounded digest (columns, row count, first 3 rows).
    - Makes exactly one service call through `client`.
    - Any acquisition failure is logged and replaced by `fallback_insight`.
    """
    prompt = build_prompt(build_digest(table))
    try:
        if client is None:
            client = make_client(settings)
        text = client.complete(prompt)
        insight = parse_insight_text(text)
    except InsightAcquisitionError as e:
        logger.warning("Insight acquisition failed, using fallback: %s", e)
        return fallback_insight(table)
    logger.info("Insight acquired from service (%d findings)", len(insight.key_findings))
    return insight
