"""Insight acquisition.

Builds a bounded digest of a table, asks the external analysis service for
a structured Insight, and falls back to a deterministic one on any failure.
"""

from .acquire import acquire_insight, fallback_insight, parse_insight_text
from .client import InsightClient, MessagesClient, OpenAIChatClient, make_client
from .digest import build_digest, build_prompt
from .render import render_insight_markdown

__all__ = [
    "acquire_insight",
    "fallback_insight",
    "parse_insight_text",
    "InsightClient",
    "MessagesClient",
    "OpenAIChatClient",
    "make_client",
    "build_digest",
    "build_prompt",
    "render_insight_markdown",
]
