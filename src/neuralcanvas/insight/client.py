"""Insight service clients.

A client turns a prompt into the raw text the service answered with. All
HTTP and SDK mechanics live here; every failure is raised as
InsightAcquisitionError so the acquisition layer has a single thing to
recover from.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Protocol

import requests
from pydantic import ValidationError

from ..config import Settings, load_settings
from ..errors import InsightAcquisitionError

logger = logging.getLogger(__name__)


class InsightClient(Protocol):
    def complete(self, prompt: str) -> str:  # pragma: no cover - interface
        ...


def extract_text(payload: Any) -> str:
    """Concatenate the `text` blocks of a messages response, in order."""
    if not isinstance(payload, dict):
        raise InsightAcquisitionError("Response body is not a JSON object.")
    content = payload.get("content")
    if not isinstance(content, list):
        raise InsightAcquisitionError("Response body has no 'content' list.")
    parts = [
        block["text"]
        for block in content
        if isinstance(block, dict) and block.get("type") == "text" and isinstance(block.get("text"), str)
    ]
    return "".join(parts)


class MessagesClient:
    """One POST per prompt to a messages-style endpoint (or a proxy in front of it)."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        # Credentials are attached here, server-side, and only when configured.
        if self.settings.api_key:
            headers["x-api-key"] = self.settings.api_key
            headers["anthropic-version"] = self.settings.api_version
        return headers

    def body(self, prompt: str) -> Dict[str, Any]:
        return {
            "model": self.settings.model,
            "max_tokens": self.settings.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }

    def complete(self, prompt: str) -> str:
        url = self.settings.insight_url
        logger.debug("POST %s (model=%s)", url, self.settings.model)
        try:
            resp = requests.post(
                url,
                headers=self.headers(),
                json=self.body(prompt),
                timeout=self.settings.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise InsightAcquisitionError(f"Insight request timed out after {self.settings.timeout}s") from e
        except requests.exceptions.RequestException as e:
            raise InsightAcquisitionError(f"Insight request failed: {e}") from e

        if not 200 <= resp.status_code < 300:
            raise InsightAcquisitionError(f"Insight service returned HTTP {resp.status_code}")

        try:
            payload = resp.json()
        except ValueError as e:
            raise InsightAcquisitionError("Insight service returned a non-JSON body") from e
        return extract_text(payload)


class OpenAIChatClient:
    """Chat-completions client for OpenAI-compatible providers."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def complete(self, prompt: str) -> str:
        from openai import OpenAI, OpenAIError

        try:
            client = OpenAI(
                api_key=self.settings.openai_api_key,
                base_url=self.settings.openai_base_url,
                timeout=self.settings.timeout,
            )
            resp = client.chat.completions.create(
                model=self.settings.openai_model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=self.settings.max_tokens,
                response_format={"type": "json_object"},
            )
        except OpenAIError as e:
            raise InsightAcquisitionError(f"OpenAI request failed: {e}") from e

        if not resp.choices:
            raise InsightAcquisitionError("OpenAI response has no choices.")
        return resp.choices[0].message.content or ""


def make_client(settings: Optional[Settings] = None) -> InsightClient:
    if settings is None:
        try:
            settings = load_settings()
        except ValidationError as e:
            raise InsightAcquisitionError(f"Invalid insight settings: {e}") from e
    if settings.provider == "openai":
        return OpenAIChatClient(settings)
    if settings.provider != "messages":
        logger.warning("Unknown insight provider %r; using the messages endpoint.", settings.provider)
    return MessagesClient(settings)
