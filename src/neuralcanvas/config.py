from __future__ import annotations

import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field

DEFAULT_MESSAGES_URL = "https://api.anthropic.com/v1/messages"
DEFAULT_MODEL = "claude-sonnet-4-20250514"
DEFAULT_MAX_TOKENS = 1200
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


class Settings(BaseModel):
    """
    Runtime configuration.

    provider: "messages" (raw HTTP messages endpoint) or "openai" (openai SDK)
    insight_url: endpoint or server-side proxy receiving the messages request
    api_key: credential attached server-side; when None the header is omitted
             and an authenticating proxy is expected in front of insight_url
    timeout: seconds before the insight request counts as failed
    """
    provider: str = "messages"
    insight_url: str = DEFAULT_MESSAGES_URL
    model: str = DEFAULT_MODEL
    max_tokens: int = Field(default=DEFAULT_MAX_TOKENS, gt=0)
    timeout: float = Field(default=30.0, gt=0)
    api_version: str = "2023-06-01"
    api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    openai_base_url: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    max_upload_bytes: int = Field(default=DEFAULT_MAX_UPLOAD_BYTES, gt=0)
    log_level: str = "WARNING"


def _first(*values: Optional[str]) -> Optional[str]:
    for v in values:
        if v:
            return v
    return None


def load_settings(
    environ: Optional[Mapping[str, str]] = None,
    secrets: Optional[Mapping[str, str]] = None,
) -> Settings:
    """
    Build Settings from the environment.

    Priority per key:
    1. secrets (e.g. st.secrets in the web view)
    2. environ (os.environ by default)
    3. built-in default
    """
    env = os.environ if environ is None else environ
    sec = secrets or {}

    def get(name: str) -> Optional[str]:
        return _first(sec.get(name), env.get(name))

    values: dict[str, object] = {}
    mapping = {
        "provider": "NEURALCANVAS_INSIGHT_PROVIDER",
        "insight_url": "NEURALCANVAS_INSIGHT_URL",
        "model": "NEURALCANVAS_INSIGHT_MODEL",
        "max_tokens": "NEURALCANVAS_INSIGHT_MAX_TOKENS",
        "timeout": "NEURALCANVAS_INSIGHT_TIMEOUT",
        "api_version": "NEURALCANVAS_API_VERSION",
        "api_key": "ANTHROPIC_API_KEY",
        "openai_api_key": "OPENAI_API_KEY",
        "openai_base_url": "OPENAI_BASE_URL",
        "openai_model": "NEURALCANVAS_OPENAI_MODEL",
        "max_upload_bytes": "NEURALCANVAS_MAX_UPLOAD_BYTES",
        "log_level": "NEURALCANVAS_LOG_LEVEL",
    }
    for field_name, var in mapping.items():
        v = get(var)
        if v is not None:
            values[field_name] = v

    if "provider" in values:
        values["provider"] = str(values["provider"]).strip().lower()
    return Settings(**values)
