"""Insight service configuration for the Streamlit view.

Settings priority (per key):
1. st.secrets - server-side secrets.toml (keeps credentials out of the browser)
2. os.environ
3. built-in defaults
"""
import streamlit as st
from typing import Dict

from neuralcanvas.config import Settings, load_settings
from neuralcanvas.insight import InsightClient, make_client


def _secrets() -> Dict[str, str]:
    """
    Flat string view of st.secrets.

    Returns:
        Mapping of top-level scalar secrets, or {} when no secrets file exists.
    """
    try:
        return {k: str(v) for k, v in st.secrets.items() if isinstance(v, (str, int, float))}
    except FileNotFoundError:
        return {}


def get_settings() -> Settings:
    return load_settings(secrets=_secrets())


def get_insight_client() -> InsightClient:
    """Client for the configured provider, with credentials attached server-side."""
    return make_client(get_settings())
