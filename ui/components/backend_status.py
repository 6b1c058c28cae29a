# ui/components/backend_status.py
"""
Backend health indicator for the console sidebar.

- Reads BACKEND_URL from core.config.
- Validates the /health payload with Pydantic.
- Cached via st.cache_data so reruns do not hammer the backend.
- Never crashes the UI when the backend is offline.
"""

from __future__ import annotations

import os
from typing import Any, Dict, Optional

import requests
import streamlit as st
from pydantic import BaseModel, Field

from core.config import BACKEND_URL

CACHE_TTL = int(os.getenv("BACKEND_STATUS_TTL", "60"))  # seconds

STATUS_COLORS = {
    "ok": "green",
    "degraded": "orange",
    "error": "red",
    "offline": "red",
}


class HealthSchema(BaseModel):
    """Structured schema for the /health endpoint response."""
    status: str = Field(default="unknown", description="Overall backend status")
    message: Optional[str] = Field(default=None, description="Optional status message")
    version: Optional[str] = Field(default=None, description="Backend version string")
    database_connected: Optional[bool] = Field(default=None, description="Database connectivity flag")
    ai_enabled: Optional[bool] = Field(default=None, description="OpenAI key configured")
    cpu_load: Optional[float] = Field(default=None, description="Backend CPU load")
    memory_usage: Optional[float] = Field(default=None, description="Backend memory usage in MB")
    latency_ms: Optional[float] = Field(default=None, description="Approximate round-trip latency in ms")


@st.cache_data(ttl=CACHE_TTL)
def get_backend_status() -> Dict[str, Any]:
    """Fetch /health, or a structured error dict when it cannot be reached."""
    url = f"{BACKEND_URL.rstrip('/')}/health"
    try:
        resp = requests.get(url, timeout=5)
        if resp.status_code != 200:
            return {"status": "error", "message": f"HTTP {resp.status_code}: {resp.text[:100]}"}
        data = resp.json()
        data["latency_ms"] = round(resp.elapsed.total_seconds() * 1000, 2)
        return HealthSchema(**data).model_dump()
    except requests.exceptions.RequestException as e:
        return {
            "status": "offline",
            "message": f"Backend unreachable at {BACKEND_URL} ({e.__class__.__name__})",
        }


def render_status_bar() -> None:
    """Render a compact backend health summary in the sidebar."""
    st.sidebar.markdown("---")
    st.sidebar.caption("Backend status")

    health = get_backend_status()
    status = health.get("status", "unknown")
    color = STATUS_COLORS.get(status.lower(), "gray")
    st.sidebar.markdown(
        f"<span style='color:{color}; font-weight:600;'>● {status.upper()}</span>",
        unsafe_allow_html=True,
    )
    if health.get("message"):
        st.sidebar.caption(health["message"])
    if health.get("ai_enabled") is False:
        st.sidebar.caption("AI assistant: fallback mode")
