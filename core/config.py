"""
core/config.py
--------------
Central configuration hub for the backend, the API client and the Streamlit console.

- Reads backend, database and OpenAI settings from environment variables.
- Provides global constants for API access.
"""

from __future__ import annotations
import os

# ---------------------------------------------------------------------------
# Backend configuration
# ---------------------------------------------------------------------------

BACKEND_URL: str = os.getenv("BACKEND_URL", "http://127.0.0.1:8000").rstrip("/")
API_PREFIX: str = "/api"

# Bearer token forwarded with every console request (optional)
API_TOKEN: str | None = os.getenv("API_TOKEN")

# Seconds; unset means requests wait for the server indefinitely
_timeout = os.getenv("API_TIMEOUT")
API_TIMEOUT: float | None = float(_timeout) if _timeout else None

BACKEND_VERSION: str = os.getenv("BACKEND_VERSION", "1.0")

# ---------------------------------------------------------------------------
# Database configuration
# ---------------------------------------------------------------------------

DEFAULT_DB_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "database", "salesroles.db"
)
DATABASE_URL: str = os.getenv("DATABASE_URL", f"sqlite:///{DEFAULT_DB_PATH}")
SEED_ON_STARTUP: bool = os.getenv("SEED_ON_STARTUP", "1").lower() in ("1", "true", "yes")

# ---------------------------------------------------------------------------
# AI text generation
# ---------------------------------------------------------------------------

OPENAI_API_KEY: str | None = os.getenv("OPENAI_API_KEY")
OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

