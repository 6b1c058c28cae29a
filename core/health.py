"""
core/health.py
--------------
System health diagnostics for the SalesRoles backend.

Purpose
-------
- Used by the FastAPI `/health` endpoint and the Streamlit status badge.
- Validates database connectivity.
- Reports backend uptime, version and CPU/memory usage.
- Returns JSON-safe dict ready for serialization.
"""

from __future__ import annotations

import platform
import time
from typing import Any, Dict

import psutil
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from core.config import BACKEND_VERSION, OPENAI_API_KEY
from database import queries


# Cache the process start time for uptime calculation
START_TIME = time.time()


def system_health() -> Dict[str, Any]:
    """
    Return structured backend health diagnostics.

    Returns
    -------
    dict
        JSON-safe health report compatible with the console HealthSchema.
    """
    status = "ok"
    message = "Backend operational."
    database_connected = False

    # --- Database connectivity test ---
    try:
        with queries.current_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
        database_connected = True
    except SQLAlchemyError as e:
        status = "degraded"
        message = f"Database check failed: {e.__class__.__name__}"

    # --- System metrics ---
    try:
        cpu_load = psutil.cpu_percent(interval=0.1)
        memory_usage = round(psutil.virtual_memory().used / (1024 * 1024), 2)
    except Exception:
        cpu_load = None
        memory_usage = None

    return {
        "status": status,
        "message": message,
        "version": BACKEND_VERSION,
        "database_connected": database_connected,
        "ai_enabled": bool(OPENAI_API_KEY),
        "cpu_load": cpu_load,
        "memory_usage": memory_usage,
        "uptime_sec": round(time.time() - START_TIME, 2),
        "system": platform.system(),
        "release": platform.release(),
    }
