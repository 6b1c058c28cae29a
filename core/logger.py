"""
core/logger.py
--------------
Shared logger factory. Every module logs through `get_logger(__name__)` so
the backend, the store and the Streamlit pages emit one consistent format.
"""

from __future__ import annotations

import logging

from core.config import LOG_LEVEL

LOG_FORMAT = "%(levelname)s : %(asctime)s | %(name)s | %(message)s"


def get_logger(name: str = "salesroles") -> logging.Logger:
    """Return a logger with a single stream handler attached."""
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

    return logger
