"""
Environment configuration for cardid.

Values are read at call time so tests can monkeypatch the environment.
Nothing configured here may influence contract outputs or committed state.
"""

from __future__ import annotations

import logging
import os


DEFAULT_LOG_LEVEL = logging.WARNING


def log_level() -> int:
    """
    Return the logging level from CARDID_LOG_LEVEL.

    Accepts standard level names (case-insensitive). Unknown or empty values
    fall back to WARNING.
    """
    raw = os.getenv("CARDID_LOG_LEVEL")
    if raw is None:
        return DEFAULT_LOG_LEVEL
    name = raw.strip().upper()
    level = logging.getLevelName(name) if name else None
    if isinstance(level, int):
        return level
    return DEFAULT_LOG_LEVEL


def log_file() -> str | None:
    """Optional extra log file from CARDID_LOG_FILE."""
    raw = os.getenv("CARDID_LOG_FILE")
    if raw is None:
        return None
    s = raw.strip()
    return s or None
