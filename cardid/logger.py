"""
Logging for cardid.

One JSON object per line on stdout (and optionally a file), UTC timestamps.
The level is re-read from configuration on every get_logger() call, so
components fetch their logger per call instead of caching it at import.
"""

from __future__ import annotations

import json
import logging
import os
import sys
import time
from typing import Optional

from . import config


class JsonLineFormatter(logging.Formatter):
    converter = time.gmtime

    def __init__(self) -> None:
        super().__init__(datefmt="%Y-%m-%dT%H:%M:%SZ")

    def format(self, record: logging.LogRecord) -> str:
        return json.dumps({
            "ts": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        })


def _add_file_handler(logger: logging.Logger, path: str, formatter: logging.Formatter) -> None:
    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        file_handler = logging.FileHandler(path)
    except OSError as exc:
        logger.warning("log file %s unavailable: %s", path, exc)
        return
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)


def get_logger(
    name: str = "cardid",
    level: Optional[int] = None,
    to_file: Optional[str] = None,
) -> logging.Logger:
    """Structured stdout logger shared by all cardid components."""
    logger = logging.getLogger(name)
    logger.setLevel(config.log_level() if level is None else level)

    if not logger.handlers:
        formatter = JsonLineFormatter()
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

        path = to_file if to_file is not None else config.log_file()
        if path:
            _add_file_handler(logger, path, formatter)

    return logger
