# src/logging/handlers.py — v1
"""Size-rotated file handler for run logs.

Sizes are strings such as "512KB", "10MB" or "1.5GB"; a bare number is a
byte count. Retention is the number of rotated files kept.
"""

from __future__ import annotations

import logging
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

_SIZE_RE = re.compile(r"^(\d+(?:\.\d+)?)\s*([KMG]?B?)$", re.IGNORECASE)
_MULTIPLIERS: dict[str, int] = {
    "": 1,
    "B": 1,
    "K": 1024,
    "KB": 1024,
    "M": 1024**2,
    "MB": 1024**2,
    "G": 1024**3,
    "GB": 1024**3,
}


def parse_size(size_str: str) -> int:
    """Convert a human size string to bytes."""
    match = _SIZE_RE.match(size_str.strip())
    if not match:
        raise ValueError(f"Invalid size format: {size_str!r}. Use e.g. '10MB'.")
    value = float(match.group(1))
    unit = match.group(2).upper()
    size = int(value * _MULTIPLIERS[unit])
    if size <= 0:
        raise ValueError(f"Log rotation size must be positive: {size_str!r}")
    return size


def create_rotating_handler(
    log_file: str,
    rotation: str = "10MB",
    retention: int = 30,
    level: int = logging.NOTSET,
) -> RotatingFileHandler:
    """Create a rotating file handler, creating the log directory if needed."""
    path = Path(log_file).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        filename=str(path),
        maxBytes=parse_size(rotation),
        backupCount=max(retention, 0),
        encoding="utf-8",
        delay=True,
    )
    handler.setLevel(level)
    return handler
