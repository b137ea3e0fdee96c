"""Central logging setup for the project."""
from __future__ import annotations
import logging
import os
import sys
from typing import Any

MAX_FIELD_CHARS = 200
_SECRET_MARKERS = ("api_key", "apikey", "authorization", "token", "secret", "password")


def setup_logging(level: int | None = None) -> None:
    """
    Configure root logger with sane defaults.

    Args:
        level: Logging level. Falls back to GENOVA_LOG_LEVEL, then INFO.
    """
    if level is None:
        resolved = logging.getLevelName(os.getenv("GENOVA_LOG_LEVEL", "INFO").upper())
        level = resolved if isinstance(resolved, int) else logging.INFO
    handler = logging.StreamHandler(sys.stdout)
    fmt = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
    handler.setFormatter(logging.Formatter(fmt))
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def _is_secret(key: str) -> bool:
    lowered = key.lower()
    return any(marker in lowered for marker in _SECRET_MARKERS)


def _bounded(value: Any, limit: int = MAX_FIELD_CHARS) -> str:
    text = value if isinstance(value, str) else repr(value)
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def format_event(event: str, **fields: Any) -> str:
    """
    Render a diagnostic event as a single `event key=value ...` line.

    Values are size-bounded and secret-looking keys are masked.
    """
    parts = [event]
    for key, value in fields.items():
        shown = "***" if _is_secret(key) and not isinstance(value, bool) else _bounded(value)
        parts.append(f"{key}={shown!r}" if isinstance(value, str) else f"{key}={shown}")
    return " ".join(parts)


def log_event(logger: logging.Logger, event: str, level: int = logging.INFO, **fields: Any) -> None:
    """Emit one structured diagnostic line on `logger`."""
    if logger.isEnabledFor(level):
        logger.log(level, "%s", format_event(event, **fields))
