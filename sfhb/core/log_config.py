"""Centralized logging configuration.

Usage:
    from sfhb.core.log_config import setup_logging
    setup_logging(settings.log_level)   # once, at startup
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"

# Loggers that install their own handlers; route them through the root one.
_PROPAGATED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def _parse_level(value: str | int | None) -> int:
    if isinstance(value, int):
        return value
    level = logging.getLevelName((value or "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(level: str | int | None = "INFO") -> None:
    """Configure the root logger with a single stderr handler."""
    root = logging.getLogger()
    root.setLevel(_parse_level(level))

    if not any(getattr(h, "_sfhb_handler", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._sfhb_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    for name in _PROPAGATED_LOGGERS:
        logger = logging.getLogger(name)
        logger.handlers.clear()
        logger.propagate = True
