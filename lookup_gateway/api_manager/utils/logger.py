from __future__ import annotations

import logging
import os
from typing import Optional, Dict, Any


COMPONENT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def get_logger(name: str = "gateway") -> logging.Logger:
    """Return a configured logger for a gateway component.

    Configured once per name with a single stream handler. The level comes
    from $LOG_LEVEL (INFO when unset). Records still propagate so test
    harnesses can capture them.
    """

    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=COMPONENT_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
    logger.addHandler(handler)
    return logger


def format_extra(extra: Dict[str, Any]) -> str:
    """Render context as ``key=value`` pairs in a stable order."""

    return " ".join(f"{key}={extra[key]!r}" for key in sorted(extra))


def log_event(
    logger: logging.Logger,
    level: int,
    message: str,
    extra: Optional[Dict[str, Any]] = None,
) -> None:
    """Log an event with optional structured context.

    Args:
        logger: Logger instance from ``get_logger``.
        level: Logging level from ``logging`` (e.g., logging.INFO).
        message: Human-readable message.
        extra: Optional dictionary with additional context.
    """

    if not extra:
        logger.log(level, message)
    else:
        logger.log(level, f"{message} | {format_extra(extra)}")
