"""Logging setup.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

from roadrouter_core.utils.config import RouterConfig

TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging(
    level: str = "INFO",
    fmt: str = "text",
    logger_name: str = "roadrouter_core",
) -> logging.Logger:
    """Attach a stream handler to the package logger.

    Args:
        level: Log level name
        fmt: "text" or "json"
        logger_name: Logger to configure

    Returns:
        The configured logger
    """
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    logger = logging.getLogger(logger_name)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(level.upper())
    return logger


def configure_from(config: Optional[RouterConfig] = None) -> logging.Logger:
    """Configure logging from a RouterConfig."""
    config = config or RouterConfig()
    return configure_logging(config.log_level, config.log_format)


__all__ = [
    "JSONFormatter",
    "configure_logging",
    "configure_from",
]
