"""Logging setup for mangafas.

Modules log through ``logging.getLogger(__name__)``; entry points (CLI, web
app) call :func:`configure_logging` once.
"""

from __future__ import annotations

import json
import logging
import sys
import time


class JSONFormatter(logging.Formatter):
    """Render a record as one compact JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        base = {
            "level": record.levelname,
            "ts": round(time.time(), 3),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(base, ensure_ascii=False)


def configure_logging(level: int | str = "INFO", json_format: bool = True) -> logging.Logger:
    """Send ``mangafas`` logs to stdout and return the package logger."""
    handler = logging.StreamHandler(sys.stdout)
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))

    logger = logging.getLogger("mangafas")
    logger.handlers = [handler]
    logger.setLevel(level)
    logger.propagate = False
    return logger
