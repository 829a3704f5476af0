"""
Logging setup for the DevDocs MCP server.

Logs go to stderr only: stdout carries the MCP stdio stream.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

from .models import LOG_FORMAT, LOG_LEVEL


class JsonFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, component, message."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "component": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


TEXT_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> logging.Logger:
    """
    Configure the "devdocs" logger hierarchy.

    Args:
        level: Level name; defaults to LOG_LEVEL
        fmt: "json" or "text"; defaults to LOG_FORMAT

    Returns:
        The configured "devdocs" logger
    """
    handler = logging.StreamHandler(sys.stderr)
    if (fmt or LOG_FORMAT) == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    logger = logging.getLogger("devdocs")
    logger.handlers[:] = [handler]
    logger.setLevel((level or LOG_LEVEL).upper())
    logger.propagate = False
    return logger
