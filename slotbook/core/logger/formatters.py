"""
Formatters: JSON lines for the log file, plain text for the console.
"""
from __future__ import annotations

import json
import logging
import traceback
from datetime import datetime, timezone
from typing import Any, Optional

from slotbook.core.exceptions import ProjectError


class JsonFormatter(logging.Formatter):
    """
    One JSON object per line. Domain errors attached via exc_info are
    expanded with their code, status and details.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_dict: dict[str, Any] = {
            "timestamp": _utc_iso(record.created),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "pathname": record.pathname,
            "lineno": record.lineno,
        }
        if record.exc_info:
            exc = record.exc_info[1]
            if isinstance(exc, ProjectError):
                log_dict["error"] = exc.to_log_dict()
            log_dict["exception"] = "".join(
                traceback.format_exception(*record.exc_info)
            ).strip()
        extra = getattr(record, "extra", None)
        if extra:
            log_dict["extra"] = extra
        return json.dumps(log_dict, default=str, ensure_ascii=False)


def _utc_iso(created: float) -> str:
    return datetime.fromtimestamp(created, tz=timezone.utc).isoformat()


class PlainConsoleFormatter(logging.Formatter):
    """Human-readable format for console."""

    def __init__(self, fmt: Optional[str] = None, datefmt: Optional[str] = None) -> None:
        super().__init__(
            fmt=fmt or "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt=datefmt or "%Y-%m-%d %H:%M:%S",
        )
