"""
Structured logging for the formula service.

The dispatcher tags its records with the endpoint and model it called; the
service adds its own name to every entry. Prompts and API keys are never
logged.

JSON to stdout by default; LOG_FORMAT=text switches to a plain
single-line format for local runs.

Structured fields are passed as `extra={"_extra": {...}}` and land under the
"extra" key of the JSON entry.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

_TEXT_FORMAT = "%(asctime)s %(levelname)s [%(service)s] %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per line, stamped with the time the record was created."""

    def __init__(self, service_name: str) -> None:
        super().__init__()
        self._service = service_name

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "service": self._service,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)

        extra = getattr(record, "_extra", None)
        if extra:
            entry["extra"] = extra

        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    def __init__(self, service_name: str) -> None:
        super().__init__(_TEXT_FORMAT)
        self._service = service_name

    def format(self, record: logging.LogRecord) -> str:
        record.service = self._service
        line = super().format(record)
        extra = getattr(record, "_extra", None)
        if extra:
            line += " " + " ".join(f"{k}={v}" for k, v in extra.items())
        return line


def setup_logging(service_name: str) -> logging.Logger:
    """
    Configure the root logger for a service.

    Call once at service startup (in the FastAPI lifespan).
    Returns the service-specific logger.
    """
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    fmt = os.environ.get("LOG_FORMAT", "json").lower()

    handler = logging.StreamHandler(sys.stdout)
    if fmt == "text":
        handler.setFormatter(TextFormatter(service_name))
    else:
        handler.setFormatter(JSONFormatter(service_name))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # httpx logs every request line at INFO
    for noisy in ("uvicorn.access", "httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logger = logging.getLogger(service_name)
    logger.info(
        "Logging initialized",
        extra={"_extra": {"level": level_name, "format": fmt}},
    )
    return logger
