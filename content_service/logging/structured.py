"""JSON-lines logging shared by the Lambda handler and the dev server.

Every record is one JSON object on stdout, so CloudWatch needs no parsing
rules. Set LOG_FILE to mirror the stream into a file as well.
"""

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone

from content_service.config.settings import get_settings

ROOT_LOGGER = "content_service"

# Set by the dispatcher for the lifetime of one invocation
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class JSONFormatter(logging.Formatter):
    """One JSON object per record, stamped with the current request id."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": request_id_var.get(""),
        }
        entry.update(getattr(record, "log_data", None) or {})
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def _handlers(log_file: str) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    return handlers


def setup_logging() -> None:
    """Point the content_service logger tree at JSON handlers.

    Safe to call more than once; earlier handlers are replaced.
    """
    settings = get_settings()

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    logger.handlers.clear()

    formatter = JSONFormatter()
    for handler in _handlers(settings.log_file):
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    # The Lambda runtime installs its own root handler
    logger.propagate = False


def get_logger(name: str = "") -> logging.Logger:
    """Return the service logger, or a child of it for one area (e.g. "admin")."""
    if not name:
        return logging.getLogger(ROOT_LOGGER)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def generate_request_id() -> str:
    return uuid.uuid4().hex[:12]


class RequestTimer:
    """Wall-clock milliseconds spent inside a `with` block, in `elapsed_ms`."""

    def __init__(self):
        self.started: float = 0
        self.elapsed_ms: float = 0

    def __enter__(self):
        self.started = time.perf_counter()
        return self

    def __exit__(self, *exc):
        self.elapsed_ms = round((time.perf_counter() - self.started) * 1000, 2)
