"""Structured Logging — JSON log records and per-request access logging.

Invariants:
    - Every record carries timestamp (record creation time, UTC), level, logger and message
    - Habit/tag ids, error codes and request fields are lifted out of `extra` when present
    - setup_logging is idempotent: calling it again replaces the handler it installed
    - Access log lines never include request bodies

Design Decisions:
    - stdlib logging + JSONFormatter: no logging dependency, services log with `extra={...}`
    - Request timing done in an HTTP middleware, not per route
    - SQLAlchemy engine logger pinned to WARNING unless sql_echo is set
"""

import json
import logging
import time
from datetime import datetime, timezone

from fastapi import Request


EXTRA_FIELDS: tuple[str, ...] = (
    "habit_id", "tag_id", "error_code",
    "method", "path", "status_code", "duration_ms",
)

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_access_logger = logging.getLogger("devhabits.access")
_installed_handler: logging.Handler | None = None


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is None:
                continue
            # ids arrive as UUIDs; numbers stay numbers
            log[key] = val if isinstance(val, (int, float)) else str(val)
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def build_formatter(fmt: str) -> logging.Formatter:
    if fmt == "json":
        return JSONFormatter()
    return logging.Formatter(TEXT_FORMAT)


def setup_logging(level: str = "INFO", fmt: str = "json", sql_echo: bool = False):
    """Install the application handler on the root logger."""
    global _installed_handler
    if _installed_handler is not None:
        logging.root.removeHandler(_installed_handler)

    handler = logging.StreamHandler()
    handler.setFormatter(build_formatter(fmt))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if sql_echo else logging.WARNING,
    )
    _installed_handler = handler


async def log_requests(request: Request, call_next):
    """HTTP middleware: one access log line per request with its duration."""
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = round((time.perf_counter() - start) * 1000, 2)
    _access_logger.info(
        f"{request.method} {request.url.path} -> {response.status_code}",
        extra={
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )
    response.headers["X-Process-Time-Ms"] = str(duration_ms)
    return response
