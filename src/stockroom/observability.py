"""Logging setup and request logging.

setup_logging() is called once at startup; every module logs through
logging.getLogger(__name__).
"""

import json
import logging
import time
from datetime import datetime, timezone

from fastapi import FastAPI, Request

logger = logging.getLogger("stockroom.requests")

# Paths that are polled often enough to drown the log
QUIET_PATHS = frozenset({"/health", "/ping"})


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in ("method", "path", "status_code", "duration_ms"):
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "text") -> None:
    """Configure the root logger.

    Args:
        level: Log level name, e.g. "INFO" or "DEBUG".
        fmt: "json" for structured output, anything else for plain text.
    """
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logging.root.handlers = [handler]
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))


def install_request_logging(app: FastAPI) -> None:
    """Log status, method, path and duration of every served request."""

    @app.middleware("http")
    async def log_request(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000

        if request.method != "OPTIONS" and request.url.path.rstrip("/") not in QUIET_PATHS:
            logger.info(
                "%s %s %s %.1fms",
                response.status_code,
                request.method,
                request.url.path,
                duration_ms,
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": round(duration_ms, 1),
                },
            )
        return response
