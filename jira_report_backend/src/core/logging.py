from __future__ import annotations

import logging
import sys
import time
from typing import Callable

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

# Loggers of the HTTP stack that report every JIRA round trip at INFO.
TRANSPORT_LOGGERS = ("httpx", "httpcore")


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the report service."""
    level = level.upper()
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(handler)
    root.setLevel(level)
    transport_level = logging.DEBUG if level == "DEBUG" else logging.WARNING
    for name in TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each report request with its query string, status and latency."""

    async def dispatch(self, request: Request, call_next: Callable):
        logger = logging.getLogger("jira_report.request")
        start = time.perf_counter()
        status_code = None
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000.0
            target = request.url.path
            if request.url.query:
                target = f"{target}?{request.url.query}"
            # upstream JIRA failures surface as 5xx
            log_level = logging.WARNING if status_code is None or status_code >= 500 else logging.INFO
            logger.log(log_level, "%s %s -> %s (%.2f ms)", request.method, target, status_code or "n/a", elapsed_ms)


def install_request_logging(app: FastAPI) -> None:
    app.add_middleware(RequestLoggingMiddleware)
