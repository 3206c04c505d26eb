"""
Logging setup: a single stdout handler, every record tagged with the trace id.
"""

import logging
import sys
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from app.core.tracing import get_trace_id

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [trace_id=%(trace_id)s] %(message)s"

logger = logging.getLogger("app.http")


class TraceIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id = get_trace_id() or "-"
        return True


def configure_logging(level: str = "INFO") -> None:
    """Install the stdout handler on the root logger. Safe to call twice."""
    root = logging.getLogger()
    root.setLevel(level.upper())
    for handler in root.handlers:
        if getattr(handler, "_app_handler", False):
            return
    handler = logging.StreamHandler(sys.stdout)
    handler._app_handler = True
    handler.addFilter(TraceIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and duration. Never logs bodies."""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        path = request.url.path
        if request.url.query:
            path = f"{path}?{request.url.query}"
        logger.info(
            "HTTP REQUEST %s %s status=%s duration_ms=%.2f client_ip=%s",
            request.method,
            path,
            response.status_code,
            duration_ms,
            request.client.host if request.client else "-",
        )
        return response
