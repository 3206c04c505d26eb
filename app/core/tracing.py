"""
Request tracing: one trace id per request, carried in a context variable.

The id is read from the X-Trace-Id header (or generated), echoed on the
response, attached to log records and copied into every event envelope.
"""

import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

TRACE_ID_HEADER = "X-Trace-Id"

_trace_id: ContextVar[Optional[str]] = ContextVar("trace_id", default=None)


def get_trace_id() -> Optional[str]:
    return _trace_id.get()


def set_trace_id(trace_id: str):
    """Bind trace_id to the current context. Returns the token for reset."""
    return _trace_id.set(trace_id)


def reset_trace_id(token) -> None:
    _trace_id.reset(token)


class TracingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        trace_id = request.headers.get(TRACE_ID_HEADER) or str(uuid.uuid4())
        token = set_trace_id(trace_id)
        try:
            response = await call_next(request)
        finally:
            reset_trace_id(token)
        response.headers[TRACE_ID_HEADER] = trace_id
        return response
