# Correlation ID Middleware
"""Request correlation IDs, echoed back and attached to log records."""

import logging
import uuid
from contextvars import ContextVar
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("fellowship.middleware.correlation")

_correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from context."""
    return _correlation_id.get()


class CorrelationIdFilter(logging.Filter):
    """Adds ``correlation_id`` to every record so formats can reference it."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        return True


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Middleware to extract or generate correlation ID."""

    CORRELATION_HEADER = "X-Correlation-ID"

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get(self.CORRELATION_HEADER) or str(uuid.uuid4())

        token = _correlation_id.set(correlation_id)
        request.state.correlation_id = correlation_id
        logger.debug(f"{request.method} {request.url.path}")

        try:
            response = await call_next(request)
        finally:
            _correlation_id.reset(token)

        response.headers[self.CORRELATION_HEADER] = correlation_id
        return response
