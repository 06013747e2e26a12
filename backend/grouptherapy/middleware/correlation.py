"""
Correlation ID middleware for request tracing.
"""
import time
import uuid
from contextvars import ContextVar
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

# Correlation ID of the request being handled, "" outside a request
correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    return correlation_id_var.get()


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Tags each request with a short ID that appears in every log line and
    writes one access line per request once the response is ready.

    An incoming X-Correlation-ID header is reused (e.g. set by the reverse
    proxy), otherwise a new one is generated. The ID is echoed back in the
    response headers.
    """

    HEADER_NAME = "X-Correlation-ID"

    # Probes are polled constantly by the orchestrator
    QUIET_PATHS = ("/api/status/live", "/api/status/ready")

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get(self.HEADER_NAME) or uuid.uuid4().hex[:8]
        token = correlation_id_var.set(correlation_id)
        started = time.perf_counter()
        try:
            response = await call_next(request)
            response.headers[self.HEADER_NAME] = correlation_id

            path = request.url.path
            if path.startswith("/api/") and path not in self.QUIET_PATHS:
                elapsed_ms = (time.perf_counter() - started) * 1000
                logger.info(f"{request.method} {path} -> {response.status_code} ({elapsed_ms:.1f}ms)")
            return response
        finally:
            correlation_id_var.reset(token)


def correlation_id_filter(record):
    """Loguru filter that stamps every record with the current correlation ID."""
    record["extra"]["correlation_id"] = get_correlation_id() or "-"
    return True
