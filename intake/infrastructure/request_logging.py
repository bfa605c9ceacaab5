"""Request Logging: one log line per HTTP response with method, path, status, latency.

Invariants:
    - Every response is logged at DEBUG as "[response] METHOD path status (Nms)"
    - Unhandled exceptions are logged and re-raised (error handlers still answer)

Design Decisions:
    - Starlette BaseHTTPMiddleware: body stream is passed through untouched,
      so upload routes still read the multipart body lazily
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger("intake.http")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status code and duration for each request."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.error(
                f"[response] {request.method} {request.url.path} failed",
                extra={"method": request.method, "path": request.url.path},
                exc_info=True,
            )
            raise
        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        logger.debug(
            f"[response] {request.method} {request.url.path} "
            f"{response.status_code} ({duration_ms}ms)",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        return response
