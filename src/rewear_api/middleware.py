"""Middleware for response headers and request timing.

Request/response logging with request ids lives in
``logging_config.LoggingMiddleware``; this module adds the timing header and
the security headers every API response carries.
"""

import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

# Configure logger
logger = logging.getLogger(__name__)

SLOW_REQUEST_SECONDS = 1.0


class ProcessTimeMiddleware(BaseHTTPMiddleware):
    """Middleware that reports processing time in ``X-Process-Time``.

    Requests slower than ``SLOW_REQUEST_SECONDS`` are logged as warnings.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and time it.

        Args:
            request: HTTP request
            call_next: Next middleware/endpoint in chain

        Returns:
            Response: HTTP response
        """
        start_time = time.time()

        response = await call_next(request)

        process_time = time.time() - start_time
        if process_time > SLOW_REQUEST_SECONDS:
            logger.warning(
                f"Slow request: {request.method} {request.url.path} "
                f"took {process_time:.4f}s",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "process_time": round(process_time, 4),
                },
            )

        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware for adding security headers.

    This middleware adds common security headers to all responses
    to improve application security posture.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Add security headers to response.

        Args:
            request: HTTP request
            call_next: Next middleware/endpoint in chain

        Returns:
            Response: HTTP response with security headers
        """
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        # Interactive docs load scripts and styles; plain API responses need nothing
        if not request.url.path.startswith(("/docs", "/redoc")):
            response.headers["Content-Security-Policy"] = "default-src 'none'"

        return response
