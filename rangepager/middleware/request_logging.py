"""Request logging middleware for debugging Range pagination."""

import logging
from starlette.middleware.base import BaseHTTPMiddleware
from fastapi import Request

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log Range requests and the pagination headers sent back."""

    async def dispatch(self, request: Request, call_next):
        """Log pagination headers and call next middleware."""
        range_header = request.headers.get("Range")

        response = await call_next(request)

        # Only log requests that took part in pagination
        if range_header is None and "Accept-Ranges" not in response.headers:
            return response

        logger.info(
            f"{request.method} {request.url.path} Range={range_header!r} -> {response.status_code}",
            extra={
                "path": str(request.url.path),
                "method": request.method,
                "status_code": response.status_code,
                "range": range_header,
                "content_range": response.headers.get("Content-Range"),
                "next_range": response.headers.get("Next-Range")
            }
        )
        return response
