"""
Debug logging middleware for request troubleshooting.

Only added when API_DEBUG=true. Sensitive headers are redacted.
"""

import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from core.config import settings

logger = logging.getLogger("debug")


class DebugLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, query, sanitized headers, status and duration."""

    # Headers that should never be logged in full
    SENSITIVE_HEADERS = {"authorization", "cookie", "set-cookie", "x-api-key"}

    @classmethod
    def sanitize_headers(cls, headers) -> dict:
        return {
            key: "[REDACTED]" if key.lower() in cls.SENSITIVE_HEADERS else value
            for key, value in headers.items()
        }

    async def dispatch(self, request: Request, call_next):
        if not settings.api.debug:
            return await call_next(request)

        started = time.perf_counter()
        logger.debug(
            f"Request: {request.method} {request.url.path}"
            f"{'?' + request.url.query if request.url.query else ''}"
        )
        logger.debug(f"   Client: {request.client.host if request.client else 'unknown'}")
        logger.debug(f"   Headers: {self.sanitize_headers(request.headers)}")

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"   Error: {e}", exc_info=True)
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug(f"   Response: {response.status_code} in {elapsed_ms:.1f}ms")
        return response
