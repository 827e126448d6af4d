"""
Domain exceptions and the exception handlers that render every failure as
the uniform error envelope.
"""

import logging
from typing import Any, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from schemas.common import ErrorDetail, ErrorResponse, FieldError

logger = logging.getLogger(__name__)


class NotFoundError(Exception):
    """Raised when a referenced entity does not exist."""

    pass


class ReferentialIntegrityError(ValueError):
    """Raised when related entities do not line up (e.g. device/customer mismatch)."""

    pass


# Exceptions that carry a client-facing meaning and pass through the
# database decorators without being logged as failures.
DOMAIN_EXCEPTIONS = (NotFoundError, ReferentialIntegrityError)


def error_response(
    request: Request,
    status_code: int,
    message: str,
    details: Optional[List[FieldError]] = None,
) -> JSONResponse:
    """Build a JSONResponse carrying the error envelope."""
    body = ErrorResponse(
        error=ErrorDetail(message=message, status_code=status_code, details=details),
        path=request.url.path,
        method=request.method,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


def _field_errors(errors: List[dict]) -> List[FieldError]:
    details = []
    for err in errors:
        # Drop the leading "body"/"query"/"path" location segment
        loc = [str(part) for part in err.get("loc", ())[1:]]
        details.append(
            FieldError(field=".".join(loc) or None, message=err.get("msg", "Invalid value"))
        )
    return details


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.info(f"Validation failed for {request.method} {request.url.path}: {exc.errors()}")
    return error_response(request, 400, "Validation failed", _field_errors(exc.errors()))


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    message: Any = exc.detail
    if exc.status_code == 404 and message == "Not Found":
        # Raised by the router itself, not by a handler
        message = f"Route {request.url.path} not found"
    return error_response(request, exc.status_code, str(message))


async def rate_limit_exception_handler(
    request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    logger.warning(f"Rate limit exceeded for {request.client.host if request.client else 'unknown'}: {exc.detail}")
    return error_response(
        request, 429, "Too many requests from this IP, please try again later."
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {type(exc).__name__}: {exc}",
        exc_info=exc,
    )
    return error_response(request, 500, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the envelope-producing handlers to the application."""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
