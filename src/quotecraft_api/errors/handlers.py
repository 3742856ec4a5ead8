"""FastAPI exception handlers.

Every failure leaves the API in the same envelope::

    {"error": {"code", "message", "details", "request_id", "timestamp"}}
"""

import logging
import uuid
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError

from quotecraft_api.errors.exceptions import QuotaExceededError, QuoteCraftError, StorageError
from quotecraft_api.models.responses import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)


def _request_id(request: Request) -> str:
    # Set by RequestContextMiddleware; absent only if it is not installed
    return getattr(request.state, "request_id", None) or str(uuid.uuid4())


def create_error_response(
    error_code: str,
    message: str,
    status_code: int,
    details: dict[str, Any] | None = None,
    request_id: str | None = None,
) -> JSONResponse:
    """Create a standardized error response."""
    body = ErrorResponse(
        error=ErrorDetail(
            code=error_code,
            message=message,
            details=details or None,
            request_id=request_id or str(uuid.uuid4()),
        )
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def quotecraft_exception_handler(request: Request, exc: QuoteCraftError) -> JSONResponse:
    """Render a QuoteCraftError with its own status and code."""
    request_id = _request_id(request)
    logger.warning(
        "%s %s failed: %s - %s",
        request.method,
        request.url.path,
        exc.error_code,
        exc.message,
        extra={"request_id": request_id, "details": exc.details},
    )

    response = create_error_response(
        error_code=exc.error_code,
        message=exc.message,
        status_code=exc.status_code,
        details=exc.details,
        request_id=request_id,
    )

    # Quota refusals are not retryable until the month rolls over
    if isinstance(exc, QuotaExceededError):
        response.headers["X-Quota-Limit"] = str(exc.details["limit"])
        if "reset_at" in exc.details:
            response.headers["X-Quota-Reset"] = exc.details["reset_at"]

    return response


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report body/query validation failures as 400 with one entry per field."""
    errors = [
        {
            # Drop the leading "body"/"query" segment
            "field": ".".join(str(part) for part in error["loc"][1:]) or str(error["loc"][0]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    request_id = _request_id(request)
    logger.info(
        "Rejected %s %s: %d invalid field(s)",
        request.method,
        request.url.path,
        len(errors),
        extra={"request_id": request_id},
    )

    return create_error_response(
        error_code="VALIDATION_ERROR",
        message="Request validation failed",
        status_code=400,
        details={"errors": errors},
        request_id=request_id,
    )


async def storage_exception_handler(request: Request, exc: RedisError) -> JSONResponse:
    """Turn a Redis failure into a STORAGE_ERROR without leaking driver text."""
    request_id = _request_id(request)
    logger.error("Storage backend error: %s", exc, extra={"request_id": request_id})
    return await quotecraft_exception_handler(request, StorageError())


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    request_id = _request_id(request)
    logger.exception("Unhandled exception", extra={"request_id": request_id})

    return create_error_response(
        error_code="INTERNAL_ERROR",
        message="An unexpected error occurred",
        status_code=500,
        request_id=request_id,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(QuoteCraftError, quotecraft_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RedisError, storage_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)
