"""
Error handling middleware.

Standardizes all API error responses to include:
- error_code: machine-readable identifier
- message: human-readable description
- hint: suggested recovery action
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from kardex.application.dto.responses import ErrorResponse
from kardex.config import get_logger
from kardex.core.exceptions import (
    ItemNotFoundError,
    KardexError,
    QueryCancelledError,
    StorageError,
    ValidationError,
)

logger = get_logger(__name__)


# Ordered: subclasses before their bases
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    ItemNotFoundError: status.HTTP_404_NOT_FOUND,
    QueryCancelledError: status.HTTP_504_GATEWAY_TIMEOUT,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ValueError: status.HTTP_400_BAD_REQUEST,
}

HINT_MAP: dict[str, str] = {
    "INVALID_RANGE": "date_from must be on or before date_to.",
    "RANGE_TOO_LARGE": "Narrow the date range or raise KARDEX_MAX_WINDOW_DAYS.",
    "MALFORMED_WINDOW": "The ledger window has no days to classify.",
    "ITEM_NOT_FOUND": "Check the item code and try GET /api/items?q= to search items.",
    "REPOSITORY_ERROR": "The movement repository query failed. Check server logs.",
    "QUERY_CANCELLED": "The query was aborted. Retry, possibly with a smaller window.",
    "VALIDATION_ERROR": "Check the request parameters against the API schema.",
}

STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters.",
    404: "The requested resource was not found. Verify the code.",
    422: "The request could not be processed. Check the input format.",
    500: "An internal error occurred. Check server logs.",
    504: "The request timed out. Retry later.",
}


def _get_hint(error_code: str, status_code: int) -> str:
    """Resolve hint from error code, falling back to status-based hint."""
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def _status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def build_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Convert an exception to a standardized JSON response."""
    status_code = _status_for(exc)
    error_code = exc.code if isinstance(exc, KardexError) else exc.__class__.__name__
    request_id = getattr(request.state, "request_id", None)

    logger.error(
        "request_exception",
        request_id=request_id,
        path=request.url.path,
        error_type=error_code,
        error=str(exc),
        details=exc.details if isinstance(exc, KardexError) else None,
        traceback=traceback.format_exc() if status_code >= 500 else None,
    )

    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error_code=error_code,
            message=str(exc),
            hint=_get_hint(error_code, status_code),
            path=request.url.path,
        ).model_dump(mode="json"),
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Catches anything the exception handlers did not and renders it as JSON."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            return build_error_response(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException

    @app.exception_handler(KardexError)
    async def kardex_exception_handler(
        request: Request,
        exc: KardexError,
    ) -> JSONResponse:
        """Handle domain errors raised by use cases."""
        return build_error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        errors = []
        for error in exc.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

        return JSONResponse(
            status_code=422,
            content=ErrorResponse(
                error_code="VALIDATION_ERROR",
                message="Request validation failed",
                hint=HINT_MAP["VALIDATION_ERROR"],
                detail="; ".join(errors),
                path=request.url.path,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,
        exc: HTTPException,
    ) -> JSONResponse:
        """Handle HTTP exceptions with standardized format."""
        error_code = "NOT_FOUND" if exc.status_code == 404 else "HTTP_ERROR"
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error_code=error_code,
                message=str(exc.detail) if exc.detail else "An error occurred",
                hint=_get_hint(error_code, exc.status_code),
                path=request.url.path,
            ).model_dump(mode="json"),
        )
