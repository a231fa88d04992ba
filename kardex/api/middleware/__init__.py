"""API middleware."""

from kardex.api.middleware.error_handler import ErrorHandlerMiddleware
from kardex.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
