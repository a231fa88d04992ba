"""
Domain exceptions for the Kardex engine.

Provides specific exception types for each failure the ledger computation
can surface to its callers.
"""

from datetime import date
from typing import Any


class KardexError(Exception):
    """Base exception for all Kardex errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Validation Exceptions
class ValidationError(KardexError):
    """Input validation failed."""

    pass


class InvalidRangeError(ValidationError):
    """Window start falls after window end."""

    def __init__(self, date_from: date, date_to: date):
        super().__init__(
            f"Invalid date range: {date_from.isoformat()} is after {date_to.isoformat()}",
            code="INVALID_RANGE",
            details={
                "date_from": date_from.isoformat(),
                "date_to": date_to.isoformat(),
            },
        )


class RangeTooLargeError(ValidationError):
    """Window spans more days than the configured maximum."""

    def __init__(self, date_from: date, date_to: date, days: int, max_days: int):
        super().__init__(
            f"Date range of {days} days exceeds the maximum of {max_days} days",
            code="RANGE_TOO_LARGE",
            details={
                "date_from": date_from.isoformat(),
                "date_to": date_to.isoformat(),
                "days": days,
                "max_days": max_days,
            },
        )


class MalformedWindowError(ValidationError):
    """Ledger window cannot be classified."""

    def __init__(self, reason: str):
        super().__init__(
            f"Malformed ledger window: {reason}",
            code="MALFORMED_WINDOW",
            details={"reason": reason},
        )


# Storage Exceptions
class StorageError(KardexError):
    """Base exception for storage operations."""

    pass


class RepositoryError(StorageError):
    """Movement repository query failed."""

    def __init__(
        self,
        query: str,
        error: str,
        item_id: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        kind: str | None = None,
    ):
        super().__init__(
            f"Repository error during {query} for item {item_id}: {error}",
            code="REPOSITORY_ERROR",
            details={
                "query": query,
                "item_id": item_id,
                "date_from": date_from.isoformat() if date_from else None,
                "date_to": date_to.isoformat() if date_to else None,
                "kind": kind,
                "error": error,
            },
        )


class ItemNotFoundError(StorageError):
    """Stock item not found."""

    def __init__(self, item_code: str):
        super().__init__(
            f"Item not found: {item_code}",
            code="ITEM_NOT_FOUND",
            details={"item_code": item_code},
        )


# Cancellation
class QueryCancelledError(KardexError):
    """Ledger computation was aborted before completion."""

    def __init__(self, item_id: str, reason: str, timeout: float | None = None):
        message = f"Kardex query for item {item_id} was cancelled"
        if reason == "timeout" and timeout is not None:
            message = f"Kardex query for item {item_id} timed out after {timeout} seconds"
        super().__init__(
            message,
            code="QUERY_CANCELLED",
            details={"item_id": item_id, "reason": reason, "timeout": timeout},
        )

