"""
Request DTOs for the application layer.

Validated with Pydantic before reaching the use cases.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field


class KardexRequest(BaseModel):
    """Request for the daily ledger of one item."""

    item_id: str = Field(..., min_length=1, description="Item code")
    date_from: date | None = Field(
        default=None,
        description="Window start, inclusive (defaults to date_to minus the default window)",
    )
    date_to: date | None = Field(
        default=None,
        description="Window end, inclusive (defaults to today)",
    )
    low_stock_threshold: Decimal | None = Field(
        default=None,
        description="Running balance below this flags a low-stock day",
    )
    high_movement_factor: Decimal | None = Field(
        default=None,
        gt=0,
        description="Multiple of the mean daily volume that flags a high-movement day",
    )


class ItemSearchRequest(BaseModel):
    """Item lookup by code or name."""

    term: str = Field(..., min_length=1, description="Code or name fragment")
    limit: int = Field(default=10, ge=1, le=100, description="Maximum results")
