"""
Response DTOs for the application layer.

Serialized as JSON by the API.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from kardex.core.entities import DailyBucket, Item, LedgerWindow, MovementEvent


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    uptime_seconds: float


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. INVALID_RANGE)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")


class ItemResponse(BaseModel):
    """Stock item response DTO."""

    code: str
    name: str
    unit: str | None = None
    image_url: str | None = None

    @classmethod
    def from_entity(cls, item: Item) -> "ItemResponse":
        return cls(code=item.code, name=item.name, unit=item.unit, image_url=item.image_url)


class ItemSearchResponse(BaseModel):
    """Item lookup results."""

    items: list[ItemResponse]
    total: int


class MovementDetailResponse(BaseModel):
    """One movement contributing to a day."""

    kind: str
    quantity: Decimal
    document_id: str
    effective_date: date
    recorded_at: datetime | None = None

    @classmethod
    def from_entity(cls, movement: MovementEvent) -> "MovementDetailResponse":
        return cls(
            kind=movement.kind.value,
            quantity=movement.quantity,
            document_id=str(movement.document_id),
            effective_date=movement.effective_date,
            recorded_at=movement.recorded_at,
        )


class DailyBucketResponse(BaseModel):
    """One day of the ledger."""

    date: date
    inbound_total: Decimal
    outbound_total: Decimal
    net_change: Decimal
    running_balance: Decimal
    low_stock: bool
    high_movement: bool
    detail: list[MovementDetailResponse] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, bucket: DailyBucket) -> "DailyBucketResponse":
        return cls(
            date=bucket.date,
            inbound_total=bucket.inbound_total,
            outbound_total=bucket.outbound_total,
            net_change=bucket.net_change,
            running_balance=bucket.running_balance,
            low_stock=bucket.low_stock,
            high_movement=bucket.high_movement,
            detail=[MovementDetailResponse.from_entity(m) for m in bucket.detail],
        )


class LedgerTotalsResponse(BaseModel):
    """Window-wide sums."""

    inbound: Decimal
    outbound: Decimal
    net: Decimal


class KardexResponse(BaseModel):
    """Daily ledger for one item over a date window."""

    item_id: str
    date_from: date
    date_to: date
    opening_balance: Decimal
    closing_balance: Decimal
    low_stock_threshold: Decimal
    high_movement_factor: Decimal
    buckets: list[DailyBucketResponse]
    totals: LedgerTotalsResponse

    @classmethod
    def from_window(
        cls,
        window: LedgerWindow,
        low_stock_threshold: Decimal,
        high_movement_factor: Decimal,
    ) -> "KardexResponse":
        return cls(
            item_id=window.item_id,
            date_from=window.date_from,
            date_to=window.date_to,
            opening_balance=window.opening_balance,
            closing_balance=window.closing_balance,
            low_stock_threshold=low_stock_threshold,
            high_movement_factor=high_movement_factor,
            buckets=[DailyBucketResponse.from_entity(b) for b in window.buckets],
            totals=LedgerTotalsResponse(
                inbound=window.totals.inbound,
                outbound=window.totals.outbound,
                net=window.totals.net,
            ),
        )


class StatementRowResponse(BaseModel):
    """One flat row of a ledger statement."""

    label: str
    inbound: Decimal
    outbound: Decimal
    net: Decimal
    running_balance: Decimal
    status: str


class StatementResponse(BaseModel):
    """Ledger as flat rows: opening balance first, then one row per day."""

    item_id: str
    date_from: date
    date_to: date
    rows: list[StatementRowResponse]

    @classmethod
    def from_window(cls, window: LedgerWindow) -> "StatementResponse":
        return cls(
            item_id=window.item_id,
            date_from=window.date_from,
            date_to=window.date_to,
            rows=[
                StatementRowResponse(**row.model_dump()) for row in window.statement_rows()
            ],
        )
