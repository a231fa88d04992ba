"""Stock movement domain entities."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MovementKind(str, Enum):
    """Direction of a stock movement."""

    INBOUND = "inbound"
    OUTBOUND = "outbound"


def to_decimal(value: object) -> Decimal:
    """Convert a numeric value to Decimal without inheriting float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)  # type: ignore[arg-type]


class MovementEvent(BaseModel):
    """A single recorded inbound or outbound quantity change.

    Immutable once recorded. Corrections arrive as new events.
    """

    model_config = ConfigDict(frozen=True)

    item_id: str
    kind: MovementKind
    quantity: Decimal = Field(ge=0)
    effective_date: date  # business date the movement counts on
    document_id: str | int  # entry or exit slip, traceability only
    recorded_at: datetime | None = None

    @field_validator("quantity", mode="before")
    @classmethod
    def coerce_quantity(cls, v: object) -> object:
        if isinstance(v, float):
            return to_decimal(v)
        return v

    @field_validator("effective_date", mode="before")
    @classmethod
    def strip_time(cls, v: object) -> object:
        # Keep the calendar date as written; no timezone conversion
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, str) and len(v) > 10:
            return v[:10]
        return v

    @property
    def signed_quantity(self) -> Decimal:
        """Quantity with outbound movements negated."""
        if self.kind == MovementKind.OUTBOUND:
            return -self.quantity
        return self.quantity


class Item(BaseModel):
    """A stock item that movements are recorded against."""

    code: str
    name: str
    unit: str | None = None
    image_url: str | None = None
