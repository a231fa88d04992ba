"""Derived ledger entities. Computed on demand, never persisted."""

import datetime
from collections.abc import Iterator
from decimal import Decimal

from pydantic import BaseModel, Field

from kardex.core.entities.movement import MovementEvent

ZERO = Decimal("0")


class DailyBucket(BaseModel):
    """Aggregated movements for one calendar day of a window."""

    date: datetime.date
    inbound_total: Decimal = ZERO
    outbound_total: Decimal = ZERO
    net_change: Decimal = ZERO
    running_balance: Decimal = ZERO
    detail: list[MovementEvent] = Field(default_factory=list)
    low_stock: bool = False
    high_movement: bool = False

    @property
    def volume(self) -> Decimal:
        """Total quantity moved in either direction."""
        return self.inbound_total + self.outbound_total

    @property
    def has_activity(self) -> bool:
        return bool(self.detail)


class LedgerTotals(BaseModel):
    """Window-wide sums for summary display."""

    inbound: Decimal = ZERO
    outbound: Decimal = ZERO
    net: Decimal = ZERO


class StatementRow(BaseModel):
    """Flat row consumed by table and export collaborators."""

    label: str
    inbound: Decimal
    outbound: Decimal
    net: Decimal
    running_balance: Decimal
    status: str


class LedgerWindow(BaseModel):
    """Opening balance, gap-free daily buckets and totals for one item."""

    item_id: str
    date_from: datetime.date
    date_to: datetime.date
    opening_balance: Decimal = ZERO
    buckets: list[DailyBucket] = Field(default_factory=list)
    totals: LedgerTotals = Field(default_factory=LedgerTotals)

    @property
    def day_count(self) -> int:
        return len(self.buckets)

    @property
    def closing_balance(self) -> Decimal:
        """Running balance at the end of the window."""
        if not self.buckets:
            return self.opening_balance
        return self.buckets[-1].running_balance

    def bucket_for(self, day: datetime.date) -> DailyBucket | None:
        """Look up the bucket for a calendar day, or None if outside the window."""
        offset = (day - self.date_from).days
        if 0 <= offset < len(self.buckets):
            return self.buckets[offset]
        return None

    def statement_rows(self) -> Iterator[StatementRow]:
        """
        Yield the window as flat rows.

        The first row carries the opening balance; each following row is one
        day, in date order.
        """
        yield StatementRow(
            label="opening_balance",
            inbound=ZERO,
            outbound=ZERO,
            net=ZERO,
            running_balance=self.opening_balance,
            status="-",
        )
        for bucket in self.buckets:
            yield StatementRow(
                label=bucket.date.isoformat(),
                inbound=bucket.inbound_total,
                outbound=bucket.outbound_total,
                net=bucket.net_change,
                running_balance=bucket.running_balance,
                status="low_stock" if bucket.low_stock else "normal",
            )
