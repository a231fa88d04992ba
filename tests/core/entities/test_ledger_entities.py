"""Tests for derived ledger entities."""

from datetime import date
from decimal import Decimal

from kardex.core.entities import DailyBucket, LedgerTotals, LedgerWindow


def _window() -> LedgerWindow:
    return LedgerWindow(
        item_id="X",
        date_from=date(2024, 1, 1),
        date_to=date(2024, 1, 2),
        opening_balance=Decimal("100"),
        buckets=[
            DailyBucket(
                date=date(2024, 1, 1),
                inbound_total=Decimal("20"),
                net_change=Decimal("20"),
                running_balance=Decimal("120"),
            ),
            DailyBucket(
                date=date(2024, 1, 2),
                outbound_total=Decimal("115"),
                net_change=Decimal("-115"),
                running_balance=Decimal("5"),
                low_stock=True,
            ),
        ],
        totals=LedgerTotals(inbound=Decimal("20"), outbound=Decimal("115"), net=Decimal("-95")),
    )


class TestDailyBucket:
    def test_defaults(self):
        bucket = DailyBucket(date=date(2024, 1, 1))
        assert bucket.inbound_total == Decimal("0")
        assert bucket.detail == []
        assert bucket.low_stock is False
        assert bucket.high_movement is False
        assert bucket.has_activity is False

    def test_volume(self):
        bucket = DailyBucket(
            date=date(2024, 1, 1),
            inbound_total=Decimal("2.5"),
            outbound_total=Decimal("1.5"),
        )
        assert bucket.volume == Decimal("4.0")


class TestLedgerWindow:
    def test_closing_balance(self):
        assert _window().closing_balance == Decimal("5")

    def test_closing_balance_empty_window(self):
        window = LedgerWindow(
            item_id="X",
            date_from=date(2024, 1, 1),
            date_to=date(2024, 1, 1),
            opening_balance=Decimal("8"),
        )
        assert window.closing_balance == Decimal("8")
        assert window.day_count == 0

    def test_bucket_for(self):
        window = _window()
        assert window.bucket_for(date(2024, 1, 2)).running_balance == Decimal("5")
        assert window.bucket_for(date(2023, 12, 31)) is None
        assert window.bucket_for(date(2024, 1, 3)) is None

    def test_statement_rows_lead_with_opening_balance(self):
        rows = list(_window().statement_rows())
        assert len(rows) == 3
        assert rows[0].label == "opening_balance"
        assert rows[0].running_balance == Decimal("100")
        assert rows[0].status == "-"
        assert [r.label for r in rows[1:]] == ["2024-01-01", "2024-01-02"]
        assert rows[1].status == "normal"
        assert rows[2].status == "low_stock"
        assert rows[2].outbound == Decimal("115")
