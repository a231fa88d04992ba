"""Tests for the Daily Aggregator."""

from datetime import date, timedelta
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from kardex.core.exceptions import InvalidRangeError, RangeTooLargeError, RepositoryError
from kardex.core.services.daily_aggregator import (
    DailyAggregator,
    aggregate_movements,
    iter_window_dates,
    validate_window,
    window_day_count,
)

JAN_1 = date(2024, 1, 1)
JAN_2 = date(2024, 1, 2)
JAN_3 = date(2024, 1, 3)


class TestWindowDates:
    def test_inclusive_both_ends(self):
        assert list(iter_window_dates(JAN_1, JAN_3)) == [JAN_1, JAN_2, JAN_3]

    def test_single_day(self):
        assert list(iter_window_dates(JAN_1, JAN_1)) == [JAN_1]

    def test_crosses_leap_day(self):
        days = list(iter_window_dates(date(2024, 2, 27), date(2024, 3, 1)))
        assert date(2024, 2, 29) in days
        assert len(days) == 4

    def test_day_count(self):
        assert window_day_count(JAN_1, JAN_1) == 1
        assert window_day_count(JAN_1, date(2024, 12, 31)) == 366


class TestValidateWindow:
    def test_reversed_range(self):
        with pytest.raises(InvalidRangeError):
            validate_window(JAN_2, JAN_1)

    def test_too_large(self):
        with pytest.raises(RangeTooLargeError) as exc_info:
            validate_window(JAN_1, JAN_1 + timedelta(days=10), max_days=10)
        assert exc_info.value.details["days"] == 11

    def test_at_limit(self):
        assert validate_window(JAN_1, JAN_1 + timedelta(days=9), max_days=10) == 10


class TestAggregateMovements:
    def test_example_scenario(self, inbound, outbound):
        window = aggregate_movements(
            "X",
            JAN_1,
            JAN_3,
            Decimal("100"),
            [inbound(20, JAN_1), outbound(50, JAN_2)],
        )

        assert [b.running_balance for b in window.buckets] == [
            Decimal("120"),
            Decimal("70"),
            Decimal("70"),
        ]
        assert window.buckets[2].net_change == Decimal("0")
        assert window.totals.inbound == Decimal("20")
        assert window.totals.outbound == Decimal("50")
        assert window.totals.net == Decimal("-30")

    def test_continuity_without_movements(self):
        date_to = JAN_1 + timedelta(days=44)
        window = aggregate_movements("X", JAN_1, date_to, Decimal("7"), [])

        assert len(window.buckets) == 45
        assert [b.date for b in window.buckets] == list(iter_window_dates(JAN_1, date_to))
        assert all(b.running_balance == Decimal("7") for b in window.buckets)

    def test_balance_identity(self, inbound, outbound):
        movements = [
            inbound(5, JAN_1),
            outbound("2.5", JAN_1),
            inbound(10, date(2024, 1, 4)),
            outbound(30, date(2024, 1, 6)),
            inbound("0.1", date(2024, 1, 6)),
        ]
        opening = Decimal("12")
        window = aggregate_movements("X", JAN_1, date(2024, 1, 7), opening, movements)

        previous = opening
        for bucket in window.buckets:
            assert bucket.net_change == bucket.inbound_total - bucket.outbound_total
            assert bucket.running_balance == previous + bucket.net_change
            previous = bucket.running_balance
        assert window.buckets[-1].running_balance == opening + window.totals.net
        assert window.totals.net == sum((b.net_change for b in window.buckets), Decimal("0"))

    def test_zero_window(self):
        window = aggregate_movements("X", JAN_1, JAN_1, Decimal("42"), [])

        assert len(window.buckets) == 1
        assert window.buckets[0].net_change == Decimal("0")
        assert window.buckets[0].running_balance == Decimal("42")

    def test_detail_keeps_insertion_order(self, inbound, outbound):
        first = inbound(1, JAN_2, document_id=11)
        second = outbound(1, JAN_2, document_id=12)
        third = inbound(2, JAN_2, document_id=13)
        window = aggregate_movements("X", JAN_1, JAN_3, Decimal("0"), [first, second, third])

        assert window.buckets[1].detail == [first, second, third]
        assert window.buckets[0].detail == []
        assert window.buckets[1].inbound_total == Decimal("3")

    def test_decimal_sums_are_exact(self, inbound):
        movements = [inbound("0.1", JAN_1, document_id=i) for i in range(1000)]
        window = aggregate_movements("X", JAN_1, JAN_1, Decimal("0"), movements)
        assert window.buckets[0].inbound_total == Decimal("100.0")

    def test_out_of_window_movements_are_skipped(self, inbound):
        window = aggregate_movements(
            "X",
            JAN_2,
            JAN_3,
            Decimal("0"),
            [inbound(5, JAN_1), inbound(3, JAN_3), inbound(9, date(2024, 1, 4))],
        )
        assert window.totals.inbound == Decimal("3")
        assert window.closing_balance == Decimal("3")


class TestDailyAggregator:
    async def test_build_ledger_window_queries_inclusive_range(self, inbound):
        repository = AsyncMock()
        repository.list_movements_in_range.return_value = [inbound(4, JAN_3)]
        aggregator = DailyAggregator(repository)

        window = await aggregator.build_ledger_window("X", JAN_1, JAN_3, Decimal("1"))

        repository.list_movements_in_range.assert_awaited_once_with("X", JAN_1, JAN_3)
        assert window.day_count == 3
        assert window.closing_balance == Decimal("5")

    async def test_invalid_range_rejected_before_io(self):
        repository = AsyncMock()
        aggregator = DailyAggregator(repository)

        with pytest.raises(InvalidRangeError):
            await aggregator.build_ledger_window("X", JAN_3, JAN_1, Decimal("0"))
        repository.list_movements_in_range.assert_not_awaited()

    async def test_range_too_large_rejected_before_io(self):
        repository = AsyncMock()
        aggregator = DailyAggregator(repository, max_window_days=2)

        with pytest.raises(RangeTooLargeError):
            await aggregator.build_ledger_window("X", JAN_1, JAN_3, Decimal("0"))
        repository.list_movements_in_range.assert_not_awaited()

    async def test_repository_error_propagates_unchanged(self):
        repository = AsyncMock()
        original = RepositoryError(query="list_movements_in_range", error="boom", item_id="X")
        repository.list_movements_in_range.side_effect = original
        aggregator = DailyAggregator(repository)

        with pytest.raises(RepositoryError) as exc_info:
            await aggregator.build_ledger_window("X", JAN_1, JAN_3, Decimal("0"))
        assert exc_info.value is original

    async def test_foreign_error_wrapped_with_context(self):
        repository = AsyncMock()
        repository.list_movements_in_range.side_effect = ConnectionError("refused")
        aggregator = DailyAggregator(repository)

        with pytest.raises(RepositoryError) as exc_info:
            await aggregator.build_ledger_window("X", JAN_1, JAN_3, Decimal("0"))
        details = exc_info.value.details
        assert details["query"] == "list_movements_in_range"
        assert details["item_id"] == "X"
        assert details["date_from"] == "2024-01-01"
        assert details["date_to"] == "2024-01-03"
        assert isinstance(exc_info.value.__cause__, ConnectionError)
