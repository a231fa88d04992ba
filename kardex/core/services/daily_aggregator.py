"""
Daily Aggregator.

Buckets in-window movements by calendar day and folds the opening balance
forward into a running total. Every day of the window gets a bucket, including
days without movements, so the balance trend has no gaps.
"""

from collections.abc import Iterable, Iterator
from datetime import date, timedelta
from decimal import Decimal

from kardex.config import get_logger
from kardex.core.entities.ledger import ZERO, DailyBucket, LedgerTotals, LedgerWindow
from kardex.core.entities.movement import MovementEvent, MovementKind
from kardex.core.exceptions import (
    InvalidRangeError,
    KardexError,
    RangeTooLargeError,
    RepositoryError,
)
from kardex.core.interfaces.movement_repository import IMovementRepository

logger = get_logger(__name__)

# About three years of daily buckets
DEFAULT_MAX_WINDOW_DAYS = 1096


def window_day_count(date_from: date, date_to: date) -> int:
    """Inclusive number of calendar days in [date_from, date_to]."""
    return (date_to - date_from).days + 1


def validate_window(
    date_from: date,
    date_to: date,
    max_days: int = DEFAULT_MAX_WINDOW_DAYS,
) -> int:
    """
    Check a query window before any I/O is issued.

    Returns:
        Inclusive day count of the window.

    Raises:
        InvalidRangeError: If date_from is after date_to.
        RangeTooLargeError: If the window spans more than max_days days.
    """
    if date_from > date_to:
        raise InvalidRangeError(date_from, date_to)

    days = window_day_count(date_from, date_to)
    if days > max_days:
        raise RangeTooLargeError(date_from, date_to, days, max_days)
    return days


def iter_window_dates(date_from: date, date_to: date) -> Iterator[date]:
    """Yield every calendar date from date_from to date_to inclusive."""
    current = date_from
    step = timedelta(days=1)
    while current <= date_to:
        yield current
        current += step


def aggregate_movements(
    item_id: str,
    date_from: date,
    date_to: date,
    opening_balance: Decimal,
    movements: Iterable[MovementEvent],
) -> LedgerWindow:
    """
    Build a ledger window from already-fetched movements.

    Buckets are held in a list indexed by day offset from date_from. Movements
    whose effective date falls outside the window are skipped.
    """
    buckets = [DailyBucket(date=day) for day in iter_window_dates(date_from, date_to)]

    skipped = 0
    for movement in movements:
        offset = (movement.effective_date - date_from).days
        if offset < 0 or offset >= len(buckets):
            skipped += 1
            continue

        bucket = buckets[offset]
        if movement.kind == MovementKind.INBOUND:
            bucket.inbound_total += movement.quantity
        else:
            bucket.outbound_total += movement.quantity
        bucket.detail.append(movement)

    if skipped:
        logger.warning(
            "movement_outside_window",
            item_id=item_id,
            date_from=date_from.isoformat(),
            date_to=date_to.isoformat(),
            skipped=skipped,
        )

    running = opening_balance
    total_in = ZERO
    total_out = ZERO
    for bucket in buckets:
        bucket.net_change = bucket.inbound_total - bucket.outbound_total
        running += bucket.net_change
        bucket.running_balance = running
        total_in += bucket.inbound_total
        total_out += bucket.outbound_total

    return LedgerWindow(
        item_id=item_id,
        date_from=date_from,
        date_to=date_to,
        opening_balance=opening_balance,
        buckets=buckets,
        totals=LedgerTotals(inbound=total_in, outbound=total_out, net=total_in - total_out),
    )


class DailyAggregator:
    """Fetches in-window movements and turns them into a LedgerWindow."""

    def __init__(
        self,
        repository: IMovementRepository,
        max_window_days: int = DEFAULT_MAX_WINDOW_DAYS,
    ) -> None:
        self._repository = repository
        self._max_window_days = max_window_days

    async def fetch_window_movements(
        self, item_id: str, date_from: date, date_to: date
    ) -> list[MovementEvent]:
        """
        List movements in [date_from, date_to].

        Raises:
            RepositoryError: If the repository query fails.
        """
        try:
            return await self._repository.list_movements_in_range(item_id, date_from, date_to)
        except KardexError:
            raise
        except Exception as e:
            logger.error(
                "repository_query_failed",
                query="list_movements_in_range",
                item_id=item_id,
                date_from=date_from.isoformat(),
                date_to=date_to.isoformat(),
                error=str(e),
            )
            raise RepositoryError(
                query="list_movements_in_range",
                error=str(e),
                item_id=item_id,
                date_from=date_from,
                date_to=date_to,
            ) from e

    async def build_ledger_window(
        self,
        item_id: str,
        date_from: date,
        date_to: date,
        opening_balance: Decimal,
    ) -> LedgerWindow:
        """
        Build the gap-free daily ledger for one item.

        The range is validated before the repository is queried.

        Raises:
            InvalidRangeError: If date_from is after date_to.
            RangeTooLargeError: If the window exceeds the configured span.
            RepositoryError: If the movement query fails.
        """
        validate_window(date_from, date_to, self._max_window_days)
        movements = await self.fetch_window_movements(item_id, date_from, date_to)
        return aggregate_movements(item_id, date_from, date_to, opening_balance, movements)
