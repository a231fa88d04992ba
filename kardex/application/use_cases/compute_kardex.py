"""Compute Kardex Use Case — opening balance, daily buckets and anomaly flags."""

import asyncio
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from kardex.application.dto.requests import KardexRequest
from kardex.application.dto.responses import KardexResponse, StatementResponse
from kardex.config import get_logger, get_settings, ledger_log_context
from kardex.core.entities.ledger import LedgerWindow
from kardex.core.entities.movement import MovementEvent
from kardex.core.exceptions import QueryCancelledError
from kardex.core.interfaces.movement_repository import IMovementRepository
from kardex.core.services import (
    BalanceReconstructor,
    DailyAggregator,
    aggregate_movements,
    classify,
    validate_window,
)

logger = get_logger(__name__)

_UNSET = object()


@dataclass
class KardexResult:
    """Result of a ledger computation."""

    window: LedgerWindow
    low_stock_threshold: Decimal
    high_movement_factor: Decimal


class ComputeKardexUseCase:
    """
    Compute the classified daily ledger for one item.

    The historical sum and the in-window listing are independent reads and
    are issued concurrently. Either a timeout or a caller-supplied cancel
    event aborts both and raises QueryCancelledError; no partial window is
    returned.
    """

    def __init__(
        self,
        repository: IMovementRepository | None = None,
        low_stock_threshold: Decimal | None = None,
        high_movement_factor: Decimal | None = None,
        max_window_days: int | None = None,
        default_window_days: int | None = None,
        query_timeout: float | None | object = _UNSET,
    ):
        settings = get_settings().kardex
        self._repository = repository
        self._low_stock_threshold = (
            low_stock_threshold
            if low_stock_threshold is not None
            else settings.low_stock_threshold
        )
        self._high_movement_factor = (
            high_movement_factor
            if high_movement_factor is not None
            else settings.high_movement_factor
        )
        self._max_window_days = max_window_days or settings.max_window_days
        self._default_window_days = (
            default_window_days
            if default_window_days is not None
            else settings.default_window_days
        )
        self._query_timeout = (
            settings.query_timeout if query_timeout is _UNSET else query_timeout
        )

    async def _get_repository(self) -> IMovementRepository:
        if self._repository is None:
            from kardex.infrastructure.storage.sqlite import get_movement_repository

            self._repository = await get_movement_repository()
        return self._repository

    def resolve_window(self, request: KardexRequest, today: date | None = None) -> tuple[date, date]:
        """Fill in a missing window end (today) and start (default window before end)."""
        date_to = request.date_to or today or date.today()
        date_from = request.date_from or date_to - timedelta(days=self._default_window_days)
        return date_from, date_to

    async def execute(
        self,
        request: KardexRequest,
        cancel_event: asyncio.Event | None = None,
    ) -> KardexResult:
        """
        Execute the ledger computation.

        Raises:
            InvalidRangeError: If date_from is after date_to.
            RangeTooLargeError: If the window exceeds the configured span.
            RepositoryError: If either repository read fails.
            QueryCancelledError: On timeout or when cancel_event is set.
        """
        date_from, date_to = self.resolve_window(request)
        low_stock_threshold = (
            request.low_stock_threshold
            if request.low_stock_threshold is not None
            else self._low_stock_threshold
        )
        high_movement_factor = request.high_movement_factor or self._high_movement_factor

        # Reject bad windows before any query is issued
        days = validate_window(date_from, date_to, self._max_window_days)

        with ledger_log_context(request.item_id, date_from, date_to):
            logger.info("kardex_query_started", days=days)

            repository = await self._get_repository()
            opening_balance, movements = await self._fetch(
                repository, request.item_id, date_from, date_to, cancel_event
            )

            window = aggregate_movements(
                request.item_id, date_from, date_to, opening_balance, movements
            )
            classify(window, low_stock_threshold, high_movement_factor)

            logger.info(
                "kardex_query_complete",
                opening_balance=window.opening_balance,
                closing_balance=window.closing_balance,
                movements=len(movements),
                low_stock_days=sum(1 for b in window.buckets if b.low_stock),
                high_movement_days=sum(1 for b in window.buckets if b.high_movement),
            )

        return KardexResult(
            window=window,
            low_stock_threshold=low_stock_threshold,
            high_movement_factor=high_movement_factor,
        )

    async def _fetch(
        self,
        repository: IMovementRepository,
        item_id: str,
        date_from: date,
        date_to: date,
        cancel_event: asyncio.Event | None,
    ) -> tuple[Decimal, list[MovementEvent]]:
        """Run both repository reads concurrently under timeout and cancel token."""
        if cancel_event is not None and cancel_event.is_set():
            raise QueryCancelledError(item_id, reason="cancelled")

        reconstructor = BalanceReconstructor(repository)
        aggregator = DailyAggregator(repository, self._max_window_days)

        balance_task = asyncio.ensure_future(
            reconstructor.reconstruct_opening_balance(item_id, date_from)
        )
        movements_task = asyncio.ensure_future(
            aggregator.fetch_window_movements(item_id, date_from, date_to)
        )
        fetch = asyncio.gather(balance_task, movements_task)

        waiters: set[asyncio.Future] = {fetch}
        cancel_waiter: asyncio.Future | None = None
        if cancel_event is not None:
            cancel_waiter = asyncio.ensure_future(cancel_event.wait())
            waiters.add(cancel_waiter)

        try:
            done, _ = await asyncio.wait(
                waiters,
                timeout=self._query_timeout,
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            if cancel_waiter is not None:
                cancel_waiter.cancel()
            if not fetch.done():
                fetch.cancel()

        if fetch in done and not fetch.cancelled():
            if fetch.exception() is not None:
                # One read failed; do not leave the other running
                balance_task.cancel()
                movements_task.cancel()
            opening_balance, movements = fetch.result()
            return opening_balance, movements

        reason = "cancelled" if cancel_waiter is not None and cancel_waiter in done else "timeout"
        logger.warning(
            "kardex_query_cancelled",
            item_id=item_id,
            reason=reason,
            timeout=self._query_timeout,
        )
        raise QueryCancelledError(item_id, reason=reason, timeout=self._query_timeout)

    def to_response(self, result: KardexResult) -> KardexResponse:
        """Convert result to API response."""
        return KardexResponse.from_window(
            result.window,
            low_stock_threshold=result.low_stock_threshold,
            high_movement_factor=result.high_movement_factor,
        )

    def to_statement_response(self, result: KardexResult) -> StatementResponse:
        """Convert result to flat statement rows."""
        return StatementResponse.from_window(result.window)
