"""
Balance Reconstructor.

Computes the quantity on hand immediately before a window starts by
netting every historical movement strictly before the window start.
"""

from datetime import date
from decimal import Decimal

from kardex.config import get_logger
from kardex.core.entities.movement import MovementKind, to_decimal
from kardex.core.exceptions import KardexError, RepositoryError
from kardex.core.interfaces.movement_repository import IMovementRepository

logger = get_logger(__name__)


class BalanceReconstructor:
    """Opening balance from the movement history of one item."""

    def __init__(self, repository: IMovementRepository) -> None:
        self._repository = repository

    async def reconstruct_opening_balance(self, item_id: str, date_from: date) -> Decimal:
        """
        Net all movements with effective_date < date_from.

        An item with no history (or an unknown item) has balance 0.

        Raises:
            RepositoryError: If either historical sum fails.
        """
        inbound = await self._sum_before(item_id, date_from, MovementKind.INBOUND)
        outbound = await self._sum_before(item_id, date_from, MovementKind.OUTBOUND)
        balance = inbound - outbound

        logger.debug(
            "opening_balance_reconstructed",
            item_id=item_id,
            date_from=date_from.isoformat(),
            inbound=str(inbound),
            outbound=str(outbound),
            balance=str(balance),
        )
        return balance

    async def _sum_before(self, item_id: str, before: date, kind: MovementKind) -> Decimal:
        try:
            total = await self._repository.sum_movements_before(item_id, before, kind)
            if total is None:
                raise TypeError(f"{kind.value} sum returned no value")
            return to_decimal(total)
        except KardexError:
            raise
        except Exception as e:
            logger.error(
                "repository_query_failed",
                query="sum_movements_before",
                item_id=item_id,
                before=before.isoformat(),
                kind=kind.value,
                error=str(e) or e.__class__.__name__,
            )
            raise RepositoryError(
                query="sum_movements_before",
                error=str(e) or e.__class__.__name__,
                item_id=item_id,
                date_to=before,
                kind=kind.value,
            ) from e
