"""Abstract interface for the movement repository."""

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal

from kardex.core.entities.movement import Item, MovementEvent, MovementKind


class IMovementRepository(ABC):
    """
    Read contract for the append-only movement log.

    Effective dates are pure calendar dates. Implementations backed by
    timestamped storage must normalize to date-only before comparing.
    Failures are raised as RepositoryError.
    """

    @abstractmethod
    async def sum_movements_before(
        self, item_id: str, before: date, kind: MovementKind
    ) -> Decimal:
        """Sum quantities of one kind with effective_date strictly before `before`."""
        pass

    @abstractmethod
    async def list_movements_in_range(
        self, item_id: str, date_from: date, date_to: date
    ) -> list[MovementEvent]:
        """List movements of both kinds with effective_date in [date_from, date_to]."""
        pass

    @abstractmethod
    async def get_item(self, item_code: str) -> Item | None:
        """Get item by code."""
        pass

    @abstractmethod
    async def search_items(self, term: str, limit: int = 10) -> list[Item]:
        """Search items by code or name substring."""
        pass
