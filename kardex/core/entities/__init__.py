"""Domain entities."""

from kardex.core.entities.ledger import (
    DailyBucket,
    LedgerTotals,
    LedgerWindow,
    StatementRow,
)
from kardex.core.entities.movement import Item, MovementEvent, MovementKind, to_decimal

__all__ = [
    "MovementKind",
    "MovementEvent",
    "Item",
    "to_decimal",
    "DailyBucket",
    "LedgerTotals",
    "LedgerWindow",
    "StatementRow",
]
