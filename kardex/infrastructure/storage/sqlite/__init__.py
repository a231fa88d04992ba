"""SQLite storage implementations."""

from kardex.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_pool,
    read_connection,
    write_transaction,
)
from kardex.infrastructure.storage.sqlite.movement_store import SQLiteMovementRepository

# Singleton instances
_movement_repository: SQLiteMovementRepository | None = None


async def get_movement_repository() -> SQLiteMovementRepository:
    """Get singleton movement repository instance."""
    global _movement_repository
    if _movement_repository is None:
        _movement_repository = SQLiteMovementRepository()
    return _movement_repository


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "read_connection",
    "write_transaction",
    # Stores
    "SQLiteMovementRepository",
    "get_movement_repository",
]
