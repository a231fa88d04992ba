"""SQLite implementation of the movement repository."""

from collections.abc import Iterable
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

import aiosqlite

from kardex.config import get_logger
from kardex.core.entities.movement import Item, MovementEvent, MovementKind, to_decimal
from kardex.core.exceptions import RepositoryError
from kardex.core.interfaces.movement_repository import IMovementRepository
from kardex.infrastructure.storage.sqlite.connection import read_connection, write_transaction

logger = get_logger(__name__)

# Effective dates are compared on their first 10 characters so rows written
# with a time component still bucket by calendar date.
_SUM_BEFORE_SQL: dict[MovementKind, str] = {
    MovementKind.INBOUND: """
        SELECT l.quantity
        FROM entry_lines l
        JOIN entry_documents d ON d.id = l.entry_id
        WHERE l.item_code = ? AND substr(d.entry_date, 1, 10) < ?
    """,
    MovementKind.OUTBOUND: """
        SELECT l.quantity
        FROM exit_lines l
        JOIN exit_documents d ON d.id = l.exit_id
        WHERE l.item_code = ? AND substr(d.exit_date, 1, 10) < ?
    """,
}

_LIST_IN_RANGE_SQL = """
    SELECT 'inbound' AS kind, l.id AS line_id, d.id AS document_id, l.quantity,
           substr(d.entry_date, 1, 10) AS effective_date, d.created_at
    FROM entry_lines l
    JOIN entry_documents d ON d.id = l.entry_id
    WHERE l.item_code = ? AND substr(d.entry_date, 1, 10) BETWEEN ? AND ?
    UNION ALL
    SELECT 'outbound' AS kind, l.id AS line_id, d.id AS document_id, l.quantity,
           substr(d.exit_date, 1, 10) AS effective_date, d.created_at
    FROM exit_lines l
    JOIN exit_documents d ON d.id = l.exit_id
    WHERE l.item_code = ? AND substr(d.exit_date, 1, 10) BETWEEN ? AND ?
    ORDER BY effective_date, kind, line_id
"""


class SQLiteMovementRepository(IMovementRepository):
    """Movement log backed by entry/exit document tables."""

    async def sum_movements_before(
        self, item_id: str, before: date, kind: MovementKind
    ) -> Decimal:
        """Sum quantities of one kind strictly before a date."""
        try:
            async with read_connection() as conn:
                cursor = await conn.execute(
                    _SUM_BEFORE_SQL[kind], (item_id, before.isoformat())
                )
                rows = await cursor.fetchall()
            total = sum((self._quantity(row["quantity"]) for row in rows), Decimal("0"))
        except (aiosqlite.Error, InvalidOperation, ValueError) as e:
            logger.error(
                "repository_query_failed",
                query="sum_movements_before",
                item_id=item_id,
                before=before.isoformat(),
                kind=kind.value,
                error=str(e),
            )
            raise RepositoryError(
                query="sum_movements_before",
                error=str(e),
                item_id=item_id,
                date_to=before,
                kind=kind.value,
            ) from e

        logger.debug(
            "movements_summed",
            item_id=item_id,
            before=before.isoformat(),
            kind=kind.value,
            rows=len(rows),
        )
        return total

    async def list_movements_in_range(
        self, item_id: str, date_from: date, date_to: date
    ) -> list[MovementEvent]:
        """List both kinds of movement in [date_from, date_to], by date then kind."""
        params = (item_id, date_from.isoformat(), date_to.isoformat())
        try:
            async with read_connection() as conn:
                cursor = await conn.execute(_LIST_IN_RANGE_SQL, params + params)
                rows = await cursor.fetchall()
            movements = [self._row_to_movement(item_id, row) for row in rows]
        except (aiosqlite.Error, InvalidOperation, ValueError) as e:
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
        return movements

    async def get_item(self, item_code: str) -> Item | None:
        """Get item by code."""
        try:
            async with read_connection() as conn:
                cursor = await conn.execute(
                    "SELECT * FROM items WHERE code = ?", (item_code,)
                )
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise RepositoryError(query="get_item", error=str(e), item_id=item_code) from e
        if row is None:
            return None
        return self._row_to_item(row)

    async def search_items(self, term: str, limit: int = 10) -> list[Item]:
        """Search items by case-insensitive code or name substring."""
        pattern = f"%{term.lower()}%"
        try:
            async with read_connection() as conn:
                cursor = await conn.execute(
                    """
                    SELECT * FROM items
                    WHERE lower(code) LIKE ? OR lower(name) LIKE ?
                    ORDER BY code
                    LIMIT ?
                    """,
                    (pattern, pattern, limit),
                )
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise RepositoryError(query="search_items", error=str(e)) from e
        return [self._row_to_item(row) for row in rows]

    # Write helpers used for seeding; production writes come from the
    # receiving and issuance workflows.

    async def save_item(self, item: Item) -> Item:
        """Insert or replace an item."""
        async with write_transaction() as conn:
            await conn.execute(
                """
                INSERT OR REPLACE INTO items (code, name, unit, image_url)
                VALUES (?, ?, ?, ?)
                """,
                (item.code, item.name, item.unit, item.image_url),
            )
        logger.info("item_saved", item_code=item.code)
        return item

    async def record_entry(
        self,
        entry_date: date,
        lines: Iterable[tuple[str, Decimal | int | str]],
        reference: str | None = None,
    ) -> int:
        """Record a receiving document with (item_code, quantity) lines."""
        return await self._record_document(
            MovementKind.INBOUND, entry_date, lines, reference
        )

    async def record_exit(
        self,
        exit_date: date,
        lines: Iterable[tuple[str, Decimal | int | str]],
        reference: str | None = None,
    ) -> int:
        """Record an issuance document with (item_code, quantity) lines."""
        return await self._record_document(
            MovementKind.OUTBOUND, exit_date, lines, reference
        )

    async def _record_document(
        self,
        kind: MovementKind,
        effective_date: date,
        lines: Iterable[tuple[str, Decimal | int | str]],
        reference: str | None,
    ) -> int:
        if kind == MovementKind.INBOUND:
            header_sql = "INSERT INTO entry_documents (entry_date, reference) VALUES (?, ?)"
            line_sql = "INSERT INTO entry_lines (entry_id, item_code, quantity) VALUES (?, ?, ?)"
        else:
            header_sql = "INSERT INTO exit_documents (exit_date, reference) VALUES (?, ?)"
            line_sql = "INSERT INTO exit_lines (exit_id, item_code, quantity) VALUES (?, ?, ?)"

        if isinstance(effective_date, datetime):
            effective_date = effective_date.date()

        async with write_transaction() as conn:
            cursor = await conn.execute(header_sql, (effective_date.isoformat(), reference))
            document_id = cursor.lastrowid
            count = 0
            for item_code, quantity in lines:
                await conn.execute(
                    line_sql, (document_id, item_code, str(to_decimal(quantity)))
                )
                count += 1

        logger.info(
            "movement_document_recorded",
            kind=kind.value,
            document_id=document_id,
            effective_date=effective_date.isoformat(),
            lines=count,
        )
        return document_id  # type: ignore[return-value]

    @staticmethod
    def _quantity(raw: object) -> Decimal:
        """Parse a stored quantity, rejecting negatives."""
        if raw is None:
            return Decimal("0")
        quantity = to_decimal(raw if isinstance(raw, (int, float, Decimal)) else str(raw))
        if quantity < 0:
            raise ValueError(f"negative stored quantity: {quantity}")
        return quantity

    @classmethod
    def _row_to_movement(cls, item_id: str, row: aiosqlite.Row) -> MovementEvent:
        """Convert a database row to a MovementEvent entity."""
        recorded_at = None
        if row["created_at"]:
            try:
                recorded_at = datetime.fromisoformat(row["created_at"])
            except (ValueError, TypeError):
                pass

        return MovementEvent(
            item_id=item_id,
            kind=MovementKind(row["kind"]),
            quantity=cls._quantity(row["quantity"]),
            effective_date=date.fromisoformat(row["effective_date"]),
            document_id=row["document_id"],
            recorded_at=recorded_at,
        )

    @staticmethod
    def _row_to_item(row: aiosqlite.Row) -> Item:
        """Convert a database row to an Item entity."""
        return Item(
            code=row["code"],
            name=row["name"],
            unit=row["unit"],
            image_url=row["image_url"],
        )
