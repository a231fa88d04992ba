"""Tests for the SQLite movement repository."""

from datetime import date
from decimal import Decimal

import aiosqlite
import pytest

from kardex.application.dto.requests import KardexRequest
from kardex.application.use_cases.compute_kardex import ComputeKardexUseCase
from kardex.core.entities import Item, MovementKind
from kardex.core.exceptions import RepositoryError
from kardex.infrastructure.storage.sqlite.movement_store import SQLiteMovementRepository

JAN_1 = date(2024, 1, 1)
JAN_2 = date(2024, 1, 2)
JAN_3 = date(2024, 1, 3)


@pytest.fixture
def repository(movement_db) -> SQLiteMovementRepository:
    return SQLiteMovementRepository()


class TestItems:
    async def test_save_and_get(self, repository):
        await repository.save_item(Item(code="A-1", name="Guantes de nitrilo", unit="caja"))

        item = await repository.get_item("A-1")
        assert item is not None
        assert item.name == "Guantes de nitrilo"
        assert item.unit == "caja"

    async def test_get_missing(self, repository):
        assert await repository.get_item("nope") is None

    async def test_search_by_code_or_name(self, repository):
        await repository.save_item(Item(code="A-1", name="Guantes de nitrilo"))
        await repository.save_item(Item(code="B-7", name="Casco"))
        await repository.save_item(Item(code="GUA-2", name="Lentes"))

        by_name = await repository.search_items("GUANTES")
        assert [i.code for i in by_name] == ["A-1"]

        by_either = await repository.search_items("gua")
        assert [i.code for i in by_either] == ["A-1", "GUA-2"]

        limited = await repository.search_items("a", limit=1)
        assert len(limited) == 1


class TestSumMovementsBefore:
    async def test_strictly_before(self, repository):
        await repository.record_entry(JAN_1, [("X", "10.5")])
        await repository.record_entry(JAN_2, [("X", 4)])
        await repository.record_exit(JAN_1, [("X", "0.5")])
        await repository.record_exit(JAN_3, [("X", 2)])

        assert await repository.sum_movements_before("X", JAN_2, MovementKind.INBOUND) == Decimal("10.5")
        assert await repository.sum_movements_before("X", JAN_2, MovementKind.OUTBOUND) == Decimal("0.5")
        assert await repository.sum_movements_before("X", JAN_1, MovementKind.INBOUND) == Decimal("0")

    async def test_only_requested_item(self, repository):
        await repository.record_entry(JAN_1, [("X", 3), ("Y", 100)])

        assert await repository.sum_movements_before("X", JAN_3, MovementKind.INBOUND) == Decimal("3")

    async def test_unknown_item_is_zero(self, repository):
        assert await repository.sum_movements_before("ghost", JAN_3, MovementKind.OUTBOUND) == 0

    async def test_exact_decimal_sum(self, repository):
        await repository.record_entry(JAN_1, [("X", "0.1")] * 300)

        total = await repository.sum_movements_before("X", JAN_2, MovementKind.INBOUND)
        assert total == Decimal("30.0")


class TestListMovementsInRange:
    async def test_inclusive_and_ordered(self, repository):
        await repository.record_entry(date(2023, 12, 31), [("X", 1)])
        exit_doc = await repository.record_exit(JAN_1, [("X", 5)])
        entry_doc = await repository.record_entry(JAN_1, [("X", 20)])
        last = await repository.record_exit(JAN_3, [("X", 2)])
        await repository.record_entry(date(2024, 1, 4), [("X", 1)])

        movements = await repository.list_movements_in_range("X", JAN_1, JAN_3)

        assert [(m.effective_date, m.kind) for m in movements] == [
            (JAN_1, MovementKind.INBOUND),
            (JAN_1, MovementKind.OUTBOUND),
            (JAN_3, MovementKind.OUTBOUND),
        ]
        assert [m.document_id for m in movements] == [entry_doc, exit_doc, last]
        assert movements[0].quantity == Decimal("20")
        assert all(m.item_id == "X" for m in movements)

    async def test_timestamped_rows_bucket_by_calendar_date(self, repository, movement_db):
        async with aiosqlite.connect(movement_db) as conn:
            cursor = await conn.execute(
                "INSERT INTO entry_documents (entry_date) VALUES (?)",
                ("2024-01-02T00:00:00+00:00",),
            )
            await conn.execute(
                "INSERT INTO entry_lines (entry_id, item_code, quantity) VALUES (?, ?, ?)",
                (cursor.lastrowid, "X", "7"),
            )
            await conn.commit()

        in_range = await repository.list_movements_in_range("X", JAN_2, JAN_2)
        assert len(in_range) == 1
        assert in_range[0].effective_date == JAN_2

        assert await repository.sum_movements_before("X", JAN_2, MovementKind.INBOUND) == 0
        assert await repository.sum_movements_before("X", JAN_3, MovementKind.INBOUND) == 7

    async def test_malformed_quantity_raises_repository_error(self, repository, movement_db):
        async with aiosqlite.connect(movement_db) as conn:
            cursor = await conn.execute(
                "INSERT INTO exit_documents (exit_date) VALUES (?)", ("2024-01-02",)
            )
            await conn.execute(
                "INSERT INTO exit_lines (exit_id, item_code, quantity) VALUES (?, ?, ?)",
                (cursor.lastrowid, "X", "twelve"),
            )
            await conn.commit()

        with pytest.raises(RepositoryError) as exc_info:
            await repository.list_movements_in_range("X", JAN_1, JAN_3)
        assert exc_info.value.details["query"] == "list_movements_in_range"
        assert exc_info.value.details["date_from"] == "2024-01-01"

        with pytest.raises(RepositoryError) as exc_info:
            await repository.sum_movements_before("X", JAN_3, MovementKind.OUTBOUND)
        assert exc_info.value.details["kind"] == "outbound"

    async def test_negative_quantity_rejected_by_both_reads(self, repository, movement_db):
        async with aiosqlite.connect(movement_db) as conn:
            cursor = await conn.execute(
                "INSERT INTO entry_documents (entry_date) VALUES (?)", ("2024-01-01",)
            )
            await conn.execute(
                "INSERT INTO entry_lines (entry_id, item_code, quantity) VALUES (?, ?, ?)",
                (cursor.lastrowid, "X", "-5"),
            )
            await conn.commit()

        with pytest.raises(RepositoryError) as exc_info:
            await repository.sum_movements_before("X", JAN_2, MovementKind.INBOUND)
        assert exc_info.value.details["query"] == "sum_movements_before"
        assert "negative" in exc_info.value.details["error"]

        with pytest.raises(RepositoryError) as exc_info:
            await repository.list_movements_in_range("X", JAN_1, JAN_1)
        assert exc_info.value.details["query"] == "list_movements_in_range"

    async def test_missing_table_raises_repository_error(self, repository, movement_db):
        async with aiosqlite.connect(movement_db) as conn:
            await conn.execute("DROP TABLE exit_lines")
            await conn.commit()

        with pytest.raises(RepositoryError):
            await repository.list_movements_in_range("X", JAN_1, JAN_3)


class TestKardexOverSQLite:
    async def test_example_scenario(self, repository):
        await repository.record_entry(date(2023, 12, 15), [("X", 150)])
        await repository.record_exit(date(2023, 12, 20), [("X", 50)])
        await repository.record_entry(JAN_1, [("X", 20)])
        await repository.record_exit(JAN_2, [("X", 50)])

        use_case = ComputeKardexUseCase(repository=repository, query_timeout=5.0)
        result = await use_case.execute(KardexRequest(item_id="X", date_from=JAN_1, date_to=JAN_3))
        window = result.window

        assert window.opening_balance == Decimal("100")
        assert [b.running_balance for b in window.buckets] == [
            Decimal("120"),
            Decimal("70"),
            Decimal("70"),
        ]
        assert (window.totals.inbound, window.totals.outbound, window.totals.net) == (
            Decimal("20"),
            Decimal("50"),
            Decimal("-30"),
        )
