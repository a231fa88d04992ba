"""Pytest configuration and shared fixtures."""

from collections.abc import Callable
from datetime import date
from decimal import Decimal

import pytest

from kardex.config import reset_settings
from kardex.core.entities import MovementEvent, MovementKind


@pytest.fixture(autouse=True)
def _fresh_settings(tmp_path, monkeypatch):
    """Isolate settings and the data directory per test."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def make_movement() -> Callable[..., MovementEvent]:
    """Factory for movement events of item X."""

    def _make(
        kind: MovementKind,
        quantity: int | str | Decimal,
        effective_date: date,
        document_id: int = 1,
        item_id: str = "X",
    ) -> MovementEvent:
        return MovementEvent(
            item_id=item_id,
            kind=kind,
            quantity=Decimal(str(quantity)),
            effective_date=effective_date,
            document_id=document_id,
        )

    return _make


@pytest.fixture
def inbound(make_movement) -> Callable[..., MovementEvent]:
    def _inbound(quantity, effective_date, document_id=1):
        return make_movement(MovementKind.INBOUND, quantity, effective_date, document_id)

    return _inbound


@pytest.fixture
def outbound(make_movement) -> Callable[..., MovementEvent]:
    def _outbound(quantity, effective_date, document_id=1):
        return make_movement(MovementKind.OUTBOUND, quantity, effective_date, document_id)

    return _outbound
