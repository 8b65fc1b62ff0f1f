"""Pytest fixtures: price histories, a static quote fetcher, and temp store paths."""

from datetime import date
from pathlib import Path

import pytest

from data.fetcher import StaticQuoteFetcher
from stocko_core.contracts import Collections, Exchange, Order, Position, PricePoint


def _closes(*values: float) -> list[PricePoint]:
    """Consecutive daily closes starting 2024-01-02, oldest first."""
    return [PricePoint(date(2024, 1, 2 + i), v) for i, v in enumerate(values)]


@pytest.fixture
def histories() -> dict[str, list[PricePoint]]:
    return {
        "AAPL": _closes(180.0, 184.0, 185.0),
        "MSFT": _closes(400.0, 390.0),
        "SHOP.TO": _closes(100.0, 110.0),
    }


@pytest.fixture
def fetcher(histories: dict[str, list[PricePoint]]) -> StaticQuoteFetcher:
    return StaticQuoteFetcher(histories)


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "stocko_data.json"


@pytest.fixture
def collections() -> Collections:
    """One open position, one watched symbol, one archived position."""
    return Collections(
        portfolio={
            "AAPL": Position("AAPL", Exchange.NYSE, [Order(10, 5.0), Order(10, 7.0)]),
        },
        watchlist={"MSFT": Position("MSFT")},
        archive={
            "SHOP.TO": Position("SHOP.TO", Exchange.TSX, [Order(10, 5.0), Order(-10, 8.0)]),
        },
    )
