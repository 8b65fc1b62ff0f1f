"""
Data contracts for stocko-core: Order, Position, Collections, price history, metrics.

No I/O; these are plain dataclasses. The store serializes them, the CLI
formats them, nothing else mutates them outside a load -> mutate -> save cycle.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Sequence


class Currency(str, Enum):
    """Listing currency. Recorded for completeness; no conversion is done."""

    CAD = "CAD"
    USD = "USD"


class Exchange(str, Enum):
    """Listing venue of a position."""

    TSX = "TSX"
    TSXV = "TSXV"
    NYSE = "NYSE"

    @property
    def suffix(self) -> str:
        """Ticker suffix the quote provider expects for this venue."""
        return _EXCHANGE_SUFFIX[self]


DEFAULT_EXCHANGE = Exchange.NYSE

_EXCHANGE_SUFFIX = {
    Exchange.TSX: ".TO",
    Exchange.TSXV: ".V",
    Exchange.NYSE: "",
}


@dataclass(frozen=True)
class Order:
    """One trade. shares > 0 is a buy, shares < 0 is a sell."""

    shares: int
    share_price: float

    def is_buy(self) -> bool:
        return self.shares > 0

    def is_sell(self) -> bool:
        return self.shares < 0


@dataclass
class Position:
    """A tradable instrument and its full order ledger (oldest first).

    ``price`` is the live close filled in on read paths. It is never persisted.
    """

    symbol: str
    exchange: Exchange = DEFAULT_EXCHANGE
    orders: list[Order] = field(default_factory=list)
    price: float | None = None

    def with_order(self, order: Order) -> "Position":
        """Copy of this position with *order* appended to the ledger."""
        return Position(
            symbol=self.symbol,
            exchange=self.exchange,
            orders=[*self.orders, order],
            price=self.price,
        )


@dataclass
class Collections:
    """The three symbol -> Position buckets owned by the store."""

    portfolio: dict[str, Position] = field(default_factory=dict)
    watchlist: dict[str, Position] = field(default_factory=dict)
    archive: dict[str, Position] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Price history (quote provider output)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PricePoint:
    """Daily close for one trading day."""

    date: date
    close: float


@dataclass(frozen=True)
class PriceHistory:
    """Chronologically ordered closes for a symbol (oldest first)."""

    symbol: str
    points: Sequence[PricePoint]

    def __len__(self) -> int:
        return len(self.points)


# ---------------------------------------------------------------------------
# Derived metrics
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class QuoteMetrics:
    """Day-over-day move between the last two closes."""

    change: float
    change_percentage: float
    close_today: float
    close_yesterday: float


@dataclass(frozen=True)
class OpenPositionMetrics:
    """Ledger aggregate for a position that still holds shares."""

    total_spent: float
    total_sell: float
    total_shares: int
    average_price: float

    @property
    def book_cost(self) -> float:
        return self.total_shares * self.average_price


@dataclass(frozen=True)
class ClosedPositionMetrics:
    """Ledger aggregate for a position with zero net shares. No average price."""

    total_spent: float
    total_sell: float
    total_shares: int = 0

    @property
    def realized_gain(self) -> float:
        return self.total_sell - self.total_spent

    @property
    def realized_gain_pct(self) -> float | None:
        """Realized gain as a fraction of total spent; None when nothing was spent."""
        if self.total_spent == 0:
            return None
        return (self.total_sell - self.total_spent) / self.total_spent


PositionMetrics = OpenPositionMetrics | ClosedPositionMetrics
