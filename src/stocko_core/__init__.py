"""
stocko-core: portfolio ledger math and position lifecycle.

No I/O, no network. Consumes orders and price histories, produces metrics
and updated Collections. Fully deterministic and unit-testable.
"""

from stocko_core.contracts import (
    ClosedPositionMetrics,
    Collections,
    Currency,
    Exchange,
    OpenPositionMetrics,
    Order,
    Position,
    PriceHistory,
    PricePoint,
    QuoteMetrics,
)
from stocko_core.errors import (
    AlphaVantageError,
    InsufficientHistoryError,
    InvalidExchange,
    InvalidShareQuantity,
    ProviderError,
    ReadDataError,
    SaveDataError,
    StockoError,
)
from stocko_core.ledger import compute_metrics
from stocko_core.lifecycle import add_to_watchlist, apply_order
from stocko_core.quotes import compute_change

__all__ = [
    "AlphaVantageError",
    "ClosedPositionMetrics",
    "Collections",
    "compute_change",
    "compute_metrics",
    "Currency",
    "Exchange",
    "InsufficientHistoryError",
    "InvalidExchange",
    "InvalidShareQuantity",
    "OpenPositionMetrics",
    "Order",
    "Position",
    "PriceHistory",
    "PricePoint",
    "ProviderError",
    "QuoteMetrics",
    "ReadDataError",
    "SaveDataError",
    "StockoError",
    "add_to_watchlist",
    "apply_order",
]
