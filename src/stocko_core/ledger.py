"""
Order ledger math: aggregate a position's orders into cost basis and proceeds.

Pure functions. A ledger with zero net shares yields ClosedPositionMetrics,
which carries no average price, so nothing ever divides by a zero share count.
"""

from typing import Iterable, Sequence

from stocko_core.contracts import (
    ClosedPositionMetrics,
    OpenPositionMetrics,
    Order,
    Position,
    PositionMetrics,
)


def total_shares(orders: Iterable[Order]) -> int:
    """Net shares held: signed sum over every order."""
    return sum(o.shares for o in orders)


def compute_metrics(orders: Sequence[Order]) -> PositionMetrics:
    """Aggregate *orders* into spent/sold totals, net shares and (if open) average price.

    - total_spent: sum of shares * price over buys
    - total_sell : sum of |shares| * price over sells
    - total_shares: signed sum of shares
    - average_price: total_spent / total_shares, only when total_shares != 0
    """
    total_spent = sum(o.shares * o.share_price for o in orders if o.is_buy())
    total_sell = sum(abs(o.shares) * o.share_price for o in orders if o.is_sell())
    net = total_shares(orders)

    if net == 0:
        return ClosedPositionMetrics(
            total_spent=float(total_spent),
            total_sell=float(total_sell),
        )
    return OpenPositionMetrics(
        total_spent=float(total_spent),
        total_sell=float(total_sell),
        total_shares=net,
        average_price=total_spent / net,
    )


def unrealized_gain(metrics: OpenPositionMetrics, price: float) -> tuple[float, float]:
    """Gain of an open position marked at *price*: (amount, fraction of average price).

    The amount scales total_spent by the move relative to the average price.
    """
    gain_pct = (price - metrics.average_price) / metrics.average_price
    return metrics.total_spent * gain_pct, gain_pct


def archive_totals(positions: Iterable[Position]) -> ClosedPositionMetrics:
    """Realized totals summed over closed positions."""
    spent = 0.0
    sold = 0.0
    for pos in positions:
        m = compute_metrics(pos.orders)
        spent += m.total_spent
        sold += m.total_sell
    return ClosedPositionMetrics(total_spent=spent, total_sell=sold)
