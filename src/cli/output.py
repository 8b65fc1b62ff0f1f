"""
Terminal tables for the portfolio, watch list and archive.

Formatters take already-computed data (positions plus their quote metrics)
and return strings; they never fetch or touch the store.
"""

from __future__ import annotations

from typing import Iterable, Sequence

import click
from tabulate import tabulate

from stocko_core.contracts import ClosedPositionMetrics, OpenPositionMetrics, Position, QuoteMetrics
from stocko_core.ledger import archive_totals, compute_metrics, unrealized_gain


def _signed(amount: float, pct: float | None) -> str:
    pct_str = "n/a" if pct is None else f"{pct:+.2f}%"
    text = f"{amount:+.2f} ({pct_str})" if amount >= 0 else f"{amount:.2f} ({pct_str})"
    return click.style(text, fg="green" if amount >= 0 else "red")


def format_change(metrics: QuoteMetrics) -> str:
    """Day change, e.g. ``+1.25 (+0.84%)`` in green or ``-0.40 (-0.31%)`` in red."""
    return _signed(metrics.change, metrics.change_percentage)


def format_gain(gain: float, gain_pct: float | None) -> str:
    """Gain amount with *gain_pct* given as a fraction (0.6 -> 60.00%)."""
    return _signed(gain, None if gain_pct is None else gain_pct * 100.0)


def _fmt_price(value: float) -> str:
    return f"{value:,.2f}"


def _fmt_orders(position: Position) -> str:
    return "\n".join(f"{o.shares} @ {o.share_price:g}" for o in position.orders)


# ---------------------------------------------------------------------------
# Table rendering
# ---------------------------------------------------------------------------


def render_table(
    title: str,
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    footer: Sequence[str] | None = None,
) -> str:
    """fancy_grid table with *title* centred above it. Cells may hold several lines and ANSI styling."""
    body = [list(r) for r in rows] or [["(none)"] + [""] * (len(headers) - 1)]
    if footer:
        body.append(list(footer))
    table = tabulate(body, headers=list(headers), tablefmt="fancy_grid", disable_numparse=True)
    width = len(table.split("\n", 1)[0])
    return f"{title.center(width).rstrip()}\n{table}"


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


def format_portfolio(entries: Iterable[tuple[Position, QuoteMetrics]]) -> str:
    """Open positions: price, day change, shares, book cost and unrealized gain."""
    rows = []
    for position, quote in entries:
        metrics = compute_metrics(position.orders)
        if not isinstance(metrics, OpenPositionMetrics):
            continue
        gain, gain_pct = unrealized_gain(metrics, quote.close_today)
        rows.append([
            position.symbol,
            _fmt_price(quote.close_today),
            format_change(quote),
            str(metrics.total_shares),
            _fmt_price(metrics.book_cost),
            format_gain(gain, gain_pct),
        ])
    return render_table(
        "Portfolio",
        ["Symbol", "Price", "Change", "Shares", "Book Cost", "Total Gain"],
        rows,
    )


def format_watchlist(entries: Iterable[tuple[Position, QuoteMetrics]]) -> str:
    rows = [
        [position.symbol, _fmt_price(quote.close_today), format_change(quote)]
        for position, quote in entries
    ]
    return render_table("Watch List", ["Symbol", "Price", "Change"], rows)


def format_archive(positions: Sequence[Position]) -> str:
    """Closed positions with their full ledger and realized gain, plus a total row."""
    rows = []
    for position in positions:
        m = compute_metrics(position.orders)
        closed = ClosedPositionMetrics(total_spent=m.total_spent, total_sell=m.total_sell)
        rows.append([
            position.symbol,
            _fmt_orders(position),
            format_gain(closed.realized_gain, closed.realized_gain_pct),
        ])
    totals = archive_totals(positions)
    return render_table(
        "Archive",
        ["Symbol", "Orders", "Gain"],
        rows,
        footer=["Total Gain", "", format_gain(totals.realized_gain, totals.realized_gain_pct)],
    )
