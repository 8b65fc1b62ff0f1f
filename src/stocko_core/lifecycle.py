"""
Position lifecycle: apply buy/sell/watch commands to Collections.

Positions are opened in the portfolio by the first buy, grow by appended
orders, and move to the archive (with their full ledger) when a sell takes
net shares to exactly zero. Validation happens before any mutation, so a
failed command leaves the collections untouched.
"""

import logging
from dataclasses import dataclass
from typing import Callable

from stocko_core.contracts import (
    DEFAULT_EXCHANGE,
    Collections,
    Exchange,
    Order,
    Position,
    PriceHistory,
)
from stocko_core.errors import InvalidExchange, InvalidShareQuantity
from stocko_core.ledger import total_shares

logger = logging.getLogger(__name__)

_EXCHANGE_CODES = {
    "tsx": Exchange.TSX,
    "tsxv": Exchange.TSXV,
    "nyse": Exchange.NYSE,
}


def parse_exchange(code: str | None) -> Exchange:
    """Map a short venue code (case-insensitive) to an Exchange. None -> default venue."""
    if code is None:
        return DEFAULT_EXCHANGE
    try:
        return _EXCHANGE_CODES[code.strip().lower()]
    except KeyError:
        raise InvalidExchange(code) from None


def resolve_symbol(symbol: str, exchange_code: str | None = None) -> tuple[str, Exchange]:
    """Uppercase *symbol* and append the venue suffix for *exchange_code*."""
    exchange = parse_exchange(exchange_code)
    return (symbol.strip() + exchange.suffix).upper(), exchange


@dataclass(frozen=True)
class OrderOutcome:
    """Where an applied order left its position."""

    position: Position
    opened: bool
    archived: bool


def apply_order(
    collections: Collections,
    symbol: str,
    exchange_code: str | None,
    shares: int,
    price: float,
) -> OrderOutcome:
    """Validate and apply one signed order (shares < 0 sells) to *collections*.

    Raises InvalidExchange for an unknown venue code and InvalidShareQuantity
    when selling without a position or selling more than is held.

    A sell that brings the position to zero moves it to the archive. The
    archive keeps one entry per symbol, so closing a symbol a second time
    replaces its earlier archived ledger.
    """
    if shares == 0:
        raise ValueError("Order must buy or sell at least one share")

    key, exchange = resolve_symbol(symbol, exchange_code)
    existing = collections.portfolio.get(key)
    opened = existing is None

    if existing is None:
        if shares < 0:
            raise InvalidShareQuantity(key, abs(shares))
        existing = Position(symbol=key, exchange=exchange)

    held = total_shares(existing.orders)
    if shares < 0 and abs(shares) > held:
        raise InvalidShareQuantity(key, abs(shares))

    updated = existing.with_order(Order(shares=shares, share_price=price))

    # held is the pre-append count
    if shares < 0 and abs(shares) == held:
        collections.portfolio.pop(key, None)
        collections.archive[key] = updated
        logger.info("Archived %s after selling %d @ %.2f", key, abs(shares), price)
        return OrderOutcome(position=updated, opened=False, archived=True)

    collections.portfolio[key] = updated
    if opened:
        logger.info("Opened %s with %d @ %.2f", key, shares, price)
    else:
        logger.info("Updated %s: %+d @ %.2f, now %d shares", key, shares, price, held + shares)
    return OrderOutcome(position=updated, opened=opened, archived=False)


def add_to_watchlist(
    collections: Collections,
    symbol: str,
    exchange_code: str | None,
    fetch: Callable[[str], PriceHistory],
) -> Position:
    """Probe the quote provider for *symbol*, then add an empty position to the watch list.

    A provider failure propagates and nothing is added. An existing entry
    for the symbol is replaced.
    """
    key, exchange = resolve_symbol(symbol, exchange_code)
    fetch(key)
    position = Position(symbol=key, exchange=exchange)
    collections.watchlist[key] = position
    logger.info("Watching %s (%s)", key, exchange.value)
    return position
