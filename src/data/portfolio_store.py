"""
Persist and load the three position buckets (JSON, one file per path).

Load once, mutate in memory, save once per command. Saves replace the file
in full via a temp file + os.replace; the last writer wins.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import jsonschema

from stocko_core.contracts import Collections, Exchange, Order, Position
from stocko_core.errors import ReadDataError, SaveDataError
from stocko_core.ledger import total_shares

logger = logging.getLogger(__name__)

BUCKETS = ("portfolio", "watchlist", "archive")

_ORDER_SCHEMA = {
    "type": "object",
    "properties": {
        "shares": {"type": "integer"},
        "share_price": {"type": "number"},
    },
    "required": ["shares", "share_price"],
}

_POSITION_SCHEMA = {
    "type": "object",
    "properties": {
        "symbol": {"type": "string", "minLength": 1},
        "exchange": {"enum": [e.value for e in Exchange]},
        "orders": {"type": "array", "items": _ORDER_SCHEMA},
    },
    "required": ["symbol", "orders"],
}

STORE_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        bucket: {"type": "object", "additionalProperties": _POSITION_SCHEMA}
        for bucket in BUCKETS
    },
    "required": list(BUCKETS),
}


def _position_to_dict(pos: Position) -> dict[str, Any]:
    # price is transient and never written
    return {
        "symbol": pos.symbol,
        "exchange": pos.exchange.value,
        "orders": [{"shares": o.shares, "share_price": o.share_price} for o in pos.orders],
    }


def _position_from_dict(raw: dict[str, Any]) -> Position:
    return Position(
        symbol=raw["symbol"],
        exchange=Exchange(raw.get("exchange", Exchange.NYSE.value)),
        orders=[Order(shares=int(o["shares"]), share_price=float(o["share_price"])) for o in raw["orders"]],
    )


def collections_to_dict(collections: Collections) -> dict[str, Any]:
    """Serializable form of *collections*: bucket -> symbol -> position object."""
    return {
        bucket: {sym: _position_to_dict(pos) for sym, pos in getattr(collections, bucket).items()}
        for bucket in BUCKETS
    }


def _check_buckets(collections: Collections) -> None:
    for bucket in BUCKETS:
        for key, pos in getattr(collections, bucket).items():
            if key != pos.symbol.upper():
                raise ValueError(f"{bucket} key {key!r} does not match symbol {pos.symbol!r}")
    for key, pos in collections.portfolio.items():
        held = total_shares(pos.orders)
        if held <= 0:
            raise ValueError(f"portfolio position {key} holds {held} shares")
    for key, pos in collections.archive.items():
        held = total_shares(pos.orders)
        if held != 0:
            raise ValueError(f"archived position {key} still holds {held} shares")
    for key, pos in collections.watchlist.items():
        if pos.orders:
            raise ValueError(f"watch list entry {key} has orders")


def collections_from_dict(data: dict[str, Any]) -> Collections:
    """Validate *data* against STORE_SCHEMA and build Collections.

    Beyond the schema, each bucket key must equal its position's upper-cased
    symbol, portfolio positions must hold shares, archived positions must
    hold none, and watch list entries carry no orders.

    Raises jsonschema.ValidationError on malformed input and ValueError when
    a bucket breaks those rules.
    """
    jsonschema.validate(instance=data, schema=STORE_SCHEMA)
    collections = Collections(
        **{
            bucket: {sym: _position_from_dict(raw) for sym, raw in data[bucket].items()}
            for bucket in BUCKETS
        }
    )
    _check_buckets(collections)
    return collections


class PortfolioStore:
    """JSON-file-backed store for portfolio, watch list and archive."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def load(self) -> Collections:
        """Read the store. A missing file yields empty collections.

        Raises ReadDataError if the file cannot be read, is not JSON, or
        does not match the store schema or bucket rules.
        """
        if not self._path.exists():
            logger.debug("No store at %s; starting empty", self._path)
            return Collections()

        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            raise ReadDataError(exc) from exc

        try:
            collections = collections_from_dict(data)
        except jsonschema.ValidationError as exc:
            raise ReadDataError(exc.message) from exc
        except ValueError as exc:
            raise ReadDataError(exc) from exc

        logger.debug(
            "Loaded %s: %d open, %d watched, %d archived",
            self._path,
            len(collections.portfolio),
            len(collections.watchlist),
            len(collections.archive),
        )
        return collections

    def save(self, collections: Collections) -> None:
        """Overwrite the store with *collections*. Raises SaveDataError on failure."""
        payload = json.dumps(collections_to_dict(collections), indent=2, sort_keys=True)
        tmp_name = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.write("\n")
            os.replace(tmp_name, self._path)
        except OSError as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise SaveDataError(exc) from exc
        logger.debug("Saved %s", self._path)
