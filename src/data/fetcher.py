"""
Fetch daily closes for a symbol from a quote provider. Configurable adapter; sync.
"""

from typing import Mapping, Protocol, Sequence

from stocko_core.contracts import PriceHistory, PricePoint
from stocko_core.errors import ProviderError


class QuoteFetcher(Protocol):
    """Protocol for quote fetchers. Implement per provider (Alpha Vantage, Alpaca, etc.)."""

    provider: str

    def fetch_daily(self, symbol: str) -> PriceHistory:
        """Fetch daily closes, oldest first. Raises ProviderError on any failure."""
        ...


class StaticQuoteFetcher:
    """Serves fixed histories; for tests and offline use. Unknown symbols raise ProviderError."""

    provider = "static"

    def __init__(self, histories: Mapping[str, Sequence[PricePoint]] | None = None) -> None:
        self._histories = {k.upper(): list(v) for k, v in (histories or {}).items()}
        self.calls: list[str] = []

    def fetch_daily(self, symbol: str) -> PriceHistory:
        self.calls.append(symbol)
        points = self._histories.get(symbol.upper())
        if points is None:
            raise ProviderError(f"unknown symbol {symbol}", provider=self.provider)
        return PriceHistory(symbol=symbol, points=sorted(points, key=lambda p: p.date))
