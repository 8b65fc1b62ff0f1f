"""
Alpaca quote fetcher: implements QuoteFetcher using the alpaca-py SDK.

Maps Alpaca daily Bar objects to stocko_core.contracts.PricePoint (UTC date, close).
Free tier uses IEX data; SIP requires Algo Trader Plus subscription.
Alpaca lists US venues only, so TSX/TSXV suffixed symbols will not resolve.
"""

import logging
from datetime import datetime, timedelta, timezone

from stocko_core.contracts import PriceHistory, PricePoint
from stocko_core.errors import ProviderError

logger = logging.getLogger(__name__)

# enough calendar days to span a long weekend plus a holiday
_LOOKBACK_DAYS = 10


class AlpacaQuoteFetcher:
    """
    Fetch daily closes from Alpaca Market Data API.

    Uses StockHistoricalDataClient from alpaca-py.
    API keys via constructor (typically from AppConfig, sourced from env vars).
    """

    provider = "Alpaca"

    def __init__(self, api_key: str, api_secret: str, *, feed: str = "iex") -> None:
        if not api_key or not api_secret:
            raise ValueError(
                "Alpaca API key and secret are required. "
                "Set APCA_API_KEY_ID and APCA_API_SECRET_KEY environment variables."
            )
        try:
            from alpaca.data.historical import StockHistoricalDataClient
        except ImportError:
            raise ImportError(
                "alpaca-py is required for AlpacaQuoteFetcher. "
                "Install with: pip install 'stocko[alpaca]'"
            )
        self._client = StockHistoricalDataClient(api_key, api_secret)
        self._feed = feed

    def fetch_daily(self, symbol: str, *, now: datetime | None = None) -> PriceHistory:
        """Fetch daily bars for the last few sessions; normalize to UTC dates."""
        from alpaca.data.enums import DataFeed
        from alpaca.data.requests import StockBarsRequest
        from alpaca.data.timeframe import TimeFrame

        end = now or datetime.now(timezone.utc)
        request_params = StockBarsRequest(
            symbol_or_symbols=symbol,
            timeframe=TimeFrame.Day,
            start=end - timedelta(days=_LOOKBACK_DAYS),
            end=end,
            feed=DataFeed(self._feed.lower()),
        )
        try:
            response = self._client.get_stock_bars(request_params)
        except Exception as exc:
            raise ProviderError(exc, provider=self.provider) from exc

        raw_bars = response.data.get(symbol, []) if hasattr(response, "data") else response.get(symbol, [])
        points: list[PricePoint] = []
        for alpaca_bar in raw_bars:
            ts = alpaca_bar.timestamp
            if ts.tzinfo is None:
                ts = ts.replace(tzinfo=timezone.utc)
            else:
                ts = ts.astimezone(timezone.utc)
            points.append(PricePoint(date=ts.date(), close=float(alpaca_bar.close)))
        points.sort(key=lambda p: p.date)
        logger.info("Fetched %d daily bars for %s", len(points), symbol)
        return PriceHistory(symbol=symbol, points=points)
