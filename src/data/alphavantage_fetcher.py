"""
Alpha Vantage quote fetcher: TIME_SERIES_DAILY over HTTPS via requests.

Maps the "Time Series (Daily)" payload to stocko_core.contracts.PricePoint,
sorted oldest first. Alpha Vantage reports most failures (bad symbol, rate
limit, bad key) as HTTP 200 with an "Error Message" / "Note" / "Information"
body, so those are checked explicitly.
"""

import logging
from datetime import date

import requests

from stocko_core.contracts import PriceHistory, PricePoint
from stocko_core.errors import ProviderError

logger = logging.getLogger(__name__)

BASE_URL = "https://www.alphavantage.co/query"
_SERIES_KEY = "Time Series (Daily)"
_CLOSE_KEY = "4. close"
_ERROR_KEYS = ("Error Message", "Note", "Information")


class AlphaVantageQuoteFetcher:
    """
    Fetch daily closes from the Alpha Vantage REST API.

    API key via constructor (typically from AppConfig, sourced from ALPHAVANTAGE_API_KEY).
    """

    provider = "AlphaVantage"

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = BASE_URL,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        if not api_key:
            raise ValueError(
                "Alpha Vantage API key is required. "
                "Set the ALPHAVANTAGE_API_KEY environment variable."
            )
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout
        self._session = session or requests.Session()

    def fetch_daily(self, symbol: str) -> PriceHistory:
        """Fetch the compact (last ~100 sessions) daily series for *symbol*."""
        params = {
            "function": "TIME_SERIES_DAILY",
            "symbol": symbol,
            "outputsize": "compact",
            "apikey": self._api_key,
        }
        try:
            response = self._session.get(self._base_url, params=params, timeout=self._timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            raise ProviderError(exc, provider=self.provider) from exc
        except ValueError as exc:
            raise ProviderError(f"invalid JSON response: {exc}", provider=self.provider) from exc

        points = self._parse(symbol, payload)
        logger.info("Fetched %d daily closes for %s", len(points), symbol)
        return PriceHistory(symbol=symbol, points=points)

    def _parse(self, symbol: str, payload: dict) -> list[PricePoint]:
        for key in _ERROR_KEYS:
            if key in payload:
                raise ProviderError(payload[key], provider=self.provider)

        series = payload.get(_SERIES_KEY)
        if not isinstance(series, dict):
            raise ProviderError(f"no daily series in response for {symbol}", provider=self.provider)

        points: list[PricePoint] = []
        try:
            for day, values in series.items():
                points.append(PricePoint(date=date.fromisoformat(day), close=float(values[_CLOSE_KEY])))
        except (KeyError, TypeError, ValueError) as exc:
            raise ProviderError(f"malformed daily series for {symbol}: {exc}", provider=self.provider) from exc

        points.sort(key=lambda p: p.date)
        return points
