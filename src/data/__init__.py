"""
Data layer: persisted position store and quote providers.

Depends on stocko_core.contracts for Position/PriceHistory; no dependency from stocko_core back to data.
"""

from data.fetcher import QuoteFetcher, StaticQuoteFetcher
from data.portfolio_store import PortfolioStore

__all__ = [
    "PortfolioStore",
    "QuoteFetcher",
    "StaticQuoteFetcher",
    "get_quote_fetcher",
]


def get_quote_fetcher(data_cfg) -> QuoteFetcher:
    """Build the fetcher named by ``data_cfg.source``. Provider SDKs are imported lazily."""
    source = data_cfg.source.lower()
    if source == "alphavantage":
        from data.alphavantage_fetcher import AlphaVantageQuoteFetcher

        return AlphaVantageQuoteFetcher(data_cfg.alphavantage_api_key)
    if source == "alpaca":
        from data.alpaca_fetcher import AlpacaQuoteFetcher

        return AlpacaQuoteFetcher(data_cfg.alpaca_api_key, data_cfg.alpaca_api_secret)
    raise ValueError(f"Unsupported data source '{data_cfg.source}'. Supported: ['alphavantage', 'alpaca']")
