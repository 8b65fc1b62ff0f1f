"""Quote metrics: day-over-day change from the last two closes of a price history."""

from stocko_core.contracts import PriceHistory, QuoteMetrics
from stocko_core.errors import InsufficientHistoryError, ProviderError


def compute_change(history: PriceHistory, provider: str = "AlphaVantage") -> QuoteMetrics:
    """Change between the second-to-last and last close (history is oldest first).

    Raises InsufficientHistoryError when fewer than two closes are available,
    and ProviderError when the previous close is zero.
    """
    points = history.points
    if len(points) < 2:
        raise InsufficientHistoryError(history.symbol, len(points), provider=provider)

    yesterday = points[-2].close
    today = points[-1].close
    if yesterday == 0:
        raise ProviderError(f"previous close for {history.symbol} is 0", provider=provider)
    change = today - yesterday
    return QuoteMetrics(
        change=change,
        change_percentage=100.0 * change / yesterday,
        close_today=today,
        close_yesterday=yesterday,
    )
