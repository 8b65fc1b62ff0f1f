"""Error kinds raised by stocko-core and the data layer. Every one aborts the command."""

DATA_FILE_NAME = "stocko_data.json"


class StockoError(Exception):
    """Base class for all user-facing stocko failures."""


class SaveDataError(StockoError):
    """Writing the persisted store failed."""

    def __init__(self, cause: object) -> None:
        self.cause = cause
        super().__init__(f"Failed to save {DATA_FILE_NAME}. Cause: {cause}")


class ReadDataError(StockoError):
    """Reading or parsing the persisted store failed."""

    def __init__(self, cause: object) -> None:
        self.cause = cause
        super().__init__(f"Failed to read {DATA_FILE_NAME}. Cause: {cause}")


class ProviderError(StockoError):
    """Quote fetch failed."""

    def __init__(self, cause: object, provider: str = "AlphaVantage") -> None:
        self.cause = cause
        self.provider = provider
        super().__init__(f"Error occurred when fetching data from {provider}. Cause: {cause}")


AlphaVantageError = ProviderError


class InsufficientHistoryError(ProviderError):
    """Provider returned fewer than two closes for a symbol."""

    def __init__(self, symbol: str, points: int, provider: str = "AlphaVantage") -> None:
        self.symbol = symbol
        self.points = points
        super().__init__(
            f"need at least 2 daily closes for {symbol}, got {points}",
            provider=provider,
        )


class InvalidExchange(StockoError):
    """Unrecognized exchange short code."""

    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(f"Invalid exchange symbol: {code}")


class InvalidShareQuantity(StockoError):
    """Sell of more shares than held, sell with no position, or a zero-share order."""

    def __init__(self, symbol: str, shares: int) -> None:
        self.symbol = symbol
        self.shares = shares
        super().__init__(f"You do not have {shares} shares of {symbol} in your portfolio")
