"""Error kinds raised by the data layer."""

from enum import Enum


class StockDataErrorType(str, Enum):
    INVALID_TICKER = "invalid_ticker"
    TICKER_NOT_FOUND = "ticker_not_found"
    LOCAL_DATA_NOT_FOUND = "local_data_not_found"
    INSUFFICIENT_DATA = "insufficient_data"
    RATE_LIMIT = "rate_limited"
    API_ERROR = "api_error"
    CALCULATION_ERROR = "calculation_error"


class StockDataError(Exception):
    """Raised when market or fundamentals data cannot be produced for a ticker."""

    error_type = StockDataErrorType.API_ERROR

    def __init__(
        self,
        message: str,
        ticker: str | None = None,
        error_type: StockDataErrorType | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.ticker = ticker
        if error_type is not None:
            self.error_type = error_type
        self.cause = cause


class LocalDataNotFoundError(StockDataError):
    """No local fundamentals file exists for the ticker."""

    error_type = StockDataErrorType.LOCAL_DATA_NOT_FOUND


class RateLimitError(StockDataError):
    """Upstream provider refused the request (HTTP 429)."""

    error_type = StockDataErrorType.RATE_LIMIT


class TickerNotFoundError(StockDataError):
    """Upstream provider does not know the ticker."""

    error_type = StockDataErrorType.TICKER_NOT_FOUND


class InsufficientDataError(StockDataError):
    """Required quote fields or local fundamentals are missing or unreadable."""

    error_type = StockDataErrorType.INSUFFICIENT_DATA
