"""Data layer: live quotes, local fundamentals and their combination."""

from verdict_mcp.data.combiner import combine_stock_data
from verdict_mcp.data.errors import (
    InsufficientDataError,
    LocalDataNotFoundError,
    RateLimitError,
    StockDataError,
    StockDataErrorType,
    TickerNotFoundError,
)
from verdict_mcp.data.local_store import (
    LocalFinancials,
    extract_recent_years,
    list_local_tickers,
    read_local_financial_data,
)
from verdict_mcp.data.yfinance_client import (
    QuoteSnapshot,
    classify_upstream_error,
    extract_quote_snapshot,
    fetch_quote_snapshot,
    get_market_state,
)

__all__ = [
    # Combiner
    "combine_stock_data",
    # Errors
    "InsufficientDataError",
    "LocalDataNotFoundError",
    "RateLimitError",
    "StockDataError",
    "StockDataErrorType",
    "TickerNotFoundError",
    # Local store
    "LocalFinancials",
    "extract_recent_years",
    "list_local_tickers",
    "read_local_financial_data",
    # yfinance
    "QuoteSnapshot",
    "classify_upstream_error",
    "extract_quote_snapshot",
    "fetch_quote_snapshot",
    "get_market_state",
]
