"""Investment verdict tools."""

from verdict_mcp.tools.invest import (
    analyze_investment,
    combined_stock_data,
    describe_trigger,
    local_tickers,
)

__all__ = [
    "analyze_investment",
    "combined_stock_data",
    "describe_trigger",
    "local_tickers",
]
