"""Investment Verdict MCP Server using FastMCP."""

import json
import logging
import os

from fastmcp import FastMCP

from verdict_mcp import SCHEMA_VERSION, SERVER_VERSION
from verdict_mcp.tools import (
    analyze_investment,
    combined_stock_data,
    describe_trigger,
    local_tickers,
)

# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(level=getattr(logging, log_level, logging.INFO))
logger = logging.getLogger(__name__)

# Create FastMCP server instance
mcp = FastMCP(
    name="verdict-mcp",
)


# ============================================================================
# TOOLS
# ============================================================================


@mcp.tool
async def analyze_stock_verdicts(ticker: str) -> str:
    """
    Evaluate a stock through six investor personas and aggregate a consensus.

    Personas: Buffett (compounding value), Lynch (PEG), Graham (intrinsic
    value), Fisher (price-to-sales band), Druckenmiller (trend vs 200-day MA),
    Marks (position in the 52-week cycle).

    Args:
        ticker: Stock ticker symbol (e.g., AAPL, MSFT, BRK.B)

    Returns:
        JSON with total score (0-100), consensus verdict, vote breakdown,
        and per-persona verdict, win rate, trigger code and price guide
    """
    result = await analyze_investment(ticker=ticker)
    return json.dumps(result, indent=2, default=str)


@mcp.tool
async def get_combined_data(ticker: str) -> str:
    """
    Get the merged live quote and local fundamentals used by the personas.

    Args:
        ticker: Stock ticker symbol

    Returns:
        JSON with market status (price, 52-week range, 200-day MA, D/E)
        and up to three fiscal years of EPS, ROE, PER, PBR, PSR, SPS, FCF
    """
    result = await combined_stock_data(ticker=ticker)
    return json.dumps(result, indent=2, default=str)


@mcp.tool
async def list_local_tickers() -> str:
    """
    List tickers that have local fundamentals available for analysis.

    Returns:
        JSON with ticker, company name and exchange for each file
    """
    result = await local_tickers()
    return json.dumps(result, indent=2, default=str)


@mcp.tool
def explain_trigger_code(code: str) -> str:
    """
    Explain a persona trigger code (e.g., BUY_MOAT_BARGAIN, SELL_TREND_BROKEN).

    Args:
        code: Trigger code from a persona result

    Returns:
        JSON with the code, whether it is known, and its message
    """
    return json.dumps(describe_trigger(code), indent=2, default=str)


# ============================================================================
# ENTRY POINT
# ============================================================================


def main() -> None:
    """Run the MCP server."""
    logger.info(f"Starting Investment Verdict MCP Server v{SERVER_VERSION} (schema v{SCHEMA_VERSION})")
    mcp.run()


if __name__ == "__main__":
    main()
