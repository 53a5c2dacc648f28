"""Combine the live quote with local fundamentals into a NormalizedInput."""

import asyncio
import logging
from pathlib import Path

from verdict_mcp.data.local_store import extract_recent_years, read_local_financial_data
from verdict_mcp.data.yfinance_client import fetch_quote_snapshot
from verdict_mcp.engine.types import NormalizedInput
from verdict_mcp.utils.sanitize import sanitize_text

logger = logging.getLogger(__name__)


async def combine_stock_data(
    ticker: str,
    *,
    data_dir: Path | None = None,
    years: int | None = None,
) -> NormalizedInput:
    """
    Fetch the quote and read local fundamentals concurrently, then merge them.

    The company name comes from the local file name when present, else from
    the quote.

    Args:
        ticker: Normalized ticker (dots allowed)
        data_dir: Local store root override
        years: Number of recent fiscal years to keep

    Returns:
        NormalizedInput ready for the engine

    Raises:
        StockDataError: From either source; the first failure wins
    """
    loop = asyncio.get_running_loop()
    quote, local = await asyncio.gather(
        fetch_quote_snapshot(ticker),
        loop.run_in_executor(None, read_local_financial_data, ticker, data_dir),
    )

    history = extract_recent_years(local.rows, years)
    if not history:
        logger.warning(f"{ticker}: local file {local.path.name} has no recent fiscal years")

    company_name = local.company_name or sanitize_text(quote.name)

    return NormalizedInput(
        ticker=ticker,
        current_price=quote.current_price,
        market_cap=quote.market_cap,
        week52_high=quote.week52_high,
        week52_low=quote.week52_low,
        ma200=quote.ma200,
        debt_to_equity=quote.debt_to_equity,
        ttm_per=quote.ttm_per,
        financial_history=history,
        company_name=company_name,
        currency=quote.currency,
    )
