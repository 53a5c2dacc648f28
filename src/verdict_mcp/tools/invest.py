"""Investment verdict tools: persona analysis, combined data, local store listing."""

import logging
from datetime import datetime, timezone
from time import perf_counter
from typing import Any

from verdict_mcp.data.combiner import combine_stock_data
from verdict_mcp.data.errors import StockDataError, StockDataErrorType
from verdict_mcp.data.local_store import list_local_tickers
from verdict_mcp.data.yfinance_client import get_market_state
from verdict_mcp.engine.analyzer import evaluate
from verdict_mcp.engine.triggers import get_trigger_message, has_trigger_message
from verdict_mcp.engine.types import NormalizedInput
from verdict_mcp.utils.provenance import build_error_response, build_meta, build_provenance
from verdict_mcp.utils.validators import normalize_ticker

logger = logging.getLogger(__name__)


def _provenance(as_of: str, data: NormalizedInput) -> dict[str, Any]:
    return {
        "quote": build_provenance(source="yfinance", as_of=as_of),
        "fundamentals": build_provenance(
            source="local_json",
            years=[r.year for r in data.financial_history],
        ),
    }


async def _load(tool: str, ticker: str) -> NormalizedInput | dict[str, Any]:
    """Normalize the ticker and build the input record, or return an error response."""
    try:
        normalized = normalize_ticker(ticker)
    except ValueError as e:
        return build_error_response(StockDataErrorType.INVALID_TICKER, str(e), ticker=ticker, tool=tool)

    try:
        return await combine_stock_data(normalized)
    except StockDataError as e:
        logger.warning(f"{tool}({normalized}): {e.error_type.value}: {e}")
        return build_error_response(e.error_type, str(e), ticker=normalized, tool=tool)


async def analyze_investment(ticker: str) -> dict[str, Any]:
    """
    Run the six persona valuations and the consensus for a ticker.

    Args:
        ticker: Stock ticker symbol (e.g. AAPL, BRK.B)

    Returns:
        Dict with summary, per-persona results and meta, or an error response
    """
    start_time = perf_counter()

    loaded = await _load("analyze_investment", ticker)
    if isinstance(loaded, dict):
        return loaded

    as_of = datetime.now(timezone.utc)
    try:
        result = evaluate(loaded, as_of=as_of, concurrent=True)
    except Exception as e:
        logger.exception(f"analyze_investment({loaded.ticker}) failed")
        return build_error_response(
            StockDataErrorType.CALCULATION_ERROR,
            f"Analysis failed: {e}",
            ticker=loaded.ticker,
            tool="analyze_investment",
        )

    duration_ms = (perf_counter() - start_time) * 1000
    response = result.to_dict()
    response["meta"] = {
        **build_meta("analyze_investment", duration_ms),
        **result.meta,
        "market_state": get_market_state(),
    }
    response["data_provenance"] = _provenance(as_of.isoformat(), loaded)
    return response


async def combined_stock_data(ticker: str) -> dict[str, Any]:
    """
    Return the normalized input record the personas would see.

    Args:
        ticker: Stock ticker symbol

    Returns:
        Dict with market_status and financial_history, or an error response
    """
    start_time = perf_counter()

    loaded = await _load("combined_stock_data", ticker)
    if isinstance(loaded, dict):
        return loaded

    duration_ms = (perf_counter() - start_time) * 1000
    as_of = datetime.now(timezone.utc).isoformat()
    return {
        "meta": build_meta("combined_stock_data", duration_ms),
        "data_provenance": _provenance(as_of, loaded),
        **loaded.to_dict(),
    }


async def local_tickers() -> dict[str, Any]:
    """List tickers with a local fundamentals file."""
    start_time = perf_counter()
    tickers = list_local_tickers()
    duration_ms = (perf_counter() - start_time) * 1000
    return {
        "meta": build_meta("local_tickers", duration_ms),
        "count": len(tickers),
        "tickers": tickers,
    }


def describe_trigger(code: str) -> dict[str, Any]:
    """Human-readable message for a trigger code. Unknown codes echo back."""
    normalized = code.strip().upper()
    return {
        "meta": build_meta("describe_trigger"),
        "trigger_code": normalized,
        "known": has_trigger_message(normalized),
        "message": get_trigger_message(normalized),
    }
