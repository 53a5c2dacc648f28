"""Async yfinance quote client with bounded concurrency."""

import asyncio
import logging
import math
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import pandas as pd
import pytz
import yfinance as yf
from requests.exceptions import HTTPError

from verdict_mcp.data.errors import (
    InsufficientDataError,
    RateLimitError,
    StockDataError,
    TickerNotFoundError,
)
from verdict_mcp.utils.indicators import technical_levels
from verdict_mcp.utils.validators import normalize_ticker_for_yahoo

logger = logging.getLogger(__name__)

# Bounded concurrency for yfinance calls
_max_workers = int(os.environ.get("YF_MAX_WORKERS", "4"))
_executor = ThreadPoolExecutor(max_workers=_max_workers)
_fetch_semaphore = asyncio.Semaphore(_max_workers)


@dataclass(frozen=True)
class QuoteSnapshot:
    """Live market fields needed by the engine."""

    ticker: str
    current_price: float
    market_cap: float
    week52_high: float
    week52_low: float
    ma200: float
    ttm_per: float | None
    debt_to_equity: float
    name: str | None = None
    currency: str = "USD"
    levels_source: str = "info"  # "info" or "history" when derived from closes


def _has_value(v: Any) -> bool:
    """
    Check if a value is truly present (not None, NaN, or empty string).

    yfinance often uses float("nan") for missing numerics, which passes
    `is not None` but should be treated as missing.
    """
    if v is None:
        return False
    if isinstance(v, float) and math.isnan(v):
        return False
    if isinstance(v, str) and v.strip() == "":
        return False
    return True


def _first_float(info: dict[str, Any], *keys: str) -> float | None:
    """First present numeric value among keys."""
    for key in keys:
        value = info.get(key)
        if not _has_value(value):
            continue
        try:
            return float(value)
        except (ValueError, TypeError):
            continue
    return None


def classify_upstream_error(error: Exception, ticker: str) -> StockDataError:
    """
    Map a raw yfinance/requests exception to a StockDataError kind.

    Args:
        error: Exception raised while talking to Yahoo
        ticker: Ticker being fetched (for the message)

    Returns:
        RateLimitError, TickerNotFoundError or a generic StockDataError
    """
    if isinstance(error, StockDataError):
        return error

    status_code: int | None = None
    if isinstance(error, HTTPError) and getattr(error, "response", None) is not None:
        status_code = error.response.status_code

    error_str = str(error).lower()
    if (
        status_code == 429
        or "ratelimit" in type(error).__name__.lower()
        or any(p in error_str for p in ("rate limit", "too many requests", "429"))
    ):
        return RateLimitError(
            f"Rate limit exceeded while fetching data for {ticker}. Please try again later.",
            ticker=ticker,
            cause=error,
        )

    if status_code == 404 or "not found" in error_str or "404" in error_str:
        return TickerNotFoundError(f'Ticker symbol "{ticker}" not found.', ticker=ticker, cause=error)

    return StockDataError(f"Failed to fetch data for {ticker}: {error}", ticker=ticker, cause=error)


def extract_quote_snapshot(
    ticker: str,
    info: dict[str, Any],
    closes: pd.Series | None = None,
) -> QuoteSnapshot:
    """
    Build a QuoteSnapshot from a yfinance info dict.

    When the 52-week range or the 200-day average is missing from info,
    they are derived from the daily closes (if provided).

    Raises:
        TickerNotFoundError: If info is empty
        InsufficientDataError: If no usable price or technical levels exist
    """
    if not info:
        raise TickerNotFoundError(f"No data found for ticker: {ticker}", ticker=ticker)

    price = _first_float(info, "currentPrice", "regularMarketPrice", "previousClose")
    if price is None or price <= 0:
        raise InsufficientDataError(f"No current price available for {ticker}", ticker=ticker)

    high = _first_float(info, "fiftyTwoWeekHigh")
    low = _first_float(info, "fiftyTwoWeekLow")
    ma200 = _first_float(info, "twoHundredDayAverage")
    levels_source = "info"

    if None in (high, low, ma200) and closes is not None:
        derived = technical_levels(closes)
        high = high if high is not None else derived["week52_high"]
        low = low if low is not None else derived["week52_low"]
        ma200 = ma200 if ma200 is not None else derived["ma200"]
        levels_source = "history"

    if high is None or low is None or ma200 is None:
        raise InsufficientDataError(
            f"Missing 52-week range or 200-day average for {ticker}", ticker=ticker
        )

    name = info.get("shortName") or info.get("longName")

    return QuoteSnapshot(
        ticker=ticker,
        current_price=price,
        market_cap=_first_float(info, "marketCap") or 0.0,
        week52_high=high,
        week52_low=low,
        ma200=ma200,
        ttm_per=_first_float(info, "trailingPE"),
        debt_to_equity=_first_float(info, "debtToEquity") or 0.0,
        name=str(name) if _has_value(name) else None,
        currency=info.get("currency") or "USD",
        levels_source=levels_source,
    )


def _needs_history(info: dict[str, Any]) -> bool:
    return not all(
        _has_value(info.get(k))
        for k in ("fiftyTwoWeekHigh", "fiftyTwoWeekLow", "twoHundredDayAverage")
    )


async def fetch_quote_snapshot(ticker: str) -> QuoteSnapshot:
    """
    Fetch the live quote snapshot for a ticker.

    Args:
        ticker: Ticker symbol (dots allowed, e.g. BRK.B)

    Returns:
        QuoteSnapshot

    Raises:
        StockDataError: On any upstream failure (rate limit, unknown ticker, API error)
    """
    yahoo_ticker = normalize_ticker_for_yahoo(ticker)

    def _fetch() -> QuoteSnapshot:
        yt = yf.Ticker(yahoo_ticker)
        info = yt.info
        closes = None
        if info and _needs_history(info):
            logger.debug(f"fetch_quote_snapshot({yahoo_ticker}): deriving levels from 1y history")
            history = yt.history(period="1y", interval="1d", auto_adjust=True)
            if not history.empty and "Close" in history.columns:
                closes = history["Close"]
        return extract_quote_snapshot(ticker.upper(), info, closes)

    async with _fetch_semaphore:
        logger.info(f"Fetching quote for {yahoo_ticker}")
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(_executor, _fetch)
        except Exception as e:
            classified = classify_upstream_error(e, ticker)
            logger.warning(f"fetch_quote_snapshot({yahoo_ticker}) failed: {classified}")
            raise classified from e


def get_market_state(tz: str = "America/New_York") -> dict[str, str]:
    """
    Determine market state. Clock-based only (no holiday calendar).

    Args:
        tz: Timezone (default: America/New_York)

    Returns:
        Dict with state, method, and checked_at timestamp
    """
    eastern = pytz.timezone(tz)
    now = datetime.now(eastern)

    if now.weekday() >= 5:
        state = "closed"
    else:
        time_minutes = now.hour * 60 + now.minute

        if time_minutes < 4 * 60:
            state = "closed"
        elif time_minutes < 9 * 60 + 30:
            state = "pre_market"
        elif time_minutes < 16 * 60:
            state = "regular"
        elif time_minutes < 20 * 60:
            state = "after_hours"
        else:
            state = "closed"

    return {
        "state": state,
        "method": "clock_only_no_holidays",
        "checked_at": now.isoformat(),
    }
