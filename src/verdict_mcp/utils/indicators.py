"""Technical level calculations from daily closes."""

import pandas as pd

TRADING_DAYS_PER_YEAR = 252
MA_LONG_PERIOD = 200


def calculate_sma(prices: pd.Series, period: int) -> pd.Series:
    """
    Calculate Simple Moving Average.

    Args:
        prices: Price series (typically close prices)
        period: Number of periods for the average

    Returns:
        SMA series
    """
    return prices.rolling(window=period, min_periods=period).mean()


def _last_or_none(series: pd.Series) -> float | None:
    if series.empty:
        return None
    value = series.iloc[-1]
    if pd.isna(value):
        return None
    return float(value)


def technical_levels(closes: pd.Series) -> dict[str, float | None]:
    """
    Derive the 52-week range and 200-day average from daily closes.

    Args:
        closes: Daily close series, oldest first

    Returns:
        Dict with week52_high, week52_low and ma200 (None when not enough bars)
    """
    closes = closes.dropna()
    if closes.empty:
        return {"week52_high": None, "week52_low": None, "ma200": None}

    window = closes.iloc[-TRADING_DAYS_PER_YEAR:]
    return {
        "week52_high": float(window.max()),
        "week52_low": float(window.min()),
        "ma200": _last_or_none(calculate_sma(closes, MA_LONG_PERIOD)),
    }
