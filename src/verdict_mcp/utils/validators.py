"""Ticker validation utilities."""

import re

# Letters/digits with optional class suffix: AAPL, BRK.B, BRK-B, 005930
_TICKER_RE = re.compile(r"^[A-Z0-9]{1,10}([.\-][A-Z0-9]{1,4})?$")


def normalize_ticker(ticker: str | None) -> str:
    """
    Normalize a user-supplied ticker: strip whitespace, uppercase, validate.

    Args:
        ticker: Raw ticker symbol

    Returns:
        Normalized ticker (dots preserved, e.g. BRK.B)

    Raises:
        ValueError: If ticker is empty or malformed
    """
    if ticker is None or not ticker.strip():
        raise ValueError("Ticker symbol is required")

    normalized = ticker.strip().upper()
    if not _TICKER_RE.match(normalized):
        raise ValueError(f"Invalid ticker symbol '{ticker}'")
    return normalized


def normalize_ticker_for_yahoo(ticker: str) -> str:
    """Yahoo uses '-' for share classes (BRK.B -> BRK-B)."""
    return ticker.strip().upper().replace(".", "-")
