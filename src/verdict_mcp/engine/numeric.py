"""Shared numeric helpers for the persona algorithms."""

import math
from collections.abc import Iterable

# Long-run nominal growth floor (percent). Applied whenever measured EPS growth
# is unavailable or lower, so growth-based valuations never collapse to zero.
MIN_GROWTH_PCT = 3.0

BILLION = 1_000_000_000

# (market cap threshold, max growth %) from largest to smallest
MARKET_CAP_GROWTH_TIERS: tuple[tuple[float, float], ...] = (
    (100 * BILLION, 25.0),
    (10 * BILLION, 35.0),
)
SMALL_CAP_GROWTH_CAP = 50.0


def _is_finite(x: float | None) -> bool:
    return x is not None and isinstance(x, (int, float)) and math.isfinite(x)


def flexible_average(
    values: Iterable[float | None],
    allow_negative: bool = False,
    allow_zero: bool = False,
) -> float | None:
    """
    Average the usable values in a sequence.

    Drops None and non-finite values, plus negatives and zeros unless allowed.

    Args:
        values: Values that may contain gaps
        allow_negative: Keep negative values
        allow_zero: Keep zero values

    Returns:
        Mean of surviving values, or None if nothing survives
    """
    valid: list[float] = []
    for v in values:
        if not _is_finite(v):
            continue
        if not allow_negative and v < 0:
            continue
        if not allow_zero and v == 0:
            continue
        valid.append(float(v))

    if not valid:
        return None
    return sum(valid) / len(valid)


def calculate_cagr(start: float, end: float, years: float) -> float:
    """Compound annual growth rate as a decimal. 0.0 when undefined."""
    if start <= 0 or end <= 0 or years <= 0:
        return 0.0
    return (end / start) ** (1 / years) - 1


def safe_divide(numerator: float, denominator: float) -> float:
    """Divide, returning 0.0 instead of inf/NaN."""
    if denominator == 0 or not math.isfinite(denominator) or not math.isfinite(numerator):
        return 0.0
    return numerator / denominator


def floored_growth(
    start_eps: float | None,
    end_eps: float | None,
    years: float,
) -> tuple[float, bool]:
    """
    EPS CAGR in percent, floored at MIN_GROWTH_PCT.

    Returns:
        Tuple of (growth_pct, was_adjusted). was_adjusted is True when the
        floor replaced the measured growth.
    """
    if not _is_finite(start_eps) or not _is_finite(end_eps) or start_eps <= 0 or years <= 0:
        return MIN_GROWTH_PCT, True

    raw = calculate_cagr(start_eps, end_eps, years) * 100
    if raw < MIN_GROWTH_PCT:
        return MIN_GROWTH_PCT, True
    return raw, False


def market_cap_growth_cap(market_cap: float | None) -> float:
    """Maximum credible growth rate (percent) for a company of this size."""
    cap = market_cap or 0.0
    for threshold, max_growth in MARKET_CAP_GROWTH_TIERS:
        if cap > threshold:
            return max_growth
    return SMALL_CAP_GROWTH_CAP


def clamp_win_rate(value: float, low: int = 1, high: int = 99) -> int:
    """Round a raw confidence score into [low, high]."""
    if not math.isfinite(value):
        return 50
    return int(max(low, min(high, round(value))))


def round_or_none(x: float | None, ndigits: int = 2) -> float | None:
    """Round to ndigits or return None. Handles 0 correctly (unlike truthiness)."""
    if x is None:
        return None
    return round(x, ndigits)


def is_positive(x: float | None) -> bool:
    """Check if value is a finite number greater than zero."""
    return _is_finite(x) and x > 0
