"""Soft cap/floor compression of raw price targets for display."""

from dataclasses import dataclass

from verdict_mcp.engine.types import PriceStatus

CAP_THRESHOLD = 0.3
FLOOR_THRESHOLD = 0.3
DAMPING_FACTOR = 0.2  # share of the excess beyond the band that is kept


@dataclass(frozen=True)
class DisplayPrice:
    display_price: float | None
    price_status: PriceStatus


def adjust_display_price(current_price: float, raw_target: float | None) -> DisplayPrice:
    """
    Compress a raw target into a UI-safe range around the current price.

    Targets within +/-30% pass through unchanged. Beyond that, only 20% of
    the excess is kept, so a $300 target on a $100 stock displays as $164.

    Args:
        current_price: Current market price
        raw_target: Raw target from a persona (None for strategies without one)

    Returns:
        DisplayPrice with the adjusted price (2 decimals) and its status
    """
    if raw_target is None or raw_target <= 0:
        return DisplayPrice(display_price=None, price_status=PriceStatus.NORMAL)

    upper = current_price * (1 + CAP_THRESHOLD)
    lower = current_price * (1 - FLOOR_THRESHOLD)

    if raw_target > upper:
        damped = upper + (raw_target - upper) * DAMPING_FACTOR
        return DisplayPrice(display_price=round(damped, 2), price_status=PriceStatus.SOFT_CAP)

    if raw_target < lower:
        damped = lower - (lower - raw_target) * DAMPING_FACTOR
        return DisplayPrice(display_price=round(damped, 2), price_status=PriceStatus.SOFT_FLOOR)

    return DisplayPrice(display_price=round(raw_target, 2), price_status=PriceStatus.NORMAL)
