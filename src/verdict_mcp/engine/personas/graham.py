"""Benjamin Graham: growth-adjusted intrinsic value with a margin of safety."""

from verdict_mcp.engine.numeric import (
    clamp_win_rate,
    floored_growth,
    is_positive,
    market_cap_growth_cap,
    round_or_none,
    safe_divide,
)
from verdict_mcp.engine.price_adjuster import adjust_display_price
from verdict_mcp.engine.triggers import TriggerCode
from verdict_mcp.engine.types import (
    AlgorithmResult,
    NormalizedInput,
    PriceGuide,
    Verdict,
    not_available,
)

NO_GROWTH_PE = 8.5
MAX_VALUE_TO_EPS = 50.0
MARGIN_OF_SAFETY = 0.67
WINDOW_YEARS = 3


def growth_multiplier(growth_pct: float) -> float:
    """2 at or below 10% growth, 1 at or above 100%, linear in between."""
    if growth_pct <= 10:
        return 2.0
    if growth_pct >= 100:
        return 1.0
    return 2 - (growth_pct - 10) / 90


def graham_value(eps: float, growth_pct: float) -> float:
    """EPS * (8.5 + multiplier * g), never more than 50x EPS."""
    value = eps * (NO_GROWTH_PE + growth_multiplier(growth_pct) * growth_pct)
    return min(value, eps * MAX_VALUE_TO_EPS)


def calculate_graham_analysis(
    data: NormalizedInput,
    *,
    display_heuristics: bool = True,
) -> AlgorithmResult:
    hist = data.financial_history[-WINDOW_YEARS:]
    if not hist:
        return not_available("No historical data available", TriggerCode.DATA_INSUFFICIENT)

    eps = hist[-1].eps
    if not is_positive(eps):
        return not_available(
            "Negative earnings - Graham formula requires positive EPS",
            TriggerCode.AVOID_NO_EARNINGS,
            {"current_eps": eps if eps is not None else 0},
        )

    price = data.current_price
    if not is_positive(price):
        return not_available(
            "Current price is missing or invalid",
            TriggerCode.DATA_INVALID,
            {"current_price": price or 0},
        )

    raw_growth, _ = floored_growth(hist[0].eps, eps, len(hist) - 1)
    growth = min(raw_growth, market_cap_growth_cap(data.market_cap))
    value = graham_value(eps, growth)

    if price < value * MARGIN_OF_SAFETY:
        verdict, trigger = Verdict.STRONG_BUY, TriggerCode.BUY_MARGIN_SAFETY
    elif price < value:
        verdict, trigger = Verdict.BUY, TriggerCode.BUY_BELOW_VALUE
    elif price < value * 1.2:
        verdict, trigger = Verdict.HOLD, TriggerCode.HOLD_NEAR_VALUE
    else:
        verdict, trigger = Verdict.SELL, TriggerCode.SELL_OVERVALUED

    logic = f"EPS ${eps:.2f}, growth {growth:.1f}% -> intrinsic value ${value:.2f}"
    margin = safe_divide(value - price, value)
    display = adjust_display_price(price, value)

    return AlgorithmResult(
        verdict=verdict,
        logic=logic,
        trigger_code=trigger,
        key_factors={
            "eps": round(eps, 2),
            "eps_growth_rate": round(growth, 1),
            "graham_value": round(value, 2),
            "margin_of_safety": round(margin, 3),
        },
        price_guide=PriceGuide(
            buy_zone_max=round_or_none(value * MARGIN_OF_SAFETY),
            profit_zone_min=round_or_none(value),
            stop_loss=None,
        ),
        metric_name="Graham Value",
        metric_value=round(value, 2),
        display_price=display.display_price,
        price_status=display.price_status,
        win_rate=clamp_win_rate(50 + margin * 100),
        fair_price=round_or_none(value),
    )
