"""Ken Fisher: price-to-sales against its own history."""

import math

from verdict_mcp.engine.numeric import (
    clamp_win_rate,
    flexible_average,
    is_positive,
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

BARGAIN_DISCOUNT = 0.85
# Share of the buy target above which a bullish call shows the upper band instead
NEAR_TARGET_RATIO = 0.95


def display_target(
    verdict: Verdict,
    price: float,
    buy_target: float,
    sell_target: float,
    heuristics: bool = True,
) -> float:
    """
    Pick the target shown to the user.

    When the call is bullish but price has nearly reached the average-PSR
    target, pointing at that target would read as "no upside", so the
    historical-peak target is shown instead.
    """
    if not heuristics:
        return buy_target
    bullish = verdict in (Verdict.STRONG_BUY, Verdict.BUY)
    if bullish and price >= buy_target * NEAR_TARGET_RATIO:
        return sell_target
    return buy_target


def calculate_fisher_analysis(
    data: NormalizedInput,
    *,
    display_heuristics: bool = True,
) -> AlgorithmResult:
    """
    Value a company by its sales, so loss-makers can still be rated.

    PSR is re-derived from the live price (price / SPS) rather than taken
    from the stale historical record.
    """
    hist = data.financial_history
    psr_values = [r.psr for r in hist if r.psr is not None and math.isfinite(r.psr)]
    if not psr_values:
        return not_available("No PSR data available", TriggerCode.DATA_INSUFFICIENT)

    sps = hist[-1].sps
    avg_psr = flexible_average(psr_values, allow_zero=True)
    max_psr = max(psr_values)

    if avg_psr is None or max_psr <= 0 or not is_positive(sps):
        return not_available(
            "Invalid PSR or SPS data",
            TriggerCode.DATA_INVALID,
            {
                "avg_psr": round(avg_psr, 2) if avg_psr is not None else 0,
                "max_psr": round(max_psr, 2),
                "sps": sps if sps is not None else 0,
            },
        )

    price = data.current_price
    if not is_positive(price):
        return not_available(
            "Current price is missing or invalid",
            TriggerCode.DATA_INVALID,
            {"current_price": price or 0},
        )

    current_psr = price / sps
    buy_target = sps * avg_psr
    sell_target = sps * max_psr

    if current_psr < avg_psr * BARGAIN_DISCOUNT:
        verdict, trigger = Verdict.STRONG_BUY, TriggerCode.BUY_PSR_BARGAIN
    elif current_psr < avg_psr:
        verdict, trigger = Verdict.BUY, TriggerCode.BUY_PSR_FAIR
    elif current_psr < max_psr:
        verdict, trigger = Verdict.HOLD, TriggerCode.HOLD_PSR_BAND
    else:
        verdict, trigger = Verdict.SELL, TriggerCode.SELL_PSR_EXPENSIVE

    logic = (
        f"PSR {current_psr:.2f} vs avg {avg_psr:.2f} -> buy target ${buy_target:.2f}, "
        f"max PSR {max_psr:.2f} -> sell at ${sell_target:.2f}"
    )

    target = display_target(verdict, price, buy_target, sell_target, display_heuristics)
    display = adjust_display_price(price, target)
    discount = safe_divide(avg_psr - current_psr, avg_psr)

    return AlgorithmResult(
        verdict=verdict,
        logic=logic,
        trigger_code=trigger,
        key_factors={
            "current_psr": round(current_psr, 2),
            "avg_psr": round(avg_psr, 2),
            "max_psr": round(max_psr, 2),
            "years_used": len(psr_values),
        },
        price_guide=PriceGuide(
            buy_zone_max=round_or_none(buy_target),
            profit_zone_min=round_or_none(sell_target),
            stop_loss=None,
        ),
        metric_name="PSR",
        metric_value=round(current_psr, 2),
        display_price=display.display_price,
        price_status=display.price_status,
        win_rate=clamp_win_rate(50 + discount * 100),
        fair_price=round_or_none(buy_target),
    )
