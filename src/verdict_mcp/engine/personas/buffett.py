"""Warren Buffett: quality compounding at a discount."""

from verdict_mcp.engine.numeric import (
    MIN_GROWTH_PCT,
    clamp_win_rate,
    flexible_average,
    floored_growth,
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

WINDOW_YEARS = 3
TERMINAL_GROWTH_PCT = MIN_GROWTH_PCT
MAX_COMPOUNDING_PCT = 30.0
MAX_PER = 50.0
PROJECTION_YEARS = 10
DISCOUNT_RATE = 0.15


def calculate_buffett_analysis(
    data: NormalizedInput,
    *,
    display_heuristics: bool = True,
) -> AlgorithmResult:
    """
    Project ten-year earnings from ROE and EPS growth, then discount back at 15%.

    High growth is assumed to decay halfway toward the terminal rate, so
    the compounding rate is (min(ROE, growth*1.5) + 3) / 2, capped at 30%.
    """
    hist = data.financial_history[-WINDOW_YEARS:]
    if not hist:
        return not_available("Insufficient historical data", TriggerCode.DATA_INSUFFICIENT)

    if not is_positive(data.current_price):
        return not_available(
            "Current price is missing or invalid",
            TriggerCode.DATA_INVALID,
            {"current_price": data.current_price or 0},
        )

    avg_roe = flexible_average(r.roe for r in hist)
    if avg_roe is None:
        return not_available(
            "Negative or missing ROE - cannot project earnings",
            TriggerCode.DATA_INVALID,
            {"avg_roe": 0},
        )

    eps_now = hist[-1].eps
    if not is_positive(eps_now):
        return not_available(
            "Current EPS is negative",
            TriggerCode.DATA_INVALID,
            {"current_eps": eps_now if eps_now is not None else 0},
        )

    growth, growth_adjusted = floored_growth(hist[0].eps, eps_now, len(hist) - 1)

    raw_rate = min(avg_roe, growth * 1.5)
    decayed_rate = (raw_rate + TERMINAL_GROWTH_PCT) / 2
    rate = min(decayed_rate, MAX_COMPOUNDING_PCT)

    avg_per = flexible_average(r.per for r in hist)
    if avg_per is None:
        return not_available("Invalid historical PER", TriggerCode.DATA_INVALID, {"avg_per": 0})
    capped_per = min(avg_per, MAX_PER)

    future_eps = eps_now * (1 + rate / 100) ** PROJECTION_YEARS
    future_price = future_eps * capped_per
    buy_price = future_price / (1 + DISCOUNT_RATE) ** PROJECTION_YEARS

    price = data.current_price
    if price < buy_price * 0.8:
        verdict, trigger = Verdict.STRONG_BUY, TriggerCode.BUY_MOAT_BARGAIN
    elif price < buy_price:
        verdict, trigger = Verdict.BUY, TriggerCode.BUY_QUALITY_FAIR
    elif price < buy_price * 1.2:
        verdict, trigger = Verdict.HOLD, TriggerCode.HOLD_MOAT_FAIR
    else:
        verdict, trigger = Verdict.SELL, TriggerCode.SELL_MOAT_EXPENSIVE

    growth_label = f"Growth {growth:.1f}%" + (" (adj min)" if growth_adjusted else "")
    logic = (
        f"ROE {avg_roe:.1f}%, {growth_label} -> decay-adj {rate:.1f}%, "
        f"PER {avg_per:.1f}x -> target ${buy_price:.2f}"
    )

    margin = safe_divide(buy_price - price, buy_price)
    display = adjust_display_price(price, buy_price)

    return AlgorithmResult(
        verdict=verdict,
        logic=logic,
        trigger_code=trigger,
        key_factors={
            "avg_roe": round(avg_roe, 1),
            "eps_growth": round(growth, 1),
            "growth_adjusted": growth_adjusted,
            "compounding_rate": round(rate, 1),
            "avg_per": round(avg_per, 1),
        },
        price_guide=PriceGuide(
            buy_zone_max=round_or_none(buy_price),
            profit_zone_min=round_or_none(buy_price * 1.2),
            stop_loss=None,
        ),
        metric_name="Compounding Rate",
        metric_value=round(rate, 2),
        display_price=display.display_price,
        price_status=display.price_status,
        win_rate=clamp_win_rate(50 + margin * 100),
        fair_price=round_or_none(buy_price),
    )
