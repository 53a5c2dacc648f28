"""Howard Marks: where are we in the cycle?"""

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

BOTTOM_RANK = 0.2
TOP_RANK = 0.8
UNDERVALUED_PBR_RATIO = 0.8


def is_undervalued(data: NormalizedInput) -> bool:
    """Latest positive PBR below 80% of the historical average PBR."""
    hist = data.financial_history
    if not hist:
        return False
    avg_pbr = flexible_average(r.pbr for r in hist)
    current_pbr = hist[-1].pbr
    # Zero or negative book value is not a discount
    if avg_pbr is None or not is_positive(current_pbr):
        return False
    return current_pbr < avg_pbr * UNDERVALUED_PBR_RATIO


def cycle_win_rate(rank: float, undervalued: bool) -> int:
    """Reward extreme bottoms, punish extreme tops."""
    score = 50.0
    if rank < 0.1:
        score += 40
    elif rank < 0.3:
        score += 20
    if rank > 0.9:
        score -= 45
    elif rank > 0.8:
        score -= 30
    if undervalued:
        score += 10
    return clamp_win_rate(score)


def display_target(
    verdict: Verdict,
    low: float,
    high: float,
    fallback: float,
    heuristics: bool = True,
) -> float:
    """Top of the box when bullish (ride it up), bottom otherwise (wait for entry)."""
    if not heuristics:
        return fallback
    if verdict in (Verdict.STRONG_BUY, Verdict.BUY):
        return high
    return low


def calculate_marks_analysis(
    data: NormalizedInput,
    *,
    display_heuristics: bool = True,
) -> AlgorithmResult:
    price = data.current_price
    low = data.week52_low
    high = data.week52_high

    if not (is_positive(price) and is_positive(low) and is_positive(high)):
        return not_available("Missing 52-week price range data", TriggerCode.DATA_INSUFFICIENT)

    if high <= low:
        return not_available(
            "Invalid 52-week price range",
            TriggerCode.DATA_INVALID,
            {"week_52_low": low, "week_52_high": high},
        )

    price_range = high - low
    # Live price can sit outside a stale 52-week band
    rank = min(1.0, max(0.0, safe_divide(price - low, price_range)))
    undervalued = is_undervalued(data)
    position = f"Price at {rank * 100:.1f}% of 52-week range"

    if rank < BOTTOM_RANK and undervalued:
        verdict, trigger = Verdict.STRONG_BUY, TriggerCode.BUY_PANIC_BOTTOM
        logic = f"{position} (bottom) + undervalued - cycle bottom opportunity"
    elif rank < BOTTOM_RANK:
        verdict, trigger = Verdict.BUY, TriggerCode.BUY_CYCLE_BOTTOM
        logic = f"{position} (bottom) - potential cycle bottom"
    elif rank > TOP_RANK:
        verdict, trigger = Verdict.SELL, TriggerCode.SELL_EUPHORIA_TOP
        logic = f"{position} (top) - cycle top risk, consider taking profits"
    else:
        verdict, trigger = Verdict.HOLD, TriggerCode.HOLD_MID_CYCLE
        logic = f"{position} (mid-cycle) - neutral positioning"

    buy_zone_max = low + price_range * BOTTOM_RANK
    target = display_target(verdict, low, high, buy_zone_max, display_heuristics)
    display = adjust_display_price(price, target)

    return AlgorithmResult(
        verdict=verdict,
        logic=logic,
        trigger_code=trigger,
        key_factors={
            "cycle_position": round(rank, 2),
            "is_undervalued": undervalued,
        },
        price_guide=PriceGuide(
            buy_zone_max=round_or_none(buy_zone_max),
            profit_zone_min=round_or_none(low + price_range * TOP_RANK),
            stop_loss=None,
        ),
        metric_name="Price Position",
        metric_value=round(rank * 100, 1),
        display_price=display.display_price,
        price_status=display.price_status,
        win_rate=cycle_win_rate(rank, undervalued),
        fair_price=round_or_none(buy_zone_max),
    )
