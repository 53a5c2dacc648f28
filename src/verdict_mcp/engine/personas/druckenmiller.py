"""Stanley Druckenmiller: trend following confirmed by earnings momentum."""

from verdict_mcp.engine.numeric import clamp_win_rate, is_positive, round_or_none
from verdict_mcp.engine.triggers import TriggerCode
from verdict_mcp.engine.types import (
    AlgorithmResult,
    NormalizedInput,
    PriceGuide,
    Verdict,
    not_available,
)

MOMENTUM_RATIO = 0.9  # within 10% of the 52-week high
BREAKOUT_ALLOWANCE = 1.05


def earnings_growing(data: NormalizedInput) -> bool:
    """Latest EPS is positive and above the previous year's."""
    hist = data.financial_history
    if len(hist) < 2:
        return False
    latest, previous = hist[-1].eps, hist[-2].eps
    if not is_positive(latest) or previous is None:
        return False
    return latest > previous


def calculate_druckenmiller_analysis(
    data: NormalizedInput,
    *,
    display_heuristics: bool = True,
) -> AlgorithmResult:
    """
    Decision tree gated by the 200-day moving average.

    A broken trend is a sell regardless of earnings. With the trend intact,
    momentum (near the 52-week high) and earnings growth decide between
    breakout, dip-buy and wait. No price target; the stop is the 200-day MA.
    """
    price = data.current_price
    ma200 = data.ma200
    high = data.week52_high

    if not (is_positive(price) and is_positive(ma200) and is_positive(high)):
        return not_available("Missing technical indicator data", TriggerCode.DATA_INSUFFICIENT)

    trend_alive = price > ma200
    strong_momentum = price > high * MOMENTUM_RATIO
    growing = earnings_growing(data)

    if not trend_alive:
        verdict, trigger, base = Verdict.SELL, TriggerCode.SELL_TREND_BROKEN, 25
        logic = f"Price ${price:.2f} below 200-day MA (${ma200:.2f}) - trend broken"
    elif strong_momentum and growing:
        verdict, trigger, base = Verdict.STRONG_BUY, TriggerCode.BUY_TREND_BREAKOUT, 80
        logic = (
            f"Price ${price:.2f} above 200-day MA and near 52-week high (${high:.2f}) "
            "with growing earnings - breakout"
        )
    elif strong_momentum:
        verdict, trigger, base = Verdict.HOLD, TriggerCode.HOLD_FAKE_BREAKOUT, 50
        logic = "Price near 52-week high but earnings are not growing - fake breakout risk"
    elif growing:
        verdict, trigger, base = Verdict.BUY, TriggerCode.BUY_THE_DIP, 65
        logic = "Trend intact and earnings growing, price pulled back from the high - buy the dip"
    else:
        verdict, trigger, base = Verdict.HOLD, TriggerCode.HOLD_NO_CATALYST, 45
        logic = "Trend intact but no momentum and no earnings growth - no catalyst"

    price_vs_ma = price / ma200
    # Reward distance above the trend line, up to +10 (or -10 below it)
    win_rate = base + max(-10.0, min(10.0, (price_vs_ma - 1) * 50))

    return AlgorithmResult(
        verdict=verdict,
        logic=logic,
        trigger_code=trigger,
        key_factors={
            "price_vs_ma200": round(price_vs_ma, 2),
            "trend_alive": trend_alive,
            "near_52w_high": strong_momentum,
            "earnings_growing": growing,
        },
        price_guide=PriceGuide(
            buy_zone_max=round_or_none(high * BREAKOUT_ALLOWANCE) if trend_alive else None,
            profit_zone_min=None,
            stop_loss=round_or_none(ma200),
        ),
        metric_name="200D MA",
        metric_value=round(ma200, 2),
        display_price=None,
        win_rate=clamp_win_rate(win_rate),
        fair_price=None,
    )
