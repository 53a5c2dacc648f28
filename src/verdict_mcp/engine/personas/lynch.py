"""Peter Lynch: growth at a reasonable price (PEG)."""

from verdict_mcp.engine.numeric import (
    clamp_win_rate,
    floored_growth,
    is_positive,
    market_cap_growth_cap,
    round_or_none,
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

GROWTH_YEARS = 2
DEBT_PENALTY_DE = 150.0
DEBT_DANGER_DE = 200.0

_DOWNGRADE = {
    Verdict.STRONG_BUY: Verdict.BUY,
    Verdict.BUY: Verdict.HOLD,
    Verdict.HOLD: Verdict.SELL,
    Verdict.SELL: Verdict.SELL,
}


def _peg_verdict(peg: float) -> tuple[Verdict, TriggerCode]:
    if peg < 0.5:
        return Verdict.STRONG_BUY, TriggerCode.BUY_FAST_GROWER
    if peg < 1.2:
        return Verdict.BUY, TriggerCode.BUY_STALWART
    if peg < 1.5:
        return Verdict.HOLD, TriggerCode.HOLD_FAIR_VALUE
    return Verdict.SELL, TriggerCode.SELL_PEG_EXPENSIVE


def calculate_lynch_analysis(
    data: NormalizedInput,
    *,
    display_heuristics: bool = True,
) -> AlgorithmResult:
    """
    Compare the live PER with a floored, size-capped EPS growth rate.

    Mega-caps get a lower growth ceiling so one-off base effects do not
    produce absurd fair values. Leverage above 150% D/E costs one tier.
    """
    hist = data.financial_history
    if len(hist) < 2:
        return not_available("Insufficient data for growth calc", TriggerCode.DATA_INSUFFICIENT)

    # Growth is measured over the last GROWTH_YEARS only
    hist = hist[-(GROWTH_YEARS + 1):]

    eps_now = hist[-1].eps
    if not is_positive(eps_now):
        return not_available(
            "Current EPS is negative",
            TriggerCode.DATA_INVALID,
            {"current_eps": eps_now if eps_now is not None else 0},
        )

    price = data.current_price
    if not is_positive(price):
        return not_available(
            "Invalid price for PER calculation",
            TriggerCode.DATA_INVALID,
            {"current_price": price or 0, "current_eps": eps_now},
        )

    raw_growth, growth_adjusted = floored_growth(hist[0].eps, eps_now, GROWTH_YEARS)
    growth_cap = market_cap_growth_cap(data.market_cap)
    growth = min(raw_growth, growth_cap)
    growth_capped = raw_growth > growth_cap

    per = price / eps_now
    peg = per / growth

    verdict, trigger = _peg_verdict(peg)

    debt_to_equity = data.debt_to_equity or 0.0
    debt_penalty = debt_to_equity > DEBT_PENALTY_DE
    if debt_penalty:
        verdict = _DOWNGRADE[verdict]
        if debt_to_equity > DEBT_DANGER_DE or verdict == Verdict.SELL:
            trigger = TriggerCode.SELL_DEBT_RISK
        else:
            trigger = TriggerCode.HOLD_DEBT_WARNING

    growth_text = f"{growth:.1f}%"
    if growth_capped:
        growth_text += f" (capped from {raw_growth:.0f}%)"
    elif growth_adjusted:
        growth_text += " (min adj)"
    logic = f"Growth {growth_text}, PER {per:.1f} -> PEG {peg:.2f}"
    if debt_penalty:
        logic += " (debt penalty)"

    fair_value = eps_now * growth
    buy_zone_max = fair_value * 1.2
    sell_price = fair_value * 1.5

    win_rate = 50 + (1 - peg) * 50
    if debt_penalty:
        win_rate -= 10

    display = adjust_display_price(price, fair_value)

    return AlgorithmResult(
        verdict=verdict,
        logic=logic,
        trigger_code=trigger,
        key_factors={
            "growth_rate": round(growth, 1),
            "growth_capped": growth_capped,
            "peg": round(peg, 2),
            "calculated_per": round(per, 1),
            "debt_to_equity": round(debt_to_equity, 1),
        },
        price_guide=PriceGuide(
            buy_zone_max=round_or_none(buy_zone_max),
            profit_zone_min=round_or_none(sell_price),
            stop_loss=None,
        ),
        metric_name="PEG Ratio",
        metric_value=round(peg, 2),
        display_price=display.display_price,
        price_status=display.price_status,
        win_rate=clamp_win_rate(win_rate),
        fair_price=round_or_none(fair_value),
    )
