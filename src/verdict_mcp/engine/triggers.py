"""Trigger codes emitted by the personas and their display messages."""

from enum import Enum
from types import MappingProxyType


class TriggerCode(str, Enum):
    """Machine-readable classification of a persona's decision path."""

    # Degraded results (shared)
    DATA_INSUFFICIENT = "DATA_INSUFFICIENT"
    DATA_INVALID = "DATA_INVALID"
    AVOID_NO_EARNINGS = "AVOID_NO_EARNINGS"
    CALCULATION_ERROR = "CALCULATION_ERROR"

    # Buffett
    BUY_MOAT_BARGAIN = "BUY_MOAT_BARGAIN"
    BUY_QUALITY_FAIR = "BUY_QUALITY_FAIR"
    HOLD_MOAT_FAIR = "HOLD_MOAT_FAIR"
    SELL_MOAT_EXPENSIVE = "SELL_MOAT_EXPENSIVE"

    # Lynch
    BUY_FAST_GROWER = "BUY_FAST_GROWER"
    BUY_STALWART = "BUY_STALWART"
    HOLD_FAIR_VALUE = "HOLD_FAIR_VALUE"
    HOLD_DEBT_WARNING = "HOLD_DEBT_WARNING"
    SELL_PEG_EXPENSIVE = "SELL_PEG_EXPENSIVE"
    SELL_DEBT_RISK = "SELL_DEBT_RISK"

    # Graham
    BUY_MARGIN_SAFETY = "BUY_MARGIN_SAFETY"
    BUY_BELOW_VALUE = "BUY_BELOW_VALUE"
    HOLD_NEAR_VALUE = "HOLD_NEAR_VALUE"
    SELL_OVERVALUED = "SELL_OVERVALUED"

    # Fisher
    BUY_PSR_BARGAIN = "BUY_PSR_BARGAIN"
    BUY_PSR_FAIR = "BUY_PSR_FAIR"
    HOLD_PSR_BAND = "HOLD_PSR_BAND"
    SELL_PSR_EXPENSIVE = "SELL_PSR_EXPENSIVE"

    # Druckenmiller
    BUY_TREND_BREAKOUT = "BUY_TREND_BREAKOUT"
    BUY_THE_DIP = "BUY_THE_DIP"
    HOLD_FAKE_BREAKOUT = "HOLD_FAKE_BREAKOUT"
    HOLD_NO_CATALYST = "HOLD_NO_CATALYST"
    SELL_TREND_BROKEN = "SELL_TREND_BROKEN"

    # Marks
    BUY_PANIC_BOTTOM = "BUY_PANIC_BOTTOM"
    BUY_CYCLE_BOTTOM = "BUY_CYCLE_BOTTOM"
    HOLD_MID_CYCLE = "HOLD_MID_CYCLE"
    SELL_EUPHORIA_TOP = "SELL_EUPHORIA_TOP"


# Built once at import; every TriggerCode must have an entry (see tests)
TRIGGER_MESSAGES: MappingProxyType[str, str] = MappingProxyType(
    {
        TriggerCode.DATA_INSUFFICIENT.value: "Not enough historical data to run this strategy",
        TriggerCode.DATA_INVALID.value: "Required financial data is missing or invalid",
        TriggerCode.AVOID_NO_EARNINGS.value: "No positive earnings - the valuation formula does not apply",
        TriggerCode.CALCULATION_ERROR.value: "The strategy could not be evaluated for this snapshot",
        # Buffett
        TriggerCode.BUY_MOAT_BARGAIN.value: "Warren Buffett: a durable compounder trading at a deep discount",
        TriggerCode.BUY_QUALITY_FAIR.value: "Warren Buffett: a quality business at a fair price",
        TriggerCode.HOLD_MOAT_FAIR.value: "Warren Buffett: strong economics, but the price is already fair",
        TriggerCode.SELL_MOAT_EXPENSIVE.value: "Warren Buffett: returns are strong, but the price is too high",
        # Lynch
        TriggerCode.BUY_FAST_GROWER.value: "Peter Lynch: a fast grower with a very low PEG",
        TriggerCode.BUY_STALWART.value: "Peter Lynch: steady growth at a reasonable price",
        TriggerCode.HOLD_FAIR_VALUE.value: "Peter Lynch: the price is fair for the growth on offer",
        TriggerCode.HOLD_DEBT_WARNING.value: "Peter Lynch: leverage is elevated - proceed with care",
        TriggerCode.SELL_PEG_EXPENSIVE.value: "Peter Lynch: the PEG is too high for the growth rate",
        TriggerCode.SELL_DEBT_RISK.value: "Peter Lynch: debt-to-equity is dangerously high",
        # Graham
        TriggerCode.BUY_MARGIN_SAFETY.value: "Benjamin Graham: a wide margin of safety below intrinsic value",
        TriggerCode.BUY_BELOW_VALUE.value: "Benjamin Graham: trading below intrinsic value",
        TriggerCode.HOLD_NEAR_VALUE.value: "Benjamin Graham: the price sits just above intrinsic value",
        TriggerCode.SELL_OVERVALUED.value: "Benjamin Graham: well above intrinsic value",
        # Fisher
        TriggerCode.BUY_PSR_BARGAIN.value: "Ken Fisher: price-to-sales is far below its historical average",
        TriggerCode.BUY_PSR_FAIR.value: "Ken Fisher: price-to-sales is below its historical average",
        TriggerCode.HOLD_PSR_BAND.value: "Ken Fisher: price-to-sales is inside its historical band",
        TriggerCode.SELL_PSR_EXPENSIVE.value: "Ken Fisher: price-to-sales is above its historical peak",
        # Druckenmiller
        TriggerCode.BUY_TREND_BREAKOUT.value: "Stan Druckenmiller: a breakout backed by growing earnings",
        TriggerCode.BUY_THE_DIP.value: "Stan Druckenmiller: the trend holds and earnings grow - buy the dip",
        TriggerCode.HOLD_FAKE_BREAKOUT.value: "Stan Druckenmiller: momentum without earnings growth - fake breakout risk",
        TriggerCode.HOLD_NO_CATALYST.value: "Stan Druckenmiller: the trend holds but there is no catalyst",
        TriggerCode.SELL_TREND_BROKEN.value: "Stan Druckenmiller: price broke below the 200-day moving average",
        # Marks
        TriggerCode.BUY_PANIC_BOTTOM.value: "Howard Marks: panic pricing at the cycle bottom with cheap book value",
        TriggerCode.BUY_CYCLE_BOTTOM.value: "Howard Marks: near the bottom of the cycle - a contrarian entry",
        TriggerCode.HOLD_MID_CYCLE.value: "Howard Marks: mid-cycle - patience is appropriate",
        TriggerCode.SELL_EUPHORIA_TOP.value: "Howard Marks: euphoria near the top of the cycle",
    }
)


def get_trigger_message(code: str) -> str:
    """Return the display message for a trigger code, or the code itself if unknown."""
    return TRIGGER_MESSAGES.get(str(getattr(code, "value", code)), str(code))


def has_trigger_message(code: str) -> bool:
    """Check whether a trigger code has a display message."""
    return str(getattr(code, "value", code)) in TRIGGER_MESSAGES
