"""Input and output records for the valuation engine."""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from verdict_mcp.engine.triggers import TriggerCode

# Wire-level shape of one key factor value
FactorValue = float | int | bool | str


class Verdict(str, Enum):
    """Five-level persona verdict."""

    STRONG_BUY = "STRONG_BUY"
    BUY = "BUY"
    HOLD = "HOLD"
    SELL = "SELL"
    NOT_AVAILABLE = "N/A"

    @property
    def rank(self) -> int | None:
        """Ordinal rank, SELL lowest. None for N/A."""
        return _VERDICT_RANK.get(self)


_VERDICT_RANK = {
    Verdict.SELL: 0,
    Verdict.HOLD: 1,
    Verdict.BUY: 2,
    Verdict.STRONG_BUY: 3,
}


class PriceStatus(str, Enum):
    """How the display price relates to the raw target."""

    NORMAL = "NORMAL"
    SOFT_CAP = "SOFT_CAP"
    SOFT_FLOOR = "SOFT_FLOOR"


@dataclass(frozen=True)
class YearRecord:
    """One fiscal year of fundamentals. ROE is in percent."""

    year: int
    eps: float | None = None
    roe: float | None = None
    per: float | None = None
    pbr: float | None = None
    psr: float | None = None
    sps: float | None = None
    fcf: float | None = None


@dataclass(frozen=True)
class NormalizedInput:
    """Immutable snapshot consumed by every persona."""

    ticker: str
    current_price: float
    market_cap: float
    week52_high: float
    week52_low: float
    ma200: float
    debt_to_equity: float = 0.0
    ttm_per: float | None = None
    financial_history: tuple[YearRecord, ...] = ()
    company_name: str | None = None
    currency: str = "USD"

    def __post_init__(self) -> None:
        # Accept any sequence but always store a tuple so personas share one read-only view
        object.__setattr__(self, "financial_history", tuple(self.financial_history))

    @property
    def latest(self) -> YearRecord | None:
        """Most recent fiscal year, if any."""
        return self.financial_history[-1] if self.financial_history else None

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the external field names."""
        return {
            "ticker": self.ticker,
            "company_name": self.company_name,
            "currency": self.currency,
            "market_status": {
                "current_price": self.current_price,
                "market_cap": self.market_cap,
                "52w_high": self.week52_high,
                "52w_low": self.week52_low,
                "200d_ma": self.ma200,
                "ttm_per": self.ttm_per,
                "debt_to_equity": self.debt_to_equity,
            },
            "financial_history": [asdict(r) for r in self.financial_history],
        }


@dataclass(frozen=True)
class PriceGuide:
    """Buy/sell/stop-loss levels. Semantics are fixed per persona."""

    buy_zone_max: float | None = None
    profit_zone_min: float | None = None
    stop_loss: float | None = None


@dataclass(frozen=True)
class AlgorithmResult:
    """Standardized output shared by all six personas."""

    verdict: Verdict
    logic: str
    trigger_code: TriggerCode
    key_factors: dict[str, FactorValue] = field(default_factory=dict)
    price_guide: PriceGuide = field(default_factory=PriceGuide)
    metric_name: str | None = None
    metric_value: float | None = None
    display_price: float | None = None
    price_status: PriceStatus = PriceStatus.NORMAL
    win_rate: int = 50
    fair_price: float | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize with enum values flattened to strings."""
        return {
            "verdict": self.verdict.value,
            "logic": self.logic,
            "trigger_code": self.trigger_code.value,
            "key_factors": dict(self.key_factors),
            "price_guide": asdict(self.price_guide),
            "metric_name": self.metric_name,
            "metric_value": self.metric_value,
            "display_price": self.display_price,
            "price_status": self.price_status.value,
            "win_rate": self.win_rate,
            "fair_price": self.fair_price,
        }


@dataclass(frozen=True)
class OpinionBreakdown:
    strong_buy: int = 0
    buy: int = 0
    hold: int = 0
    sell: int = 0


@dataclass(frozen=True)
class InvestmentSummary:
    """Consensus across the six personas."""

    total_score: int
    consensus_verdict: Verdict
    opinion_breakdown: OpinionBreakdown

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_score": self.total_score,
            "consensus_verdict": self.consensus_verdict.value,
            "opinion_breakdown": asdict(self.opinion_breakdown),
        }


@dataclass(frozen=True)
class InvestmentAnalysisResult:
    """Full engine output for one ticker."""

    ticker: str
    company_name: str
    meta: dict[str, Any]
    summary: InvestmentSummary
    results: dict[str, AlgorithmResult]

    def to_dict(self) -> dict[str, Any]:
        return {
            "ticker": self.ticker,
            "company_name": self.company_name,
            "meta": dict(self.meta),
            "summary": self.summary.to_dict(),
            "results": {name: r.to_dict() for name, r in self.results.items()},
        }


def not_available(
    logic: str,
    trigger_code: TriggerCode,
    key_factors: dict[str, FactorValue] | None = None,
) -> AlgorithmResult:
    """Build a degraded N/A result."""
    return AlgorithmResult(
        verdict=Verdict.NOT_AVAILABLE,
        logic=logic,
        trigger_code=trigger_code,
        key_factors=key_factors or {},
    )
