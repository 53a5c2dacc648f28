"""Valuation engine: six persona algorithms and their aggregation."""

from verdict_mcp.engine.analyzer import (
    apply_win_rate_bands,
    build_summary,
    consensus_verdict,
    evaluate,
    normalize_win_rate,
    run_personas,
)
from verdict_mcp.engine.numeric import calculate_cagr, flexible_average, safe_divide
from verdict_mcp.engine.personas import PERSONAS
from verdict_mcp.engine.price_adjuster import DisplayPrice, adjust_display_price
from verdict_mcp.engine.triggers import (
    TRIGGER_MESSAGES,
    TriggerCode,
    get_trigger_message,
    has_trigger_message,
)
from verdict_mcp.engine.types import (
    AlgorithmResult,
    InvestmentAnalysisResult,
    InvestmentSummary,
    NormalizedInput,
    PriceGuide,
    PriceStatus,
    Verdict,
    YearRecord,
)

__all__ = [
    # Aggregation
    "apply_win_rate_bands",
    "build_summary",
    "consensus_verdict",
    "evaluate",
    "normalize_win_rate",
    "run_personas",
    "PERSONAS",
    # Numeric
    "calculate_cagr",
    "flexible_average",
    "safe_divide",
    "DisplayPrice",
    "adjust_display_price",
    # Trigger codes
    "TRIGGER_MESSAGES",
    "TriggerCode",
    "get_trigger_message",
    "has_trigger_message",
    # Records
    "AlgorithmResult",
    "InvestmentAnalysisResult",
    "InvestmentSummary",
    "NormalizedInput",
    "PriceGuide",
    "PriceStatus",
    "Verdict",
    "YearRecord",
]
