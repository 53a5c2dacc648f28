"""The six investor personas, keyed by name."""

from collections.abc import Callable
from types import MappingProxyType

from verdict_mcp.engine.personas.buffett import calculate_buffett_analysis
from verdict_mcp.engine.personas.druckenmiller import calculate_druckenmiller_analysis
from verdict_mcp.engine.personas.fisher import calculate_fisher_analysis
from verdict_mcp.engine.personas.graham import calculate_graham_analysis
from verdict_mcp.engine.personas.lynch import calculate_lynch_analysis
from verdict_mcp.engine.personas.marks import calculate_marks_analysis
from verdict_mcp.engine.types import AlgorithmResult, NormalizedInput

PersonaFn = Callable[..., AlgorithmResult]

# Order is the output order of InvestmentAnalysisResult.results
PERSONAS: MappingProxyType[str, PersonaFn] = MappingProxyType(
    {
        "buffett": calculate_buffett_analysis,
        "lynch": calculate_lynch_analysis,
        "graham": calculate_graham_analysis,
        "fisher": calculate_fisher_analysis,
        "druckenmiller": calculate_druckenmiller_analysis,
        "marks": calculate_marks_analysis,
    }
)

__all__ = [
    "PERSONAS",
    "PersonaFn",
    "NormalizedInput",
    "calculate_buffett_analysis",
    "calculate_druckenmiller_analysis",
    "calculate_fisher_analysis",
    "calculate_graham_analysis",
    "calculate_lynch_analysis",
    "calculate_marks_analysis",
]
