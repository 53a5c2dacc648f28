"""Run all personas against one snapshot and aggregate their verdicts."""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from verdict_mcp.engine.personas import PERSONAS, PersonaFn
from verdict_mcp.engine.triggers import TriggerCode
from verdict_mcp.engine.types import (
    AlgorithmResult,
    InvestmentAnalysisResult,
    InvestmentSummary,
    NormalizedInput,
    OpinionBreakdown,
    Verdict,
    not_available,
)

logger = logging.getLogger(__name__)

_persona_workers = int(os.environ.get("PERSONA_WORKERS", str(len(PERSONAS))))
_display_heuristics = os.environ.get("DISPLAY_HEURISTICS", "1").lower() not in ("0", "false", "no")

# Permitted win-rate band per verdict, so a score can never contradict its category.
# This deliberately discards part of each persona's raw confidence.
WIN_RATE_BANDS: dict[Verdict, tuple[int, int]] = {
    Verdict.STRONG_BUY: (85, 99),
    Verdict.BUY: (65, 79),
    Verdict.HOLD: (45, 55),
    Verdict.SELL: (1, 35),
}

# (minimum total score, consensus verdict), checked top-down
CONSENSUS_THRESHOLDS: tuple[tuple[int, Verdict], ...] = (
    (80, Verdict.STRONG_BUY),
    (60, Verdict.BUY),
    (40, Verdict.HOLD),
)


def normalize_win_rate(verdict: Verdict, raw: int) -> int:
    """Clamp a raw win rate into the band allowed for its verdict. N/A is left as is."""
    band = WIN_RATE_BANDS.get(verdict)
    if band is None:
        return raw
    low, high = band
    return max(low, min(high, raw))


def _run_guarded(
    name: str,
    persona: PersonaFn,
    data: NormalizedInput,
    display_heuristics: bool,
) -> AlgorithmResult:
    """Run one persona; a failure degrades to N/A instead of aborting the batch."""
    try:
        return persona(data, display_heuristics=display_heuristics)
    except Exception:
        logger.exception(f"Persona {name} failed for {data.ticker}")
        return not_available(
            f"{name} could not be evaluated",
            TriggerCode.CALCULATION_ERROR,
        )


def run_personas(
    data: NormalizedInput,
    *,
    concurrent: bool = False,
    display_heuristics: bool | None = None,
) -> dict[str, AlgorithmResult]:
    """
    Evaluate every persona against the same immutable snapshot.

    Personas are pure, so sequential and thread-pool execution give
    identical results; concurrent=True only changes scheduling.

    Args:
        data: Normalized input snapshot
        concurrent: Run personas on a thread pool
        display_heuristics: Override the DISPLAY_HEURISTICS setting

    Returns:
        Persona name -> raw (unclamped) result, in PERSONAS order
    """
    heuristics = _display_heuristics if display_heuristics is None else display_heuristics

    if not concurrent:
        return {
            name: _run_guarded(name, persona, data, heuristics)
            for name, persona in PERSONAS.items()
        }

    with ThreadPoolExecutor(max_workers=_persona_workers) as executor:
        futures = {
            name: executor.submit(_run_guarded, name, persona, data, heuristics)
            for name, persona in PERSONAS.items()
        }
        return {name: future.result() for name, future in futures.items()}


def apply_win_rate_bands(results: dict[str, AlgorithmResult]) -> dict[str, AlgorithmResult]:
    """Return copies of the results with win rates clamped to their verdict bands."""
    adjusted: dict[str, AlgorithmResult] = {}
    for name, result in results.items():
        win_rate = normalize_win_rate(result.verdict, result.win_rate)
        if win_rate != result.win_rate:
            logger.debug(f"{name}: win_rate {result.win_rate} -> {win_rate} ({result.verdict.value})")
        adjusted[name] = _replace_win_rate(result, win_rate)
    return adjusted


def _replace_win_rate(result: AlgorithmResult, win_rate: int) -> AlgorithmResult:
    if win_rate == result.win_rate:
        return result
    return replace(result, win_rate=win_rate)


def consensus_verdict(total_score: int) -> Verdict:
    """Score-driven consensus, independent of vote counts."""
    for minimum, verdict in CONSENSUS_THRESHOLDS:
        if total_score >= minimum:
            return verdict
    return Verdict.SELL


def build_summary(
    raw_results: dict[str, AlgorithmResult],
    adjusted_results: dict[str, AlgorithmResult] | None = None,
) -> InvestmentSummary:
    """
    Aggregate persona results into a consensus.

    Args:
        raw_results: Results as returned by the personas (votes are counted here)
        adjusted_results: Band-clamped results (scores are averaged here);
            computed from raw_results when omitted

    Returns:
        InvestmentSummary with total score, consensus verdict and vote breakdown
    """
    if adjusted_results is None:
        adjusted_results = apply_win_rate_bands(raw_results)

    scores = [r.win_rate for r in adjusted_results.values()]
    total_score = round(sum(scores) / len(scores)) if scores else 0
    total_score = max(0, min(100, total_score))

    votes = [r.verdict for r in raw_results.values()]
    breakdown = OpinionBreakdown(
        strong_buy=votes.count(Verdict.STRONG_BUY),
        buy=votes.count(Verdict.BUY),
        hold=votes.count(Verdict.HOLD),
        sell=votes.count(Verdict.SELL),
    )

    return InvestmentSummary(
        total_score=total_score,
        consensus_verdict=consensus_verdict(total_score),
        opinion_breakdown=breakdown,
    )


def data_period_used(data: NormalizedInput) -> str:
    """Describe the fundamentals window, e.g. '3 years (2022-2024)'."""
    hist = data.financial_history
    if not hist:
        return "0 years (N/A)"
    return f"{len(hist)} years ({hist[0].year}-{hist[-1].year})"


def evaluate(
    data: NormalizedInput,
    *,
    as_of: datetime | None = None,
    concurrent: bool = False,
    display_heuristics: bool | None = None,
) -> InvestmentAnalysisResult:
    """
    Full engine pass: six personas, band clamping, consensus.

    Args:
        data: Normalized input snapshot
        as_of: Timestamp recorded in meta (defaults to now, UTC)
        concurrent: Run personas on a thread pool
        display_heuristics: Override the DISPLAY_HEURISTICS setting

    Returns:
        InvestmentAnalysisResult
    """
    raw_results = run_personas(data, concurrent=concurrent, display_heuristics=display_heuristics)
    adjusted = apply_win_rate_bands(raw_results)
    summary = build_summary(raw_results, adjusted)

    timestamp = (as_of or datetime.now(timezone.utc)).isoformat()
    meta: dict[str, Any] = {
        "current_price": data.current_price,
        "data_period_used": data_period_used(data),
        "currency": data.currency,
        "timestamp": timestamp,
    }

    logger.info(
        f"{data.ticker}: total_score={summary.total_score} "
        f"consensus={summary.consensus_verdict.value}"
    )

    return InvestmentAnalysisResult(
        ticker=data.ticker,
        company_name=data.company_name or data.ticker,
        meta=meta,
        summary=summary,
        results=adjusted,
    )
