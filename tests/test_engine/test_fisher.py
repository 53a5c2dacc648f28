"""Tests for the Fisher price-to-sales valuation."""

from dataclasses import replace

import pytest

from verdict_mcp.engine.personas.fisher import calculate_fisher_analysis, display_target
from verdict_mcp.engine.triggers import TriggerCode
from verdict_mcp.engine.types import Verdict, YearRecord


class TestFisherVerdicts:
    """PSR 4.0/4.5/5.0 (avg 4.5, max 5.0) with SPS 30."""

    @pytest.mark.parametrize(
        "price,verdict,trigger",
        [
            (100.0, Verdict.STRONG_BUY, TriggerCode.BUY_PSR_BARGAIN),
            (120.0, Verdict.BUY, TriggerCode.BUY_PSR_FAIR),
            (140.0, Verdict.HOLD, TriggerCode.HOLD_PSR_BAND),
            (160.0, Verdict.SELL, TriggerCode.SELL_PSR_EXPENSIVE),
        ],
    )
    def test_tiers(self, make_input, price, verdict, trigger) -> None:
        result = calculate_fisher_analysis(make_input(current_price=price))
        assert result.verdict == verdict
        assert result.trigger_code == trigger

    def test_targets(self, make_input) -> None:
        result = calculate_fisher_analysis(make_input(current_price=120.0))
        assert result.price_guide.buy_zone_max == pytest.approx(135.0)
        assert result.price_guide.profit_zone_min == pytest.approx(150.0)
        assert result.fair_price == pytest.approx(135.0)
        assert result.key_factors["current_psr"] == 4.0
        assert result.key_factors["years_used"] == 3

    def test_psr_from_live_price(self, make_input) -> None:
        result = calculate_fisher_analysis(make_input(current_price=90.0))
        assert result.metric_value == 3.0


class TestFisherDisplayTarget:
    """Tests for the near-target display switch."""

    def test_bullish_near_target_shows_upper_band(self, make_input) -> None:
        result = calculate_fisher_analysis(make_input(current_price=130.0))
        assert result.verdict == Verdict.BUY
        assert result.display_price == pytest.approx(150.0)

    def test_heuristics_off_shows_average_target(self, make_input) -> None:
        result = calculate_fisher_analysis(make_input(current_price=130.0), display_heuristics=False)
        assert result.display_price == pytest.approx(135.0)

    def test_bearish_keeps_average_target(self) -> None:
        assert display_target(Verdict.HOLD, 140.0, 135.0, 150.0) == 135.0

    def test_bullish_far_from_target(self) -> None:
        assert display_target(Verdict.STRONG_BUY, 100.0, 135.0, 150.0) == 135.0


class TestFisherEdgeCases:
    """Degraded inputs for the Fisher valuation."""

    def test_no_psr(self, make_input, sample_history) -> None:
        hist = tuple(replace(r, psr=None) for r in sample_history)
        result = calculate_fisher_analysis(make_input(financial_history=hist))
        assert result.verdict == Verdict.NOT_AVAILABLE
        assert result.trigger_code == TriggerCode.DATA_INSUFFICIENT

    def test_zero_sps(self, make_input, sample_history) -> None:
        hist = sample_history[:-1] + (replace(sample_history[-1], sps=0.0),)
        result = calculate_fisher_analysis(make_input(financial_history=hist))
        assert result.verdict == Verdict.NOT_AVAILABLE
        assert result.trigger_code == TriggerCode.DATA_INVALID

    def test_all_zero_psr(self, make_input) -> None:
        hist = (YearRecord(year=2024, psr=0.0, sps=10.0),)
        result = calculate_fisher_analysis(make_input(financial_history=hist))
        assert result.trigger_code == TriggerCode.DATA_INVALID

    def test_loss_maker_still_rated(self, make_input, sample_history) -> None:
        hist = tuple(replace(r, eps=-1.0) for r in sample_history)
        result = calculate_fisher_analysis(make_input(financial_history=hist))
        assert result.verdict != Verdict.NOT_AVAILABLE
