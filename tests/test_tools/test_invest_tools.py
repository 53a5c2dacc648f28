"""Tests for the investment verdict tool functions."""

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from verdict_mcp.data.errors import LocalDataNotFoundError, RateLimitError, TickerNotFoundError
from verdict_mcp.data.yfinance_client import QuoteSnapshot
from verdict_mcp.tools.invest import (
    analyze_investment,
    combined_stock_data,
    describe_trigger,
    local_tickers,
)


class TestAnalyzeInvestment:
    """Tests for analyze_investment."""

    def test_response_shape(self, make_input) -> None:
        with patch(
            "verdict_mcp.tools.invest.combine_stock_data",
            new=AsyncMock(return_value=make_input()),
        ):
            result = asyncio.run(analyze_investment("test"))

        assert result["ticker"] == "TEST"
        assert set(result["results"]) == {"buffett", "lynch", "graham", "fisher", "druckenmiller", "marks"}
        assert {"total_score", "consensus_verdict", "opinion_breakdown"} <= set(result["summary"])
        meta = result["meta"]
        assert meta["tool"] == "analyze_investment"
        assert meta["data_period_used"] == "3 years (2022-2024)"
        assert "duration_ms" in meta
        assert "state" in meta["market_state"]
        assert result["data_provenance"]["fundamentals"]["years"] == [2022, 2023, 2024]

    def test_ticker_normalized_before_fetch(self, make_input) -> None:
        mock_combine = AsyncMock(return_value=make_input())
        with patch("verdict_mcp.tools.invest.combine_stock_data", new=mock_combine):
            asyncio.run(analyze_investment("  brk.b "))
        mock_combine.assert_awaited_once_with("BRK.B")

    @pytest.mark.parametrize("ticker", ["", "   ", "AA PL", "$$$"])
    def test_invalid_ticker(self, ticker: str) -> None:
        result = asyncio.run(analyze_investment(ticker))
        assert result["error"] is True
        assert result["error_type"] == "invalid_ticker"
        assert result["status_code"] == 400

    @pytest.mark.parametrize(
        "error,error_type,status",
        [
            (LocalDataNotFoundError("no file", ticker="AAPL"), "local_data_not_found", 404),
            (TickerNotFoundError("unknown", ticker="AAPL"), "ticker_not_found", 404),
            (RateLimitError("slow down", ticker="AAPL"), "rate_limited", 429),
        ],
    )
    def test_data_errors_mapped(self, error, error_type, status) -> None:
        with patch(
            "verdict_mcp.tools.invest.combine_stock_data",
            new=AsyncMock(side_effect=error),
        ):
            result = asyncio.run(analyze_investment("AAPL"))
        assert result["error_type"] == error_type
        assert result["status_code"] == status
        assert result["ticker"] == "AAPL"
        assert result["meta"]["tool"] == "analyze_investment"

    def test_rate_limit_has_retry_hint(self) -> None:
        with patch(
            "verdict_mcp.tools.invest.combine_stock_data",
            new=AsyncMock(side_effect=RateLimitError("slow down")),
        ):
            result = asyncio.run(analyze_investment("AAPL"))
        assert result["retry_after_seconds"] > 0

    def test_undecodable_local_file_is_error_response(self, tmp_path: Path) -> None:
        (tmp_path / "AAPL_Apple.json").write_bytes(b"\xff\xfe\x00[")
        quote = QuoteSnapshot(
            ticker="AAPL",
            current_price=100.0,
            market_cap=3e12,
            week52_high=120.0,
            week52_low=80.0,
            ma200=95.0,
            ttm_per=30.0,
            debt_to_equity=150.0,
        )
        mock_quote = AsyncMock(return_value=quote)
        with patch("verdict_mcp.data.local_store._local_data_dir", tmp_path):
            with patch("verdict_mcp.data.combiner.fetch_quote_snapshot", new=mock_quote):
                result = asyncio.run(analyze_investment("AAPL"))
        assert result["error"] is True
        assert result["error_type"] == "insufficient_data"
        assert result["status_code"] == 422
        assert result["ticker"] == "AAPL"


class TestCombinedStockData:
    """Tests for combined_stock_data."""

    def test_returns_normalized_record(self, make_input) -> None:
        with patch(
            "verdict_mcp.tools.invest.combine_stock_data",
            new=AsyncMock(return_value=make_input()),
        ):
            result = asyncio.run(combined_stock_data("TEST"))
        assert result["meta"]["tool"] == "combined_stock_data"
        assert result["market_status"]["200d_ma"] == 95.0
        assert len(result["financial_history"]) == 3

    def test_invalid_ticker(self) -> None:
        result = asyncio.run(combined_stock_data(""))
        assert result["error_type"] == "invalid_ticker"


class TestLocalTickers:
    """Tests for local_tickers."""

    def test_lists(self) -> None:
        listing = [{"ticker": "AAPL", "company_name": "Apple Inc", "exchange": "nasdaq"}]
        with patch("verdict_mcp.tools.invest.list_local_tickers", return_value=listing):
            result = asyncio.run(local_tickers())
        assert result["count"] == 1
        assert result["tickers"] == listing


class TestDescribeTrigger:
    """Tests for describe_trigger."""

    def test_known(self) -> None:
        result = describe_trigger("sell_trend_broken")
        assert result["trigger_code"] == "SELL_TREND_BROKEN"
        assert result["known"] is True
        assert result["message"] != "SELL_TREND_BROKEN"

    def test_unknown(self) -> None:
        result = describe_trigger("MADE_UP")
        assert result["known"] is False
        assert result["message"] == "MADE_UP"
