"""Pytest configuration and fixtures."""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pandas as pd
import pytest

from verdict_mcp.engine.types import NormalizedInput, YearRecord


@pytest.fixture
def sample_history() -> tuple[YearRecord, ...]:
    """Three fiscal years of steadily improving fundamentals, oldest first."""
    return (
        YearRecord(year=2022, eps=4.0, roe=18.0, per=20.0, pbr=3.0, psr=4.0, sps=25.0, fcf=900.0),
        YearRecord(year=2023, eps=4.5, roe=20.0, per=22.0, pbr=3.2, psr=4.5, sps=27.0, fcf=1000.0),
        YearRecord(year=2024, eps=5.0, roe=22.0, per=24.0, pbr=3.4, psr=5.0, sps=30.0, fcf=1100.0),
    )


@pytest.fixture
def make_input(sample_history: tuple[YearRecord, ...]) -> Callable[..., NormalizedInput]:
    """Factory for NormalizedInput with sensible mid-cap defaults."""

    def _make(**overrides: Any) -> NormalizedInput:
        fields: dict[str, Any] = {
            "ticker": "TEST",
            "current_price": 100.0,
            "market_cap": 50e9,
            "week52_high": 120.0,
            "week52_low": 80.0,
            "ma200": 95.0,
            "debt_to_equity": 50.0,
            "ttm_per": 20.0,
            "financial_history": sample_history,
            "company_name": "Test Corp",
        }
        fields.update(overrides)
        return NormalizedInput(**fields)

    return _make


@pytest.fixture
def buffett_history() -> tuple[YearRecord, ...]:
    """ROE 20%, EPS 1.00 -> 1.21 -> 1.50, PER 25 (target price ~27.53)."""
    return (
        YearRecord(year=2022, eps=1.0, roe=20.0, per=25.0),
        YearRecord(year=2023, eps=1.21, roe=20.0, per=25.0),
        YearRecord(year=2024, eps=1.5, roe=20.0, per=25.0),
    )


@pytest.fixture
def sample_price_series() -> pd.Series:
    """300 daily closes rising 1.0 per day from 1.0."""
    return pd.Series([float(i) for i in range(1, 301)])


def _row(t_index: str, period: str, **metrics: Any) -> dict[str, Any]:
    return {"t_index": t_index, "period": period, **metrics}


@pytest.fixture
def local_rows() -> list[dict[str, Any]]:
    """Five stored years, newest first, as exported to the local store."""
    return [
        _row("t-0", "2024.12.31", EPS=6.0, ROE=25.0, PER=28.0, PBR=9.0, PSR=7.0, SPS=25.0, calculated_FCF=100.0),
        _row("t-1", "2023.12.31", EPS=5.5, ROE=24.0, PER=27.0, PBR=8.5, PSR=6.5, SPS=24.0, calculated_FCF=95.0),
        _row("t-2", "2022.12.31", EPS=5.0, ROE=23.0, PER=26.0, PBR=8.0, PSR=6.0, SPS=23.0, calculated_FCF=90.0),
        _row("t-3", "2021.12.31", EPS=4.5, ROE=22.0, PER=25.0, PBR=7.5, PSR=5.5, SPS=22.0, calculated_FCF=85.0),
        _row("t-4", "2020.12.31", EPS=4.0, ROE=21.0, PER=24.0, PBR=7.0, PSR=5.0, SPS=21.0, calculated_FCF=80.0),
    ]


@pytest.fixture
def local_store(tmp_path: Path, local_rows: list[dict[str, Any]]) -> Path:
    """Store root with AAPL under nasdaq/ and BRK-B under nyse/."""
    nasdaq = tmp_path / "nasdaq"
    nyse = tmp_path / "nyse"
    nasdaq.mkdir()
    nyse.mkdir()
    (nasdaq / "AAPL_Apple_Inc.json").write_text(json.dumps(local_rows), encoding="utf-8")
    (nyse / "BRK-B_Berkshire_Hathaway.json").write_text(json.dumps(local_rows[:3]), encoding="utf-8")
    return tmp_path
