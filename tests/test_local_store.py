"""Tests for the local JSON fundamentals store."""

from pathlib import Path

import pytest

from verdict_mcp.data.errors import (
    InsufficientDataError,
    LocalDataNotFoundError,
    StockDataErrorType,
)
from verdict_mcp.data.local_store import (
    NET_MARGIN_KEY,
    extract_recent_years,
    find_local_file,
    list_local_tickers,
    parse_year_record,
    read_local_financial_data,
)


class TestFindLocalFile:
    """File lookup across exchange subdirectories."""

    def test_finds_in_nasdaq(self, local_store: Path) -> None:
        path = find_local_file("AAPL", local_store)
        assert path is not None
        assert path.parent.name == "nasdaq"

    def test_dot_ticker_matches_dash_file(self, local_store: Path) -> None:
        path = find_local_file("BRK.B", local_store)
        assert path is not None
        assert path.name == "BRK-B_Berkshire_Hathaway.json"

    def test_root_directory_searched(self, tmp_path: Path) -> None:
        (tmp_path / "MSFT_Microsoft.json").write_text("[]", encoding="utf-8")
        assert find_local_file("MSFT", tmp_path) == tmp_path / "MSFT_Microsoft.json"

    def test_prefix_does_not_match_longer_ticker(self, local_store: Path) -> None:
        assert find_local_file("AAP", local_store) is None


class TestReadLocalFinancialData:
    """Tests for read_local_financial_data."""

    def test_reads_rows_and_name(self, local_store: Path) -> None:
        local = read_local_financial_data("AAPL", local_store)
        assert local.company_name == "Apple Inc"
        assert local.exchange == "nasdaq"
        assert len(local.rows) == 5

    def test_missing_raises(self, local_store: Path) -> None:
        with pytest.raises(LocalDataNotFoundError) as exc_info:
            read_local_financial_data("ZZZZ", local_store)
        assert exc_info.value.error_type == StockDataErrorType.LOCAL_DATA_NOT_FOUND
        assert exc_info.value.ticker == "ZZZZ"

    def test_malformed_json_raises(self, tmp_path: Path) -> None:
        (tmp_path / "BAD_Broken.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(InsufficientDataError):
            read_local_financial_data("BAD", tmp_path)

    def test_non_utf8_file_raises(self, tmp_path: Path) -> None:
        (tmp_path / "BIN_Binary.json").write_bytes(b'[{"t_index": "t-0", "EPS": "\xff\xfe"}]')
        with pytest.raises(InsufficientDataError) as exc_info:
            read_local_financial_data("BIN", tmp_path)
        assert exc_info.value.error_type == StockDataErrorType.INSUFFICIENT_DATA
        assert exc_info.value.ticker == "BIN"

    def test_non_list_raises(self, tmp_path: Path) -> None:
        (tmp_path / "OBJ_Object.json").write_text('{"EPS": 1}', encoding="utf-8")
        with pytest.raises(InsufficientDataError):
            read_local_financial_data("OBJ", tmp_path)


class TestExtractRecentYears:
    """Tests for extract_recent_years."""

    def test_keeps_three_oldest_first(self, local_rows) -> None:
        records = extract_recent_years(local_rows, 3)
        assert [r.year for r in records] == [2022, 2023, 2024]
        assert records[-1].eps == 6.0
        assert records[-1].fcf == 100.0

    def test_custom_window(self, local_rows) -> None:
        assert [r.year for r in extract_recent_years(local_rows, 2)] == [2023, 2024]

    def test_input_order_irrelevant(self, local_rows) -> None:
        records = extract_recent_years(list(reversed(local_rows)), 3)
        assert [r.year for r in records] == [2022, 2023, 2024]

    def test_skips_rows_without_t_index(self, local_rows) -> None:
        rows = [*local_rows, {"period": "2025.12.31", "EPS": 9.0}]
        assert [r.year for r in extract_recent_years(rows, 3)] == [2022, 2023, 2024]

    def test_empty(self) -> None:
        assert extract_recent_years([], 3) == []


class TestParseYearRecord:
    """Tests for parse_year_record."""

    def test_missing_fields_are_none(self) -> None:
        record = parse_year_record({"t_index": "t-0", "period": "2024.06.30", "EPS": 1.5})
        assert record.year == 2024
        assert record.eps == 1.5
        assert record.roe is None
        assert record.psr is None

    def test_roe_falls_back_to_net_margin(self) -> None:
        record = parse_year_record({"period": "2024.12.31", NET_MARGIN_KEY: 12.5})
        assert record.roe == 12.5

    def test_roe_preferred_over_margin(self) -> None:
        record = parse_year_record({"period": "2024.12.31", "ROE": 20.0, NET_MARGIN_KEY: 12.5})
        assert record.roe == 20.0

    def test_numeric_strings(self) -> None:
        record = parse_year_record({"period": "2024.12.31", "SPS": "1,234.5", "PER": "", "PBR": "n/a"})
        assert record.sps == 1234.5
        assert record.per is None
        assert record.pbr is None

    def test_bad_period_dropped(self) -> None:
        assert parse_year_record({"period": "latest", "EPS": 1.0}) is None
        assert parse_year_record({"EPS": 1.0}) is None


class TestListLocalTickers:
    """Tests for list_local_tickers."""

    def test_lists_all_exchanges(self, local_store: Path) -> None:
        tickers = list_local_tickers(local_store)
        assert [t["ticker"] for t in tickers] == ["AAPL", "BRK-B"]
        assert tickers[0]["company_name"] == "Apple Inc"
        assert tickers[1]["exchange"] == "nyse"

    def test_missing_store(self, tmp_path: Path) -> None:
        assert list_local_tickers(tmp_path / "nope") == []
