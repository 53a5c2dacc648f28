"""Local JSON fundamentals store."""

import json
import logging
import math
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from verdict_mcp.data.errors import InsufficientDataError, LocalDataNotFoundError
from verdict_mcp.engine.types import YearRecord
from verdict_mcp.utils.sanitize import company_name_from_stem

logger = logging.getLogger(__name__)

_local_data_dir = Path(os.environ.get("LOCAL_DATA_DIR", "data/stocks/finance"))
_recent_years = int(os.environ.get("RECENT_YEARS", "3"))

# Searched in order; "" is the store root
EXCHANGE_SUBDIRS = ("", "nasdaq", "nyse")

# Fallback when a row has no ROE (net profit margin, as exported by the source sheets)
NET_MARGIN_KEY = "순이익마진율"

_T_INDEX_RE = re.compile(r"^t-(\d+)$")


@dataclass(frozen=True)
class LocalFinancials:
    """Raw rows read from one fundamentals file."""

    ticker: str
    path: Path
    company_name: str | None = None
    rows: list[dict[str, Any]] = field(default_factory=list)

    @property
    def exchange(self) -> str | None:
        parent = self.path.parent.name
        return parent if parent in EXCHANGE_SUBDIRS else None


def _ticker_variants(ticker: str) -> list[str]:
    """BRK.B is stored as BRK.B or BRK-B depending on the export."""
    ticker = ticker.upper()
    variants = [ticker, ticker.replace(".", "-"), ticker.replace("-", ".")]
    return list(dict.fromkeys(variants))


def find_local_file(ticker: str, data_dir: Path | None = None) -> Path | None:
    """
    Locate '{TICKER}_{Company}.json' under the store root or an exchange subdir.

    Args:
        ticker: Normalized ticker
        data_dir: Store root (defaults to LOCAL_DATA_DIR)

    Returns:
        Path of the first match, or None
    """
    root = data_dir or _local_data_dir
    for subdir in EXCHANGE_SUBDIRS:
        directory = root / subdir if subdir else root
        if not directory.is_dir():
            continue
        for variant in _ticker_variants(ticker):
            matches = sorted(directory.glob(f"{variant}_*.json"))
            if matches:
                return matches[0]
    return None


def read_local_financial_data(ticker: str, data_dir: Path | None = None) -> LocalFinancials:
    """
    Read the fundamentals file for a ticker.

    Raises:
        LocalDataNotFoundError: If no file exists for the ticker
        InsufficientDataError: If the file is not a JSON list of year rows
    """
    path = find_local_file(ticker, data_dir)
    if path is None:
        raise LocalDataNotFoundError(f"No local financial data for {ticker}", ticker=ticker)

    logger.debug(f"Reading local fundamentals for {ticker} from {path}")
    try:
        with path.open(encoding="utf-8") as f:
            rows = json.load(f)
    except (OSError, ValueError) as e:
        raise InsufficientDataError(
            f"Unreadable local financial data for {ticker}: {e}", ticker=ticker, cause=e
        ) from e

    if not isinstance(rows, list):
        raise InsufficientDataError(
            f"Local financial data for {ticker} is not a list of years", ticker=ticker
        )

    stem_ticker = path.stem.split("_", 1)[0]
    return LocalFinancials(
        ticker=ticker,
        path=path,
        company_name=company_name_from_stem(path.stem, stem_ticker),
        rows=[r for r in rows if isinstance(r, dict)],
    )


def _to_float(value: Any) -> float | None:
    """Numbers and numeric strings ('1,234.5') become floats; anything else is missing."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.replace(",", "").strip()
        if not value:
            return None
    try:
        result = float(value)
    except (ValueError, TypeError):
        return None
    return result if math.isfinite(result) else None


def _t_offset(row: dict[str, Any]) -> int | None:
    match = _T_INDEX_RE.match(str(row.get("t_index", "")).strip())
    return int(match.group(1)) if match else None


def parse_year_record(row: dict[str, Any]) -> YearRecord | None:
    """
    Map one stored row to a YearRecord. Rows without a parsable period are dropped.

    Missing metrics stay None rather than defaulting to zero.
    """
    period = str(row.get("period", "")).strip()
    try:
        year = int(period[:4])
    except ValueError:
        return None

    roe = _to_float(row.get("ROE"))
    if roe is None:
        roe = _to_float(row.get(NET_MARGIN_KEY))

    return YearRecord(
        year=year,
        eps=_to_float(row.get("EPS")),
        roe=roe,
        per=_to_float(row.get("PER")),
        pbr=_to_float(row.get("PBR")),
        psr=_to_float(row.get("PSR")),
        sps=_to_float(row.get("SPS")),
        fcf=_to_float(row.get("calculated_FCF")),
    )


def extract_recent_years(rows: list[dict[str, Any]], years: int | None = None) -> list[YearRecord]:
    """
    Keep the most recent years (t-0 newest), ordered oldest to newest.

    Args:
        rows: Raw rows from the store
        years: How many years to keep (defaults to RECENT_YEARS)

    Returns:
        YearRecords for t-(years-1) .. t-0 that are present and parsable
    """
    window = _recent_years if years is None else years
    indexed: list[tuple[int, YearRecord]] = []
    for row in rows:
        offset = _t_offset(row)
        if offset is None or offset >= window:
            continue
        record = parse_year_record(row)
        if record is not None:
            indexed.append((offset, record))

    indexed.sort(key=lambda item: item[0], reverse=True)
    return [record for _, record in indexed]


def list_local_tickers(data_dir: Path | None = None) -> list[dict[str, str | None]]:
    """
    Enumerate tickers available in the local store.

    Returns:
        Sorted list of {ticker, company_name, exchange}
    """
    root = data_dir or _local_data_dir
    found: dict[str, dict[str, str | None]] = {}
    for subdir in EXCHANGE_SUBDIRS:
        directory = root / subdir if subdir else root
        if not directory.is_dir():
            continue
        for path in sorted(directory.glob("*_*.json")):
            ticker = path.stem.split("_", 1)[0].upper()
            if ticker in found:
                continue
            found[ticker] = {
                "ticker": ticker,
                "company_name": company_name_from_stem(path.stem, ticker),
                "exchange": subdir or None,
            }
    return [found[t] for t in sorted(found)]
