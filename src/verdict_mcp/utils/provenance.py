"""Response metadata and error envelopes."""

from datetime import datetime
from typing import Any

from verdict_mcp import SCHEMA_VERSION, SERVER_VERSION
from verdict_mcp.data.errors import StockDataErrorType

# HTTP-style status hint per error kind, for clients mapping to HTTP
ERROR_STATUS_CODES: dict[str, int] = {
    StockDataErrorType.INVALID_TICKER.value: 400,
    StockDataErrorType.TICKER_NOT_FOUND.value: 404,
    StockDataErrorType.LOCAL_DATA_NOT_FOUND.value: 404,
    StockDataErrorType.INSUFFICIENT_DATA.value: 422,
    StockDataErrorType.RATE_LIMIT.value: 429,
    StockDataErrorType.API_ERROR.value: 500,
    StockDataErrorType.CALCULATION_ERROR.value: 500,
}

RATE_LIMIT_RETRY_SECONDS = 60


def build_meta(tool: str, duration_ms: float | None = None) -> dict[str, Any]:
    """
    Build standard metadata block for responses.

    Args:
        tool: Name of the tool producing this response
        duration_ms: Execution time in milliseconds (optional)

    Returns:
        Metadata dict with version info
    """
    meta: dict[str, Any] = {
        "server_version": SERVER_VERSION,
        "schema_version": SCHEMA_VERSION,
        "tool": tool,
    }
    if duration_ms is not None:
        meta["duration_ms"] = round(duration_ms, 1)
    return meta


def build_provenance(
    source: str,
    as_of: datetime | str | None = None,
    **kwargs: Any,
) -> dict[str, Any]:
    """
    Build data provenance block for a single data source.

    Args:
        source: Data source name (e.g., "yfinance", "local_json")
        as_of: Timestamp of data freshness
        **kwargs: Additional provenance fields

    Returns:
        Provenance dict for this data source
    """
    prov: dict[str, Any] = {"source": source}

    if as_of is not None:
        prov["as_of"] = as_of.isoformat() if isinstance(as_of, datetime) else as_of

    prov.update(kwargs)
    prov.setdefault("warnings", [])
    return prov


def build_error_response(
    error_type: StockDataErrorType | str,
    message: str,
    ticker: str | None = None,
    tool: str = "error",
) -> dict[str, Any]:
    """
    Build standardized error response.

    Args:
        error_type: Error kind (StockDataErrorType or its value)
        message: Human-readable error message
        ticker: Ticker that caused the error (if applicable)
        tool: Tool name recorded in meta

    Returns:
        Error response dict with status_code hint
    """
    kind = error_type.value if isinstance(error_type, StockDataErrorType) else error_type
    response: dict[str, Any] = {
        "error": True,
        "error_type": kind,
        "status_code": ERROR_STATUS_CODES.get(kind, 500),
        "message": message,
        "meta": build_meta(tool),
    }

    if ticker is not None:
        response["ticker"] = ticker

    if kind == StockDataErrorType.RATE_LIMIT.value:
        response["retry_after_seconds"] = RATE_LIMIT_RETRY_SECONDS

    return response
