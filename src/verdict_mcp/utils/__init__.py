"""Utility modules."""

from verdict_mcp.utils.indicators import calculate_sma, technical_levels
from verdict_mcp.utils.provenance import build_error_response, build_meta, build_provenance
from verdict_mcp.utils.sanitize import company_name_from_stem, sanitize_text
from verdict_mcp.utils.validators import normalize_ticker, normalize_ticker_for_yahoo

__all__ = [
    "calculate_sma",
    "technical_levels",
    "build_error_response",
    "build_meta",
    "build_provenance",
    "company_name_from_stem",
    "sanitize_text",
    "normalize_ticker",
    "normalize_ticker_for_yahoo",
]
