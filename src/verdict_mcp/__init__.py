"""Investor persona verdict MCP server."""

import os


def get_server_version() -> str:
    """Get version with fallback for dev mode."""
    if version := os.environ.get("SERVER_VERSION"):
        return version
    try:
        from importlib.metadata import version as pkg_version

        return pkg_version("verdict-mcp")
    except Exception:
        return "dev"


SERVER_VERSION = get_server_version()
# Bump when output schema changes materially (new fields, renamed fields, structure changes)
# v1: Initial schema (six persona results + summary)
# v2: Added display_price/price_status/win_rate and fair_price per persona
SCHEMA_VERSION = "2"
