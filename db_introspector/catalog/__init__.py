"""Catalog source - Reads column definitions from a live database."""

from .source import (
    Dialect,
    detect_dialect,
    fetch_columns,
    fetch_columns_async,
    parse_nullable,
    record_from_row,
)

__all__ = [
    "Dialect",
    "detect_dialect",
    "fetch_columns",
    "fetch_columns_async",
    "parse_nullable",
    "record_from_row",
]
