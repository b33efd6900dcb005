"""Shared utilities for the introspector."""

from .naming import (
    to_pascal_case,
    starts_with_digit,
    contains_whitespace,
    is_reserved_name,
    is_mangled_name,
    is_valid_field_name,
    PYTHON_KEYWORDS,
)
from .errors import (
    IntrospectorError,
    ConfigError,
    DatabaseConnectionError,
    UnsupportedDialectError,
    CatalogError,
    EmptySchemaError,
)

__all__ = [
    # Naming utilities
    "to_pascal_case",
    "starts_with_digit",
    "contains_whitespace",
    "is_reserved_name",
    "is_mangled_name",
    "is_valid_field_name",
    "PYTHON_KEYWORDS",
    # Errors
    "IntrospectorError",
    "ConfigError",
    "DatabaseConnectionError",
    "UnsupportedDialectError",
    "CatalogError",
    "EmptySchemaError",
]
