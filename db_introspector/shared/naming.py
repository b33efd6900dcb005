"""Naming utilities for code generation."""

from __future__ import annotations

import keyword
import re
from functools import lru_cache

PYTHON_KEYWORDS: frozenset[str] = frozenset(keyword.kwlist)

_CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")
_WORD_SEPARATORS = re.compile(r"[-_\s]+")


@lru_cache(maxsize=1024)
def to_pascal_case(value: str) -> str:
    """Convert a string to PascalCase.

    Uses caching for repeated calls with the same input.

    Examples:
        >>> to_pascal_case("order_items")
        'OrderItems'
        >>> to_pascal_case("order-items")
        'OrderItems'
        >>> to_pascal_case("orderItems")
        'OrderItems'
    """
    # Handle already camelCase/PascalCase by inserting underscores before caps
    value = _CAMEL_BOUNDARY.sub(r"\1_\2", value)

    parts = [part for part in _WORD_SEPARATORS.split(value) if part]
    return "".join(part.capitalize() for part in parts)


def starts_with_digit(value: str) -> bool:
    return value[:1].isdigit()


def contains_whitespace(value: str) -> bool:
    return any(char.isspace() for char in value)


def is_reserved_name(value: str) -> bool:
    """Return True if ``value`` is a Python keyword such as ``from``."""
    return value in PYTHON_KEYWORDS


def is_mangled_name(value: str) -> bool:
    """Return True if a class body would rename ``value`` (``__x`` becomes ``_Cls__x``)."""
    return value.startswith("__") and not value.endswith("__")


@lru_cache(maxsize=1024)
def is_valid_field_name(value: str) -> bool:
    """Check whether ``value`` can be written as a bare class-body annotation.

    Uses caching for repeated calls with the same input.
    """
    if starts_with_digit(value) or contains_whitespace(value):
        return False
    if is_reserved_name(value) or is_mangled_name(value):
        return False
    return value.isidentifier()
