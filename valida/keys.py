"""Key Canonicalization

Input mappings may address the same logical key as a str or as an Enum
member (the Python stand-in for symbols). Everything is canonicalized to str.
"""
from __future__ import annotations

from enum import Enum
from typing import Any


def symbol_name(value: Enum) -> str:
    """String form of an Enum member: its value if that is a str, else its name."""
    return value.value if isinstance(value.value, str) else value.name


def normalize_symbol(value: Any) -> Any:
    """Replace Enum members by their string form; leave anything else alone."""
    return symbol_name(value) if isinstance(value, Enum) else value


def canonical_key(key: Any) -> str:
    if isinstance(key, Enum): return symbol_name(key)
    return key if isinstance(key, str) else str(key)
