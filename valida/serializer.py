"""Serialization of Validated Data

Converts coerced output back to JSON-safe primitives so it can be stored,
sent over the wire, or re-parsed (coercion is stable under its own output).
"""
from __future__ import annotations

import dataclasses
import json
from collections.abc import Mapping, Set
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any

from valida.keys import canonical_key, symbol_name


def serialize_value(value: Any) -> Any:
    """Recursively canonicalize a value into JSON-safe primitives."""
    if value is None or isinstance(value, (bool, str)): return value
    if isinstance(value, Enum): return symbol_name(value)
    if isinstance(value, (int, float)): return value
    if isinstance(value, Decimal): return format(value, "f")
    # datetime before date: datetime is a date subclass
    if isinstance(value, (datetime, date, time)): return value.isoformat()
    if isinstance(value, Mapping):
        return {canonical_key(k): serialize_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)): return [serialize_value(v) for v in value]
    if isinstance(value, Set): return [serialize_value(v) for v in value]
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return serialize_value(dataclasses.asdict(value))
    for projection in ("to_dict", "_asdict"):
        if callable(method := getattr(value, projection, None)):
            return serialize_value(method())
    return str(value)


def dump(value: Any, format: str = "dict") -> Any:
    """Serialize to primitives ("dict") or to a JSON string ("json")."""
    serialized = serialize_value(value)
    if format == "dict": return serialized
    if format == "json": return json.dumps(serialized)
    raise ValueError(f"Unknown format: {format}")
