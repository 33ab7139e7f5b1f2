"""Constraint Variants

Post-coercion checks attached to a field. Each constraint is a frozen
dataclass tagged with a ConstraintKind and built from a single field option
(min=3, length=(2, 10), format="email", enum=[...]).

Features:
- Min/Max compare numbers by value and sized values by length
- Length with exactly one mode: exact, min/max, or inclusive range
- Named formats (email, url, uuid, ...) or any compiled pattern
- Messages rendered through the scope's MessageRenderer
"""
from __future__ import annotations

import enum
import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from numbers import Number
from types import MappingProxyType
from typing import Any, ClassVar

from valida.errors import Error, ErrorCode, Path, SchemaDefinitionError
from valida.keys import canonical_key, normalize_symbol
from valida.messages import DEFAULT_MESSAGES, MessageRenderer
from valida.types.base import DEFAULT_SCOPE, EvalScope


class ConstraintKind(str, enum.Enum):
    MIN = "min"
    MAX = "max"
    LENGTH = "length"
    FORMAT = "format"
    ENUM = "enum"
    CUSTOM = "custom"


@dataclass(frozen=True, slots=True)
class Constraint(ABC):
    """Base class for constraints.

    Subclasses implement valid() and error_message(); evaluate() turns a
    failed check into a single Error carrying error_code.
    """
    kind: ClassVar[ConstraintKind]
    error_code: ClassVar[ErrorCode]

    @classmethod
    def from_option(cls, value: Any) -> Constraint:
        """Build from the value given to the field option of the same name."""
        return cls(value)

    @property
    @abstractmethod
    def option_value(self) -> Any:
        """The configured option, as reported by introspection."""

    @abstractmethod
    def valid(self, value: Any) -> bool: ...

    @abstractmethod
    def error_message(self, value: Any, messages: MessageRenderer = DEFAULT_MESSAGES) -> str: ...

    def evaluate(self, value: Any, path: Path = (), scope: EvalScope = DEFAULT_SCOPE) -> list[Error]:
        if self.valid(value): return []
        return [Error(path=path, message=self.error_message(value, scope.messages), code=self.error_code)]


def _length_based(value: Any) -> bool:
    return hasattr(value, "__len__") and not isinstance(value, Number)


def _comparable(value: Any) -> Any:
    return len(value) if _length_based(value) else value


# ============================================================================
# Bounds
# ============================================================================

@dataclass(frozen=True, slots=True)
class Min(Constraint):
    limit: Any

    kind: ClassVar[ConstraintKind] = ConstraintKind.MIN
    error_code: ClassVar[ErrorCode] = ErrorCode.MIN

    @property
    def option_value(self) -> Any: return self.limit

    def valid(self, value: Any) -> bool:
        try:
            return _comparable(value) >= self.limit
        except TypeError:
            return False

    def error_message(self, value: Any, messages: MessageRenderer = DEFAULT_MESSAGES) -> str:
        if _length_based(value): return messages.render("min_length", limit=self.limit, actual=len(value))
        return messages.render("min", limit=self.limit)


@dataclass(frozen=True, slots=True)
class Max(Constraint):
    limit: Any

    kind: ClassVar[ConstraintKind] = ConstraintKind.MAX
    error_code: ClassVar[ErrorCode] = ErrorCode.MAX

    @property
    def option_value(self) -> Any: return self.limit

    def valid(self, value: Any) -> bool:
        try:
            return _comparable(value) <= self.limit
        except TypeError:
            return False

    def error_message(self, value: Any, messages: MessageRenderer = DEFAULT_MESSAGES) -> str:
        if _length_based(value): return messages.render("max_length", limit=self.limit, actual=len(value))
        return messages.render("max", limit=self.limit)


def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


@dataclass(frozen=True, slots=True)
class Length(Constraint):
    """Length check in exactly one mode.

    range is inclusive on both ends when given as a (lo, hi) pair; a Python
    range object uses its own membership rules.
    """
    exact: int | None = None
    min: int | None = None
    max: int | None = None
    range: tuple[int, int] | range | None = None

    kind: ClassVar[ConstraintKind] = ConstraintKind.LENGTH
    error_code: ClassVar[ErrorCode] = ErrorCode.LENGTH

    def __post_init__(self):
        bounded = self.min is not None or self.max is not None
        modes = sum((self.exact is not None, self.range is not None, bounded))
        if modes == 0: raise SchemaDefinitionError("length requires one of: exact, min, max, range")
        if modes > 1: raise SchemaDefinitionError("length accepts only one mode: exact, min/max, or range")
        for bound in (self.exact, self.min, self.max):
            if bound is not None and not _is_count(bound):
                raise SchemaDefinitionError(f"length bounds must be non-negative integers, got {bound!r}")
        if self.range is not None and not isinstance(self.range, range):
            pair = tuple(self.range) if isinstance(self.range, (list, tuple)) else ()
            if len(pair) != 2 or not all(map(_is_count, pair)) or pair[0] > pair[1]:
                raise SchemaDefinitionError(f"length range must be a (min, max) pair, got {self.range!r}")
            object.__setattr__(self, "range", pair)

    @classmethod
    def from_option(cls, value: Any) -> Length:
        if isinstance(value, bool): raise SchemaDefinitionError(f"Invalid length option: {value!r}")
        if isinstance(value, int): return cls(exact=value)
        if isinstance(value, (tuple, list, range)): return cls(range=value)
        if isinstance(value, Mapping):
            options = {canonical_key(k): v for k, v in value.items()}
            if unknown := set(options) - {"exact", "min", "max", "range"}:
                raise SchemaDefinitionError(f"Unknown length options: {', '.join(sorted(unknown))}")
            return cls(**options)
        raise SchemaDefinitionError(f"Invalid length option: {value!r}")

    @property
    def option_value(self) -> dict[str, Any]:
        return {k: v for k, v in (("exact", self.exact), ("min", self.min), ("max", self.max),
            ("range", self.range)) if v is not None}

    @property
    def range_bounds(self) -> tuple[int, int] | None:
        if self.range is None: return None
        if isinstance(self.range, range):
            return (self.range[0], self.range[-1]) if self.range else (self.range.start, self.range.start)
        return self.range

    def valid(self, value: Any) -> bool:
        if not hasattr(value, "__len__"): return False
        size = len(value)
        if self.exact is not None: return size == self.exact
        if isinstance(self.range, range): return size in self.range
        if self.range is not None: return self.range[0] <= size <= self.range[1]
        return (self.min is None or size >= self.min) and (self.max is None or size <= self.max)

    def error_message(self, value: Any, messages: MessageRenderer = DEFAULT_MESSAGES) -> str:
        actual = len(value) if hasattr(value, "__len__") else "N/A"
        if self.exact is not None: return messages.render("length_exact", exact=self.exact, actual=actual)
        if (bounds := self.range_bounds) is not None:
            return messages.render("length_range", min=bounds[0], max=bounds[1], actual=actual)
        if self.min is not None and self.max is not None:
            return messages.render("length_range", min=self.min, max=self.max, actual=actual)
        if self.min is not None: return messages.render("min_length", limit=self.min, actual=actual)
        return messages.render("max_length", limit=self.max, actual=actual)


# ============================================================================
# Format
# ============================================================================

NAMED_FORMATS: Mapping[str, re.Pattern[str]] = MappingProxyType({
    "email": re.compile(r"\A[\w+\-.]+@[a-z0-9\-]+(\.[a-z0-9\-]+)*\.[a-z]+\Z", re.ASCII | re.IGNORECASE),
    "url": re.compile(r"\Ahttps?://[^\s/$.?#].[^\s]*\Z", re.ASCII | re.IGNORECASE),
    "uuid": re.compile(r"\A[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}\Z", re.IGNORECASE),
    "phone": re.compile(r"\A\+?[0-9\s\-().]{7,}\Z", re.ASCII),
    "alphanumeric": re.compile(r"\A[a-zA-Z0-9]+\Z"),
    "alpha": re.compile(r"\A[a-zA-Z]+\Z"),
    "numeric": re.compile(r"\A[0-9]+\Z"),
    "hex": re.compile(r"\A[0-9a-fA-F]+\Z"),
    "slug": re.compile(r"\A[a-z0-9]+(?:-[a-z0-9]+)*\Z"),
})


@dataclass(frozen=True, slots=True)
class Format(Constraint):
    pattern: re.Pattern[str]
    format_name: str | None = None

    kind: ClassVar[ConstraintKind] = ConstraintKind.FORMAT
    error_code: ClassVar[ErrorCode] = ErrorCode.FORMAT

    @classmethod
    def from_option(cls, value: Any) -> Format:
        if isinstance(value, re.Pattern): return cls(pattern=value)
        if isinstance(value, (str, enum.Enum)):
            name = normalize_symbol(value)
            if name not in NAMED_FORMATS:
                raise SchemaDefinitionError(f"Unknown format: {name}. Available: {', '.join(NAMED_FORMATS)}")
            return cls(pattern=NAMED_FORMATS[name], format_name=name)
        raise SchemaDefinitionError(f"format must be a compiled pattern or a format name, got {type(value).__name__}")

    @property
    def option_value(self) -> str | re.Pattern[str]: return self.format_name or self.pattern

    def valid(self, value: Any) -> bool:
        return isinstance(value, str) and self.pattern.search(value) is not None

    def error_message(self, value: Any, messages: MessageRenderer = DEFAULT_MESSAGES) -> str:
        if self.format_name: return messages.render("format_named", name=self.format_name)
        return messages.render("format", pattern=self.pattern.pattern)


# ============================================================================
# Enum
# ============================================================================

@dataclass(frozen=True, slots=True)
class Enum(Constraint):
    values: tuple[Any, ...]

    kind: ClassVar[ConstraintKind] = ConstraintKind.ENUM
    error_code: ClassVar[ErrorCode] = ErrorCode.ENUM

    def __post_init__(self):
        values = self.values
        if not isinstance(values, (list, tuple, set, frozenset)): values = (values,)
        if not values: raise SchemaDefinitionError("enum requires at least one allowed value")
        object.__setattr__(self, "values", tuple(values))

    @property
    def option_value(self) -> list[Any]: return list(self.values)

    def valid(self, value: Any) -> bool: return value in self.values

    def error_message(self, value: Any, messages: MessageRenderer = DEFAULT_MESSAGES) -> str:
        return messages.render("enum", values=", ".join(repr(v) for v in self.values))


BUILTIN_CONSTRAINTS: Mapping[str, type[Constraint]] = MappingProxyType({
    "min": Min,
    "max": Max,
    "length": Length,
    "format": Format,
    "enum": Enum,
})
