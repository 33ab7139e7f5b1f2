"""Validation Error and Result Types

Implements the engine's outcome model: path-addressed Error values, an
immutable ErrorCollection, and a Success/Failure Result with short-circuiting
combinator semantics. Everything here is a frozen value type; operations
that "modify" return new instances.

Usage:
    match schema.safe_parse(payload):
        case Success(data):
            save(data)
        case Failure(errors):
            render(errors.to_dict())
"""
from __future__ import annotations

import copy
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, TypeVar, Union, final, overload

from valida.serializer import dump as _dump

T = TypeVar("T")
U = TypeVar("U")

PathSegment = Union[str, int]
Path = tuple[PathSegment, ...]


class ErrorCode(str, Enum):
    """Symbolic error kinds produced during parsing."""
    REQUIRED = "required"
    TYPE_ERROR = "type_error"
    MIN = "min"
    MAX = "max"
    LENGTH = "length"
    FORMAT = "format"
    ENUM = "enum"
    REFINEMENT = "refinement"
    DISCRIMINATOR_MISSING = "discriminator_missing"
    INVALID_DISCRIMINATOR = "invalid_discriminator"
    UNION_TYPE_ERROR = "union_type_error"
    CUSTOM = "custom"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Error:
    """A single validation failure.

    - path: key/index segments relative to the top-level parse call
    - message: rendered, human-readable text
    - code: symbolic kind (see ErrorCode)
    """
    path: Path
    message: str
    code: ErrorCode

    def __post_init__(self):
        if not isinstance(self.path, tuple):
            object.__setattr__(self, "path", tuple(self.path))

    @property
    def full_path(self) -> str:
        """Dotted rendering of the path ("user.addresses.0.zip")."""
        return ".".join(str(segment) for segment in self.path)

    def with_message(self, message: str) -> Error:
        return Error(path=self.path, message=message, code=self.code)

    def with_prefix(self, prefix: Path) -> Error:
        return Error(path=(*prefix, *self.path), message=self.message, code=self.code)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for API responses."""
        return {"path": [str(p) for p in self.path], "message": self.message, "code": self.code.value}

    def __str__(self) -> str:
        return f"{self.full_path}: {self.message}" if self.path else self.message


@final
class ErrorCollection(Sequence[Error]):
    """Immutable, ordered collection of Errors with lookup projections."""

    __slots__ = ("_errors",)

    def __init__(self, errors: Sequence[Error] | None = None):
        self._errors: tuple[Error, ...] = tuple(errors or ())

    @overload
    def __getitem__(self, index: int) -> Error: ...
    @overload
    def __getitem__(self, index: slice) -> ErrorCollection: ...

    def __getitem__(self, index):
        if isinstance(index, slice): return ErrorCollection(self._errors[index])
        return self._errors[index]

    def __len__(self) -> int: return len(self._errors)

    def __iter__(self) -> Iterator[Error]: return iter(self._errors)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ErrorCollection): return self._errors == other._errors
        if isinstance(other, (list, tuple)): return list(self._errors) == list(other)
        return NotImplemented

    def __hash__(self) -> int: return hash(self._errors)

    def __repr__(self) -> str: return f"ErrorCollection({list(self._errors)!r})"

    @property
    def first(self) -> Error | None: return self._errors[0] if self._errors else None

    @property
    def codes(self) -> list[ErrorCode]: return [e.code for e in self._errors]

    @property
    def messages(self) -> list[str]: return [e.message for e in self._errors]

    @property
    def full_messages(self) -> list[str]: return [str(e) for e in self._errors]

    def add(self, error: Error) -> ErrorCollection:
        return ErrorCollection((*self._errors, error))

    def merge(self, other: Sequence[Error]) -> ErrorCollection:
        return ErrorCollection((*self._errors, *other))

    def for_path(self, *prefix: PathSegment) -> ErrorCollection:
        """Errors whose path starts with the given segments."""
        size = len(prefix)
        return ErrorCollection([e for e in self._errors if e.path[:size] == prefix])

    def group_by_path(self) -> dict[Path, list[Error]]:
        result: dict[Path, list[Error]] = {}
        for error in self._errors: result.setdefault(error.path, []).append(error)
        return result

    def to_dict(self) -> dict[str, list[str]]:
        """Messages grouped by dotted path, for attribute-style error bags."""
        result: dict[str, list[str]] = {}
        for error in self._errors: result.setdefault(error.full_path, []).append(error.message)
        return result

    def to_list(self) -> list[dict[str, Any]]:
        return [e.to_dict() for e in self._errors]


EMPTY_ERRORS = ErrorCollection()


def _freeze(data: Mapping[str, Any]) -> Mapping[str, Any]:
    return data if isinstance(data, MappingProxyType) else MappingProxyType(dict(data))


@final
@dataclass(frozen=True, slots=True)
class Success:
    """Success variant of Result.

    Wraps the coerced output. The top-level mapping is exposed read-only;
    nested objects are plain dicts. Use dump() or to_json() for JSON output.
    """
    data: Any

    def __post_init__(self):
        if isinstance(self.data, Mapping):
            object.__setattr__(self, "data", _freeze(self.data))

    def __deepcopy__(self, memo: dict[int, Any]) -> Success:
        data = dict(self.data) if isinstance(self.data, MappingProxyType) else self.data
        return Success(copy.deepcopy(data, memo))

    @property
    def errors(self) -> ErrorCollection: return EMPTY_ERRORS

    def is_success(self) -> bool: return True

    def is_failure(self) -> bool: return False

    def value_or(self, default: Any = None) -> Any: return self.data

    def unwrap(self) -> Any: return self.data

    def map(self, f: Callable[[Any], Any]) -> Result:
        """Transform the success value."""
        return Success(f(self.data))

    def flat_map(self, f: Callable[[Any], Result]) -> Result:
        """Chain operations that may fail."""
        return f(self.data)

    def match(self, success: Callable[[Any], U], failure: Callable[[ErrorCollection], U]) -> U:
        return success(self.data)

    def dump(self, format: str = "dict") -> Any:
        """Serialize data to JSON-safe primitives (or a JSON string)."""
        return _dump(self.data, format=format)

    def to_json(self) -> str: return _dump(self.data, format="json")


@final
@dataclass(frozen=True, slots=True)
class Failure:
    """Failure variant of Result.

    Carries every error collected during one evaluation. map/flat_map are
    no-ops so chained calls short-circuit without exceptions.
    """
    errors: ErrorCollection = field(default_factory=ErrorCollection)

    def __post_init__(self):
        if not isinstance(self.errors, ErrorCollection):
            object.__setattr__(self, "errors", ErrorCollection(list(self.errors)))

    @property
    def data(self) -> None: return None

    def is_success(self) -> bool: return False

    def is_failure(self) -> bool: return True

    def value_or(self, default: Any = None) -> Any:
        return default(self.errors) if callable(default) else default

    def unwrap(self):
        """Raises because Failure has no data to unwrap."""
        from .exceptions import ValidationError
        raise ValidationError(self.errors)

    def map(self, f: Callable[[Any], Any]) -> Result:
        """No-op for Failure variant."""
        return self

    def flat_map(self, f: Callable[[Any], Result]) -> Result:
        """No-op for Failure variant."""
        return self

    def match(self, success: Callable[[Any], U], failure: Callable[[ErrorCollection], U]) -> U:
        return failure(self.errors)

    def dump(self, format: str = "dict") -> Any:
        return _dump({"errors": self.errors.to_list()}, format=format)

    def to_json(self) -> str: return self.dump(format="json")


Result = Union[Success, Failure]


def success(data: Any) -> Success:
    return Success(data)


def failure(errors: Sequence[Error]) -> Failure:
    return Failure(ErrorCollection(errors))
