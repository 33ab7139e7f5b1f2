"""Validation Context

Immutable side-channel (current user, request metadata, locale) handed to
conditional predicates, refinements, preprocess/transform callbacks and
schema validators. It is never part of the validated data.
"""
from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

from valida.keys import canonical_key as _key


class Context(Mapping[str, Any]):
    """Read-only mapping of context values.

    Missing keys read as None through get(); item access raises KeyError
    like any other mapping.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[Any, Any] | None = None, /, **values: Any):
        merged = {_key(k): v for k, v in (data or {}).items()}
        merged.update(values)
        self._data: Mapping[str, Any] = MappingProxyType(merged)

    def __getitem__(self, key: Any) -> Any: return self._data[_key(key)]

    def __iter__(self) -> Iterator[str]: return iter(self._data)

    def __len__(self) -> int: return len(self._data)

    def __contains__(self, key: object) -> bool: return _key(key) in self._data

    def __repr__(self) -> str: return f"Context({dict(self._data)!r})"

    def to_dict(self) -> dict[str, Any]: return dict(self._data)

    @property
    def is_empty(self) -> bool: return not self._data

    @classmethod
    def empty(cls) -> Context: return EMPTY_CONTEXT

    @classmethod
    def of(cls, value: Context | Mapping[Any, Any] | None) -> Context:
        """Coerce a caller-supplied context argument into a Context."""
        if value is None: return EMPTY_CONTEXT
        if isinstance(value, Context): return value
        if isinstance(value, Mapping): return cls(value)
        raise TypeError(f"context must be a mapping, got {type(value).__name__}")


EMPTY_CONTEXT = Context()
