"""Type and Constraint Registries

Explicit, injectable name-to-implementation tables. The process-wide
defaults are populated with the built-ins at import; applications that need
extra types or constraints either register on a default (append-only) or
derive their own with copy() and pass it to valida.schema(types=...).

Features:
- Append-only registration guarded by a lock
- Reference resolution for names, Type instances/classes and Schemas
- Unknown names raise SchemaDefinitionError subclasses at build time
"""
from __future__ import annotations

import threading
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any, Callable, Union

from valida.constraints import BUILTIN_CONSTRAINTS, Constraint
from valida.errors import SchemaDefinitionError, UnknownConstraintError, UnknownTypeError
from valida.keys import normalize_symbol
from valida.logging import registry_logger
from valida.types import BUILTIN_TYPES, CustomType, ObjectType, Type
from valida.types.custom import CustomMessage

logger = registry_logger()

TypeFactory = Callable[..., Type]
TypeEntry = Union[type[Type], TypeFactory]


def _registry_name(name: Any) -> str:
    name = normalize_symbol(name)
    if not isinstance(name, str) or not name:
        raise SchemaDefinitionError(f"Registry names must be non-empty strings, got {name!r}")
    return name


class TypeRegistry:
    """Name-to-Type table used when a field names its type as a string."""

    def __init__(self, entries: Mapping[str, TypeEntry] | None = None):
        self._entries: dict[str, TypeEntry] = dict(entries or {})
        self._lock = threading.Lock()

    def __contains__(self, name: object) -> bool: return normalize_symbol(name) in self._entries

    def __iter__(self) -> Iterator[str]: return iter(self._entries)

    def __len__(self) -> int: return len(self._entries)

    @property
    def names(self) -> list[str]: return list(self._entries)

    @property
    def entries(self) -> Mapping[str, TypeEntry]: return MappingProxyType(self._entries)

    def register(self, name: Any, entry: TypeEntry) -> TypeEntry:
        """Register a Type subclass (built via from_options) or a factory returning a Type."""
        name = _registry_name(name)
        with self._lock:
            if name in self._entries: raise SchemaDefinitionError(f"Type already registered: {name}")
            self._entries[name] = entry
        logger.debug("type_registered", type_name=name, entry=getattr(entry, "__name__", repr(entry)))
        return entry

    def define_type(self, name: Any, *, coerce: Callable[[Any], Any] | None = None,
                    validate: Callable[[Any], bool] | None = None, message: CustomMessage = None) -> CustomType:
        """Register a CustomType built from plain callables and return it."""
        custom = CustomType(label=_registry_name(name), coercer=coerce, validator=validate, message=message)
        self.register(name, lambda **options: custom)
        return custom

    def lookup(self, name: Any) -> TypeEntry | None: return self._entries.get(normalize_symbol(name))

    def build(self, name: Any, **options: Any) -> Type:
        """Instantiate a registered type with field options (of=, schema=, types=, ...)."""
        entry = self.lookup(name)
        if entry is None: raise UnknownTypeError(str(normalize_symbol(name)), self.names)
        try:
            if isinstance(entry, type) and issubclass(entry, Type): return entry.from_options(self, **options)
            return entry(**options)
        except TypeError as exc:
            raise SchemaDefinitionError(f"Invalid options for type {name}: {exc}") from exc

    def resolve(self, ref: Any) -> Type:
        """Turn a type reference into a Type instance.

        Accepts a registered name (str or Enum member), a Type instance, a
        Type subclass, or a Schema (wrapped in ObjectType).
        """
        from valida.schema import Schema

        if isinstance(ref, Type): return ref
        if isinstance(ref, type) and issubclass(ref, Type): return ref.from_options(self)
        if isinstance(ref, Schema): return ObjectType(schema=ref)
        if isinstance(normalize_symbol(ref), str): return self.build(ref)
        raise SchemaDefinitionError(f"Invalid type reference: {ref!r}")

    def copy(self) -> TypeRegistry:
        with self._lock:
            return TypeRegistry(self._entries)


class ConstraintRegistry:
    """Option-name-to-Constraint table consulted for every field option."""

    def __init__(self, entries: Mapping[str, type[Constraint]] | None = None):
        self._entries: dict[str, type[Constraint]] = dict(entries or {})
        self._lock = threading.Lock()

    def __contains__(self, name: object) -> bool: return normalize_symbol(name) in self._entries

    def __iter__(self) -> Iterator[str]: return iter(self._entries)

    def __len__(self) -> int: return len(self._entries)

    @property
    def names(self) -> list[str]: return list(self._entries)

    def register(self, name: Any, constraint: type[Constraint]) -> type[Constraint]:
        name = _registry_name(name)
        if not (isinstance(constraint, type) and issubclass(constraint, Constraint)):
            raise SchemaDefinitionError(f"Constraint must be a Constraint subclass, got {constraint!r}")
        with self._lock:
            if name in self._entries: raise SchemaDefinitionError(f"Constraint already registered: {name}")
            self._entries[name] = constraint
        logger.debug("constraint_registered", constraint_name=name, entry=constraint.__name__)
        return constraint

    def lookup(self, name: Any) -> type[Constraint] | None: return self._entries.get(normalize_symbol(name))

    def build(self, name: Any, value: Any) -> Constraint:
        constraint = self.lookup(name)
        if constraint is None: raise UnknownConstraintError(str(normalize_symbol(name)), self.names)
        return constraint.from_option(value)

    def copy(self) -> ConstraintRegistry:
        with self._lock:
            return ConstraintRegistry(self._entries)


_DEFAULT_TYPES = TypeRegistry({t.name: t for t in BUILTIN_TYPES})
_DEFAULT_CONSTRAINTS = ConstraintRegistry(BUILTIN_CONSTRAINTS)


def default_type_registry() -> TypeRegistry:
    return _DEFAULT_TYPES


def default_constraint_registry() -> ConstraintRegistry:
    return _DEFAULT_CONSTRAINTS
