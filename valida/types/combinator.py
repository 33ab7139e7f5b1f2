"""Combinator Types

- UnionType: first member that evaluates cleanly wins, in declaration order
- DiscriminatedUnionType: a sibling key selects the schema to apply
- LiteralType: exact match against a fixed set of values, no coercion
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar

from valida.errors import (
    Path,
    SchemaDefinitionError,
    discriminator_missing,
    invalid_discriminator,
    object_expected,
    union_error,
)
from valida.keys import canonical_key, normalize_symbol
from valida.markers import COERCION_FAILED, Coerced, Present
from valida.messages import MessageRenderer

from .base import DEFAULT_SCOPE, EvalScope, Evaluated, Type, TypeKind

if TYPE_CHECKING:
    from valida.registry import TypeRegistry
    from valida.schema import Schema


@dataclass(frozen=True, slots=True)
class UnionType(Type):
    types: tuple[Type, ...]

    kind: ClassVar[TypeKind] = TypeKind.UNION
    name: ClassVar[str] = "union"

    @classmethod
    def from_options(cls, registry: TypeRegistry, types: Any = ()) -> UnionType:
        if not types: raise SchemaDefinitionError("union requires at least one member type")
        return cls(types=tuple(registry.resolve(member) for member in types))

    @property
    def member_names(self) -> list[str]: return [t.type_name for t in self.types]

    @property
    def type_name(self) -> str: return f"union<{' | '.join(self.member_names)}>"

    def coerce(self, raw: Any) -> Coerced:
        for member in self.types:
            if (coerced := member.coerce(raw)) is not COERCION_FAILED: return coerced
        return COERCION_FAILED

    def valid(self, value: Any) -> bool: return any(t.valid(value) for t in self.types)

    def evaluate(self, raw: Any, path: Path = (), scope: EvalScope = DEFAULT_SCOPE) -> Evaluated:
        for member in self.types:
            value, errors = member.evaluate(raw, path, scope)
            if not errors: return value, []
        return None, [union_error(path, self.member_names, scope.messages)]


def _freeze_mapping(mapping: Mapping[Any, Any]) -> Mapping[Any, Any]:
    return MappingProxyType({normalize_symbol(key): schema for key, schema in mapping.items()})


@dataclass(frozen=True, slots=True)
class DiscriminatedUnionType(Type):
    """Selects a schema by the value of one key of the input mapping.

    Enum members, in the mapping keys and in the input, are normalized to
    their string form before lookup.
    """
    discriminator: str
    mapping: Mapping[Any, Schema]

    kind: ClassVar[TypeKind] = TypeKind.DISCRIMINATED_UNION
    name: ClassVar[str] = "discriminated_union"

    def __post_init__(self):
        object.__setattr__(self, "discriminator", canonical_key(self.discriminator))
        object.__setattr__(self, "mapping", _freeze_mapping(self.mapping))
        for key, schema in self.mapping.items():
            if not callable(getattr(schema, "safe_parse", None)):
                raise SchemaDefinitionError(f"Invalid schema for discriminator value {key!r}: {schema!r}")

    @classmethod
    def from_options(cls, registry: TypeRegistry, discriminator: Any = None,
                     mapping: Mapping[Any, Schema] | None = None) -> DiscriminatedUnionType:
        if discriminator is None or not mapping:
            raise SchemaDefinitionError("discriminated_union requires discriminator and a non-empty mapping")
        return cls(discriminator=discriminator, mapping=mapping)

    @property
    def type_name(self) -> str:
        values = " | ".join(repr(key) for key in self.mapping)
        return f"discriminated_union<{self.discriminator}: {values}>"

    def valid(self, value: Any) -> bool: return isinstance(value, Mapping)

    def schema_for(self, value: Any) -> Schema | None:
        try:
            return self.mapping.get(normalize_symbol(value))
        except TypeError:  # unhashable discriminator value
            return None

    def evaluate(self, raw: Any, path: Path = (), scope: EvalScope = DEFAULT_SCOPE) -> Evaluated:
        if not isinstance(raw, Mapping): return None, [object_expected(path, scope.messages)]

        disc_path = (*path, self.discriminator)
        value = next((v for k, v in raw.items() if canonical_key(k) == self.discriminator), None)
        if value is None: return None, [discriminator_missing(disc_path, scope.messages)]
        if (schema := self.schema_for(value)) is None:
            return None, [invalid_discriminator(disc_path, self.mapping.keys(), scope.messages)]

        result = schema.safe_parse(raw, context=scope.context, path_prefix=path)
        return (dict(result.data), []) if result.is_success() else (None, list(result.errors))


@dataclass(frozen=True, slots=True)
class LiteralType(Type):
    """Matches only the listed values; 1 never matches "1" and True never matches 1."""
    values: tuple[Any, ...]

    kind: ClassVar[TypeKind] = TypeKind.LITERAL
    name: ClassVar[str] = "literal"

    def __post_init__(self):
        values = self.values
        if not isinstance(values, (list, tuple, set, frozenset)): values = (values,)
        if not values: raise SchemaDefinitionError("literal requires at least one value")
        object.__setattr__(self, "values", tuple(values))

    @classmethod
    def from_options(cls, registry: TypeRegistry, values: Any = ()) -> LiteralType:
        return cls(values=values)

    @property
    def type_name(self) -> str: return " | ".join(repr(v) for v in self.values)

    def valid(self, value: Any) -> bool:
        return any(type(candidate) is type(value) and candidate == value for candidate in self.values)

    def error_message(self, value: Any, messages: MessageRenderer) -> str | None:
        return messages.render("literal", expected=self.type_name, actual=repr(value))
