"""Structural Types

ArrayType and ObjectType recurse into their contents. Every sub-error is
reported at the parent path extended by the item index or field name, so
paths stay exact at any nesting depth.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

from valida.errors import Path, SchemaDefinitionError
from valida.markers import COERCION_FAILED, Coerced, Present

from .base import DEFAULT_SCOPE, EvalScope, Evaluated, Type, TypeKind

if TYPE_CHECKING:
    from valida.registry import TypeRegistry
    from valida.schema import Schema


@dataclass(frozen=True, slots=True)
class ArrayType(Type):
    """List of items, each evaluated through the item type when one is set."""
    of: Type | None = None

    kind: ClassVar[TypeKind] = TypeKind.ARRAY
    name: ClassVar[str] = "array"

    @classmethod
    def from_options(cls, registry: TypeRegistry, of: Any = None) -> ArrayType:
        return cls(of=None if of is None else registry.resolve(of))

    @property
    def type_name(self) -> str:
        return f"array<{self.of.type_name}>" if self.of else "array"

    def coerce(self, raw: Any) -> Coerced:
        return Present(list(raw)) if isinstance(raw, (list, tuple)) else COERCION_FAILED

    def valid(self, value: Any) -> bool:
        if not isinstance(value, list): return False
        return self.of is None or all(self.of.valid(item) for item in value)

    def evaluate(self, raw: Any, path: Path = (), scope: EvalScope = DEFAULT_SCOPE) -> Evaluated:
        coerced = self.coerce(raw)
        if coerced is COERCION_FAILED: return None, [self._coercion_error(raw, path, scope)]
        if self.of is None: return coerced.value, []

        items, errors = [], []
        for index, item in enumerate(coerced.value):
            value, item_errors = self.of.evaluate(item, (*path, index), scope)
            if item_errors:
                errors.extend(item_errors)
            else:
                items.append(value)
        return (None, errors) if errors else (items, [])


@dataclass(frozen=True, slots=True)
class ObjectType(Type):
    """Nested mapping, parsed by a Schema when one is configured."""
    schema: Schema | None = None

    kind: ClassVar[TypeKind] = TypeKind.OBJECT
    name: ClassVar[str] = "object"

    def __post_init__(self):
        if self.schema is not None and not callable(getattr(self.schema, "safe_parse", None)):
            raise SchemaDefinitionError(f"Invalid object schema: {self.schema!r}")

    @classmethod
    def from_options(cls, registry: TypeRegistry, schema: Schema | None = None) -> ObjectType:
        return cls(schema=schema)

    def coerce(self, raw: Any) -> Coerced:
        return Present(raw) if isinstance(raw, Mapping) else COERCION_FAILED

    def valid(self, value: Any) -> bool: return isinstance(value, Mapping)

    def evaluate(self, raw: Any, path: Path = (), scope: EvalScope = DEFAULT_SCOPE) -> Evaluated:
        if not isinstance(raw, Mapping): return None, [self._coercion_error(raw, path, scope)]
        if self.schema is None: return raw, []
        result = self.schema.safe_parse(raw, context=scope.context, path_prefix=path)
        return (dict(result.data), []) if result.is_success() else (None, list(result.errors))
