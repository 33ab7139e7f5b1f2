"""
Unit tests for the type and constraint registries.

Coverage:
- built-ins present in the defaults
- append-only registration and isolation of copies
- reference resolution and construction errors
- custom constraints wired through a schema
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

import pytest

from valida import schema
from valida.constraints import Constraint, ConstraintKind, Min
from valida.errors import ErrorCode, SchemaDefinitionError, UnknownConstraintError, UnknownTypeError
from valida.messages import DEFAULT_MESSAGES, MessageRenderer
from valida.registry import ConstraintRegistry, TypeRegistry, default_constraint_registry, default_type_registry
from valida.types import ArrayType, DecimalType, IntegerType, ObjectType, StringType


@dataclass(frozen=True, slots=True)
class MultipleOf(Constraint):
    step: int

    kind: ClassVar[ConstraintKind] = ConstraintKind.CUSTOM
    error_code: ClassVar[ErrorCode] = ErrorCode.CUSTOM

    @property
    def option_value(self) -> Any: return self.step

    def valid(self, value: Any) -> bool: return value % self.step == 0

    def error_message(self, value: Any, messages: MessageRenderer = DEFAULT_MESSAGES) -> str:
        return f"must be a multiple of {self.step}"


def test_defaults_hold_builtins() -> None:
    assert set(default_type_registry()) >= {
        "string", "integer", "float", "decimal", "boolean", "date", "datetime", "time",
        "array", "object", "union", "discriminated_union", "literal",
    }
    assert set(default_constraint_registry()) == {"min", "max", "length", "format", "enum"}


def test_build_by_name(types: TypeRegistry) -> None:
    assert types.build("integer") == IntegerType()
    assert types.build("array", of="string") == ArrayType(of=StringType())


def test_unknown_names_raise_definition_errors(types: TypeRegistry, constraints: ConstraintRegistry) -> None:
    with pytest.raises(UnknownTypeError, match="Unknown type: money") as excinfo:
        types.build("money")
    assert isinstance(excinfo.value, SchemaDefinitionError)
    assert isinstance(excinfo.value, LookupError)

    with pytest.raises(UnknownConstraintError, match="Unknown constraint: between"):
        constraints.build("between", (1, 2))


def test_invalid_type_options_raise(types: TypeRegistry) -> None:
    with pytest.raises(SchemaDefinitionError, match="Invalid options for type array"):
        types.build("array", items="string")


def test_registration_is_append_only(types: TypeRegistry) -> None:
    types.register("money", lambda **options: DecimalType())

    assert isinstance(types.build("money"), DecimalType)
    with pytest.raises(SchemaDefinitionError, match="already registered"):
        types.register("money", lambda **options: DecimalType())
    with pytest.raises(SchemaDefinitionError):
        types.register("integer", IntegerType)


def test_copies_are_isolated(types: TypeRegistry) -> None:
    types.register("money", lambda **options: DecimalType())

    assert "money" in types
    assert "money" not in default_type_registry()


def test_resolve_accepts_names_instances_classes_and_schemas(types: TypeRegistry) -> None:
    nested = schema(lambda s: s.field("x", "integer"))
    instance = StringType()

    assert types.resolve("integer") == IntegerType()
    assert types.resolve(instance) is instance
    assert types.resolve(IntegerType) == IntegerType()
    assert types.resolve(nested) == ObjectType(schema=nested)
    with pytest.raises(SchemaDefinitionError, match="Invalid type reference"):
        types.resolve(42)


def test_constraint_registry_rejects_non_constraints(constraints: ConstraintRegistry) -> None:
    with pytest.raises(SchemaDefinitionError):
        constraints.register("positive", int)  # type: ignore[arg-type]
    with pytest.raises(SchemaDefinitionError):
        constraints.register("min", Min)


def test_custom_constraint_through_schema(constraints: ConstraintRegistry) -> None:
    constraints.register("multiple_of", MultipleOf)

    @schema(constraints=constraints)
    def order(s):
        s.field("qty", "integer", multiple_of=5)

    assert order.safe_parse({"qty": "10"}).data == {"qty": 10}
    errors = order.safe_parse({"qty": 12}).errors
    assert [(e.path, e.code, e.message) for e in errors] == [(("qty",), ErrorCode.CUSTOM, "must be a multiple of 5")]
    assert order.field("qty").constraint_values() == {"MultipleOf": 5}


def test_custom_constraint_lookup_by_class(constraints: ConstraintRegistry) -> None:
    constraints.register("multiple_of", MultipleOf)
    qty = schema(lambda s: s.field("qty", "integer", min=1, multiple_of=5), constraints=constraints).field("qty")

    assert qty.constraint(MultipleOf).step == 5
    assert qty.has_constraint(MultipleOf)
    assert isinstance(qty.constraint(Min), Min)
    assert qty.constraint("multiple_of") is None
    assert not qty.has_constraint("multiple_of")


def test_option_unknown_to_registry_is_rejected() -> None:
    with pytest.raises(SchemaDefinitionError, match="Unknown option for field qty: multiple_of"):
        schema(lambda s: s.field("qty", "integer", multiple_of=5))
