"""valida - Runtime Schema Validation

Declarative schemas that turn untyped input (form posts, JSON bodies, query
strings) into coerced, typed data or a path-addressed error collection.

Features:
- Coercing types: string, integer, float, decimal, boolean, date, datetime,
  time, array, object, union, discriminated_union, literal
- Constraints: min, max, length, format, enum
- Optional/nullable/default handling that never confuses missing with null
- Conditional fields, refinements, preprocess/transform hooks and context
- Schema-level validators and composition (extend, pick, omit, merge, partial)
- Injectable type/constraint registries and message catalogs

Usage:
    import valida

    @valida.schema
    def signup(s):
        s.field("email", "string", format="email")
        s.field("age", "integer", min=13)

    result = signup.safe_parse({"email": "a@b.io", "age": "21"})
"""
__version__ = "0.1.0"

from typing import Any

from valida.context import Context, EMPTY_CONTEXT
from valida.errors import (
    ErrorCode,
    Error,
    ErrorCollection,
    Result,
    Success,
    Failure,
    ValidationError,
    SchemaDefinitionError,
    UnknownTypeError,
    UnknownConstraintError,
)
from valida.markers import ABSENT, COERCION_FAILED, Present
from valida.messages import DEFAULT_MESSAGES, MessageCatalog, MessageRenderer
from valida.constraints import Constraint, ConstraintKind
from valida.types import Type, TypeKind, CustomType
from valida.registry import (
    TypeRegistry,
    ConstraintRegistry,
    default_type_registry,
    default_constraint_registry,
)
from valida.field import Field
from valida.schema import Schema, SchemaBuilder, SchemaOptions, ValidatorScope, schema
from valida.serializer import dump, serialize_value


def context(data: Any = None, /, **values: Any) -> Context:
    """Build a validation Context: valida.context(current_user=user)."""
    return Context(data, **values)


def define_type(name: Any, **callables: Any) -> CustomType:
    """Register a CustomType on the default type registry."""
    return default_type_registry().define_type(name, **callables)


__all__ = [
    "__version__",
    # Entry points
    "schema",
    "context",
    "define_type",
    "dump",
    "serialize_value",
    # Schema model
    "Schema",
    "SchemaBuilder",
    "SchemaOptions",
    "ValidatorScope",
    "Field",
    "Type",
    "TypeKind",
    "CustomType",
    "Constraint",
    "ConstraintKind",
    # Registries
    "TypeRegistry",
    "ConstraintRegistry",
    "default_type_registry",
    "default_constraint_registry",
    # Results and errors
    "Result",
    "Success",
    "Failure",
    "Error",
    "ErrorCode",
    "ErrorCollection",
    "ValidationError",
    "SchemaDefinitionError",
    "UnknownTypeError",
    "UnknownConstraintError",
    # Context, messages, markers
    "Context",
    "EMPTY_CONTEXT",
    "MessageCatalog",
    "MessageRenderer",
    "DEFAULT_MESSAGES",
    "Present",
    "ABSENT",
    "COERCION_FAILED",
]
