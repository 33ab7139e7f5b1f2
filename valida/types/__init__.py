"""Type System

Tagged Type variants that coerce raw input and report path-addressed errors:
- Scalars: string, integer, float, decimal, boolean
- Temporal: date, datetime, time
- Structural: array, object
- Combinators: union, discriminated_union, literal
- CustomType for callables registered at runtime

Types are resolved by name through valida.registry.TypeRegistry.
"""
from .base import (
    TypeKind,
    Type,
    EvalScope,
    DEFAULT_SCOPE,
    Evaluated,
)

from .scalar import (
    StringType,
    IntegerType,
    FloatType,
    DecimalType,
    BooleanType,
    TRUTHY_VALUES,
    FALSY_VALUES,
)

from .temporal import (
    DateType,
    DateTimeType,
    TimeType,
)

from .structural import (
    ArrayType,
    ObjectType,
)

from .combinator import (
    UnionType,
    DiscriminatedUnionType,
    LiteralType,
)

from .custom import CustomType

BUILTIN_TYPES: tuple[type[Type], ...] = (
    StringType,
    IntegerType,
    FloatType,
    DecimalType,
    BooleanType,
    DateType,
    DateTimeType,
    TimeType,
    ArrayType,
    ObjectType,
    UnionType,
    DiscriminatedUnionType,
    LiteralType,
)

__all__ = [
    # Base
    "TypeKind",
    "Type",
    "EvalScope",
    "DEFAULT_SCOPE",
    "Evaluated",
    # Scalars
    "StringType",
    "IntegerType",
    "FloatType",
    "DecimalType",
    "BooleanType",
    "TRUTHY_VALUES",
    "FALSY_VALUES",
    # Temporal
    "DateType",
    "DateTimeType",
    "TimeType",
    # Structural
    "ArrayType",
    "ObjectType",
    # Combinators
    "UnionType",
    "DiscriminatedUnionType",
    "LiteralType",
    # Extension
    "CustomType",
    "BUILTIN_TYPES",
]
