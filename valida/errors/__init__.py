"""Validation Outcome Model

Parse-time failures are data, not exceptions:
- Error: one failure with path, message and code
- ErrorCollection: immutable ordered errors with grouping helpers
- Success / Failure: the Result of a safe_parse call

Exceptions exist only for parse() callers (ValidationError) and for schema
misconfiguration detected at build time (SchemaDefinitionError).
"""
from .types import (
    ErrorCode,
    Error,
    ErrorCollection,
    EMPTY_ERRORS,
    Path,
    PathSegment,
    Result,
    Success,
    Failure,
    success,
    failure,
)

from .exceptions import (
    ValidationError,
    SchemaDefinitionError,
    UnknownTypeError,
    UnknownConstraintError,
)

from .builders import (
    required_error,
    coercion_error,
    type_error,
    object_expected,
    union_error,
    discriminator_missing,
    invalid_discriminator,
    refinement_error,
    custom_error,
)

__all__ = [
    # Core types
    "ErrorCode",
    "Error",
    "ErrorCollection",
    "EMPTY_ERRORS",
    "Path",
    "PathSegment",
    "Result",
    "Success",
    "Failure",
    "success",
    "failure",
    # Exceptions
    "ValidationError",
    "SchemaDefinitionError",
    "UnknownTypeError",
    "UnknownConstraintError",
    # Builders
    "required_error",
    "coercion_error",
    "type_error",
    "object_expected",
    "union_error",
    "discriminator_missing",
    "invalid_discriminator",
    "refinement_error",
    "custom_error",
]
