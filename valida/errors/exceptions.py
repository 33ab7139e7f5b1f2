"""Raised Errors

Two families, never mixed:
- ValidationError: raised only by Schema.parse, wraps a Failure's errors
- SchemaDefinitionError: programmer errors detected while a schema is built
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from .types import Error, ErrorCollection


class ValidationError(Exception):
    """Parse failure for callers that prefer exceptions over Result.

    Carries the original ErrorCollection intact.
    """

    def __init__(self, errors: ErrorCollection | Sequence[Error]):
        self.errors = errors if isinstance(errors, ErrorCollection) else ErrorCollection(list(errors))
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        if not (msgs := self.errors.full_messages): return "Validation failed"
        return f"Validation failed: {'; '.join(msgs)}"

    @property
    def field_errors(self) -> dict[str, list[str]]:
        """Group messages by dotted field path."""
        return self.errors.to_dict()

    def to_dict(self) -> dict[str, Any]:
        return {"error": {"type": "validation_error", "message": str(self),
            "error_count": len(self.errors), "errors": self.errors.to_list()}}


class SchemaDefinitionError(ValueError):
    """Misconfigured schema, field, type or constraint."""


class UnknownTypeError(SchemaDefinitionError, LookupError):
    def __init__(self, name: str, available: Sequence[str] = ()):
        self.name = name
        suffix = f". Available: {', '.join(available)}" if available else ""
        super().__init__(f"Unknown type: {name}{suffix}")


class UnknownConstraintError(SchemaDefinitionError, LookupError):
    def __init__(self, name: str, available: Sequence[str] = ()):
        self.name = name
        suffix = f". Available: {', '.join(available)}" if available else ""
        super().__init__(f"Unknown constraint: {name}{suffix}")
