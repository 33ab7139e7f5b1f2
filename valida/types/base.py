"""Type Variant Base

Every Type is a frozen dataclass tagged with a TypeKind. A Type converts
raw input (coerce), checks the converted value (valid), and reports
path-addressed errors (evaluate). Structural types override evaluate to
recurse and prefix sub-error paths.

Features:
- Explicit Present / COERCION_FAILED outcome from coerce
- Message rendering through the scope's MessageRenderer
- Construction from registry options via from_options
"""
from __future__ import annotations

from abc import ABC
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar

from valida.context import Context
from valida.errors import Error, Path, coercion_error, type_error
from valida.markers import COERCION_FAILED, Coerced, Present
from valida.messages import DEFAULT_MESSAGES, MessageRenderer

if TYPE_CHECKING:
    from valida.registry import TypeRegistry


class TypeKind(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    DATE = "date"
    DATETIME = "datetime"
    TIME = "time"
    ARRAY = "array"
    OBJECT = "object"
    UNION = "union"
    DISCRIMINATED_UNION = "discriminated_union"
    LITERAL = "literal"
    CUSTOM = "custom"


@dataclass(frozen=True, slots=True)
class EvalScope:
    """Per-call state threaded through evaluate: caller context and message catalog."""
    context: Context = field(default_factory=Context.empty)
    messages: MessageRenderer = DEFAULT_MESSAGES


DEFAULT_SCOPE = EvalScope()

Evaluated = tuple[Any, list[Error]]


@dataclass(frozen=True, slots=True)
class Type(ABC):
    """Base class for all types.

    Subclasses override coerce/valid (scalars) or evaluate (structural).
    The default coerce is the identity and the default valid accepts anything.
    """
    kind: ClassVar[TypeKind]
    name: ClassVar[str]

    @classmethod
    def from_options(cls, registry: TypeRegistry, **options: Any) -> Type:
        """Build an instance from field options; subclasses resolve nested references."""
        return cls(**options)

    @property
    def type_name(self) -> str: return self.name

    def coerce(self, raw: Any) -> Coerced: return Present(raw)

    def valid(self, value: Any) -> bool: return True

    def error_message(self, value: Any, messages: MessageRenderer) -> str | None:
        """Override to replace the catalog message for both coercion and type errors."""
        return None

    def evaluate(self, raw: Any, path: Path = (), scope: EvalScope = DEFAULT_SCOPE) -> Evaluated:
        coerced = self.coerce(raw)
        if coerced is COERCION_FAILED: return None, [self._coercion_error(raw, path, scope)]
        if not self.valid(coerced.value): return None, [self._type_error(coerced.value, path, scope)]
        return coerced.value, []

    def check(self, value: Any, path: Path = (), scope: EvalScope = DEFAULT_SCOPE) -> Evaluated:
        """Validate without coercing (fields declared with coerce=False)."""
        if self.valid(value): return value, []
        return None, [self._type_error(value, path, scope)]

    def _coercion_error(self, raw: Any, path: Path, scope: EvalScope) -> Error:
        error = coercion_error(path, raw, self.type_name, scope.messages)
        custom = self.error_message(raw, scope.messages)
        return error.with_message(custom) if custom else error

    def _type_error(self, value: Any, path: Path, scope: EvalScope) -> Error:
        error = type_error(path, self.type_name, scope.messages)
        custom = self.error_message(value, scope.messages)
        return error.with_message(custom) if custom else error
