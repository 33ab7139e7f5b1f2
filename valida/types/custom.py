"""User-defined Types

CustomType wraps plain callables so applications can add a named type
without subclassing:

    registry.define_type("email_address",
        coerce=lambda v: v.strip().lower(),
        validate=lambda v: "@" in v,
        message="must be a valid email address")

A coerce callable that raises TypeError, ValueError, ArithmeticError or
AttributeError counts as a failed coercion.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Union

from valida.markers import COERCION_FAILED, Coerced, Present
from valida.messages import MessageRenderer

from .base import Type, TypeKind

CustomMessage = Union[str, Callable[[Any], str], None]


@dataclass(frozen=True, slots=True)
class CustomType(Type):
    label: str
    coercer: Callable[[Any], Any] | None = None
    validator: Callable[[Any], bool] | None = None
    message: CustomMessage = None

    kind: ClassVar[TypeKind] = TypeKind.CUSTOM
    name: ClassVar[str] = "custom"

    @property
    def type_name(self) -> str: return self.label

    def coerce(self, raw: Any) -> Coerced:
        if self.coercer is None: return Present(raw)
        try:
            return Present(self.coercer(raw))
        except (TypeError, ValueError, ArithmeticError, AttributeError):
            return COERCION_FAILED

    def valid(self, value: Any) -> bool:
        return True if self.validator is None else bool(self.validator(value))

    def error_message(self, value: Any, messages: MessageRenderer) -> str | None:
        return self.message(value) if callable(self.message) else self.message
