"""Field Definition and Evaluation

A Field binds a name to a Type, its Constraints and refinements, and the
options that decide how missing, null and conditional values are handled.
build_field() turns the keyword options of the builder DSL into a Field,
rejecting anything it does not recognize.

Evaluation runs a fixed sequence and stops at the first step that produced
errors:

1. conditional gate (when/unless)
2. missing value: default, omission, or a required error
3. preprocess
4. null handling
5. coercion (or a bare type check when coerce=False)
6. constraints, all of them
7. refinements, all of them
8. transform
"""
from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any, Callable, Union

from valida.constraints import Constraint, ConstraintKind
from valida.context import Context
from valida.errors import Error, Path, SchemaDefinitionError, refinement_error, required_error
from valida.keys import canonical_key, normalize_symbol
from valida.markers import ABSENT, Fetched, Present
from valida.messages import MessageRenderer
from valida.registry import ConstraintRegistry, TypeRegistry
from valida.types import DEFAULT_SCOPE, EvalScope, Type

Message = Union[str, Callable[[Any], str]]

# Options consumed by the field itself; everything else must name a constraint
FIELD_OPTIONS = frozenset({
    "optional", "nullable", "default", "default_factory",
    "of", "schema", "union", "literal", "discriminator", "mapping",
    "coerce", "message",
    "preprocess", "preprocess_ctx", "transform", "transform_ctx",
    "when", "when_ctx", "unless", "unless_ctx",
    "refine", "refine_ctx",
})


@dataclass(frozen=True, slots=True)
class Callback:
    """preprocess/transform hook: fn(value) or, with_context, fn(value, context)."""
    fn: Callable[..., Any]
    with_context: bool = False

    def __call__(self, value: Any, context: Context) -> Any:
        return self.fn(value, context) if self.with_context else self.fn(value)


@dataclass(frozen=True, slots=True)
class Condition:
    """when/unless predicate over the sibling input.

    A str test means "that sibling field is truthy".
    """
    test: Union[str, Callable[..., Any]]
    with_context: bool = False

    def holds(self, data: Mapping[str, Any], context: Context) -> bool:
        if isinstance(self.test, str): return bool(data.get(self.test))
        return bool(self.test(data, context) if self.with_context else self.test(data))


@dataclass(frozen=True, slots=True)
class Refinement:
    check: Callable[..., Any]
    message: Message | None = None
    with_context: bool = False

    def passes(self, value: Any, context: Context) -> bool:
        return bool(self.check(value, context) if self.with_context else self.check(value))

    def render(self, value: Any, messages: MessageRenderer) -> str:
        if self.message is None: return messages.render("refinement")
        return self.message(value) if callable(self.message) else self.message


@dataclass(frozen=True, slots=True)
class Field:
    name: str
    type: Type
    constraints: tuple[Constraint, ...] = ()
    refinements: tuple[Refinement, ...] = ()
    optional: bool = False
    nullable: bool = False
    default: Any = ABSENT
    default_factory: Callable[[], Any] | None = None
    preprocess: Callback | None = None
    transform: Callback | None = None
    when: Condition | None = None
    unless: Condition | None = None
    message: str | None = None
    coerce: bool = True

    @property
    def required(self) -> bool: return not self.optional

    @property
    def has_default(self) -> bool: return self.default is not ABSENT or self.default_factory is not None

    @property
    def conditional(self) -> bool: return self.when is not None or self.unless is not None

    def default_value(self) -> Any:
        """A fresh default: the factory's result, or a deep copy of the literal default."""
        if self.default_factory is not None: return self.default_factory()
        return copy.deepcopy(self.default)

    def constraint(self, kind: ConstraintKind | str | type[Constraint]) -> Constraint | None:
        """The first constraint of that kind, or of that class for custom constraints."""
        if isinstance(kind, type) and issubclass(kind, Constraint):
            return next((c for c in self.constraints if isinstance(c, kind)), None)
        try:
            kind = ConstraintKind(normalize_symbol(kind))
        except ValueError:
            return None
        return next((c for c in self.constraints if c.kind is kind), None)

    def has_constraint(self, kind: ConstraintKind | str | type[Constraint]) -> bool:
        return self.constraint(kind) is not None

    def constraint_values(self) -> dict[str, Any]:
        """Configured option per constraint; custom constraints are keyed by class name."""
        return {(type(c).__name__ if c.kind is ConstraintKind.CUSTOM else c.kind.value): c.option_value
            for c in self.constraints}

    def as_optional(self) -> Field: return replace(self, optional=True)

    def should_validate(self, data: Mapping[str, Any], context: Context) -> bool:
        if self.when is not None and not self.when.holds(data, context): return False
        if self.unless is not None and self.unless.holds(data, context): return False
        return True

    def evaluate(self, raw: Fetched, data: Mapping[str, Any] | None = None, path: Path = (),
                 scope: EvalScope = DEFAULT_SCOPE) -> tuple[Fetched, list[Error]]:
        """Run the pipeline for one fetched input value.

        Returns (Present(value), []) on success, (ABSENT, []) when the key
        is to be omitted, or (ABSENT, errors).
        """
        field_path = (*path, self.name)
        context = scope.context

        # without sibling data the gate cannot be decided, so the field is validated
        if self.conditional and data is not None and not self.should_validate(data, context):
            if raw is ABSENT or raw.value is None: return ABSENT, []
            return Present(self._transform(self._preprocess(raw.value, context), context)), []

        if raw is ABSENT: return self._missing(field_path, scope)

        value = self._preprocess(raw.value, context)
        if value is None:
            if self.nullable: return Present(None), []
            return self._missing(field_path, scope)

        if self.coerce:
            value, errors = self.type.evaluate(value, field_path, scope)
        else:
            value, errors = self.type.check(value, field_path, scope)
        if errors: return ABSENT, self._with_message(errors)

        errors = [e for c in self.constraints for e in c.evaluate(value, field_path, scope)]
        if errors: return ABSENT, self._with_message(errors)

        errors = [refinement_error(field_path, r.render(value, scope.messages))
            for r in self.refinements if not r.passes(value, context)]
        if errors: return ABSENT, self._with_message(errors)

        return Present(self._transform(value, context)), []

    def _missing(self, path: Path, scope: EvalScope) -> tuple[Fetched, list[Error]]:
        if self.has_default:
            value = self._preprocess(self.default_value(), scope.context)
            return Present(self._transform(value, scope.context)), []
        if self.optional: return ABSENT, []
        return ABSENT, self._with_message([required_error(path, scope.messages)])

    def _preprocess(self, value: Any, context: Context) -> Any:
        return value if self.preprocess is None else self.preprocess(value, context)

    def _transform(self, value: Any, context: Context) -> Any:
        return value if self.transform is None else self.transform(value, context)

    def _with_message(self, errors: list[Error]) -> list[Error]:
        if self.message is None: return errors
        return [e.with_message(self.message) for e in errors]


# ============================================================================
# Construction from builder options
# ============================================================================

def _callback(name: str, options: Mapping[str, Any]) -> Callback | None:
    plain, contextual = options.get(name), options.get(f"{name}_ctx")
    if plain is not None and contextual is not None:
        raise SchemaDefinitionError(f"{name} and {name}_ctx are mutually exclusive")
    fn = plain if plain is not None else contextual
    if fn is None: return None
    if not callable(fn): raise SchemaDefinitionError(f"{name} must be callable, got {fn!r}")
    return Callback(fn, with_context=contextual is not None)


def _condition(name: str, options: Mapping[str, Any]) -> Condition | None:
    plain, contextual = options.get(name), options.get(f"{name}_ctx")
    if plain is not None and contextual is not None:
        raise SchemaDefinitionError(f"{name} and {name}_ctx are mutually exclusive")
    if contextual is not None:
        if not callable(contextual): raise SchemaDefinitionError(f"{name}_ctx must be callable")
        return Condition(contextual, with_context=True)
    if plain is None: return None
    test = normalize_symbol(plain)
    if isinstance(test, str) or callable(test): return Condition(test)
    raise SchemaDefinitionError(f"{name} must be a field name or a callable, got {plain!r}")


def _refinement(item: Any, with_context: bool) -> Refinement:
    if callable(item): return Refinement(item, with_context=with_context)
    if isinstance(item, tuple) and len(item) == 2 and callable(item[0]):
        check, message = item
    elif isinstance(item, Mapping) and callable(check := item.get("check", item.get("if"))):
        message = item.get("message")
    else:
        raise SchemaDefinitionError(f"Invalid refinement: {item!r}")
    if message is not None and not (isinstance(message, str) or callable(message)):
        raise SchemaDefinitionError(f"Refinement message must be a str or callable, got {message!r}")
    return Refinement(check, message, with_context)


def _refinements(options: Mapping[str, Any]) -> tuple[Refinement, ...]:
    result = []
    for key, with_context in (("refine", False), ("refine_ctx", True)):
        if (option := options.get(key)) is None: continue
        items = option if isinstance(option, list) else [option]
        result.extend(_refinement(item, with_context) for item in items)
    return tuple(result)


def _resolve_type(name: str, type_ref: Any, options: dict[str, Any], types: TypeRegistry) -> Type:
    if "literal" in options: return types.build("literal", values=options["literal"])
    if "union" in options: return types.build("union", types=options["union"])
    if "discriminator" in options or "mapping" in options:
        return types.build("discriminated_union", discriminator=options.get("discriminator"),
            mapping=options.get("mapping"))

    of, schema = options.get("of"), options.get("schema")
    if type_ref is None:
        if of is not None: type_ref = "array"
        elif schema is not None: type_ref = "object"
        else: raise SchemaDefinitionError(f"Field {name} needs a type")

    type_name = normalize_symbol(type_ref)
    if of is not None and type_name != "array":
        raise SchemaDefinitionError(f"Field {name}: of= only applies to array fields")
    if schema is not None and type_name != "object":
        raise SchemaDefinitionError(f"Field {name}: schema= only applies to object fields")
    if type_name == "array" and of is not None: return types.build("array", of=of)
    if type_name == "object" and schema is not None: return types.build("object", schema=schema)
    return types.resolve(type_ref)


def build_field(name: Any, type_ref: Any = None, *, types: TypeRegistry,
                constraints: ConstraintRegistry, **options: Any) -> Field:
    """Build a Field from builder DSL options.

    Raises SchemaDefinitionError for unknown options, unknown types or
    constraints, and malformed callbacks or refinements.
    """
    name = canonical_key(name)
    constraint_options = {k: v for k, v in options.items() if k not in FIELD_OPTIONS}
    if unknown := [k for k in constraint_options if k not in constraints]:
        raise SchemaDefinitionError(f"Unknown option for field {name}: {', '.join(unknown)}")
    if "default" in options and "default_factory" in options:
        raise SchemaDefinitionError(f"Field {name}: default and default_factory are mutually exclusive")
    if (factory := options.get("default_factory")) is not None and not callable(factory):
        raise SchemaDefinitionError(f"Field {name}: default_factory must be callable")
    if (message := options.get("message")) is not None and not isinstance(message, str):
        raise SchemaDefinitionError(f"Field {name}: message must be a str")

    return Field(
        name=name,
        type=_resolve_type(name, type_ref, options, types),
        # option (kwarg) order is the evaluation order
        constraints=tuple(constraints.build(k, v) for k, v in constraint_options.items()),
        refinements=_refinements(options),
        optional=bool(options.get("optional", False)),
        nullable=bool(options.get("nullable", False)),
        default=options.get("default", ABSENT),
        default_factory=factory,
        preprocess=_callback("preprocess", options),
        transform=_callback("transform", options),
        when=_condition("when", options),
        unless=_condition("unless", options),
        message=message,
        coerce=bool(options.get("coerce", True)),
    )
