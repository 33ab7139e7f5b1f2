"""Schema Definition and Parsing

A Schema is an ordered, immutable set of Fields plus schema-level
validators. SchemaBuilder is the only mutable step; schema() drives it,
either directly or as a decorator:

    @valida.schema
    def user(s):
        s.field("name", "string", min=2)
        s.optional("age", "integer", min=0)

    user.safe_parse({"name": "Al", "age": "17"})   # Success({"name": "Al", "age": 17})

Features:
- Every field is evaluated; errors are collected, never short-circuited
- Validators see the coerced data once all fields passed
- Composition (extend, pick, omit, merge, partial) returns new schemas
- Injectable type/constraint registries and message catalog
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field as dataclass_field
from types import MappingProxyType
from typing import Any, Callable, Union

from valida.config import get_settings
from valida.context import Context
from valida.errors import (
    Error,
    Failure,
    Path,
    PathSegment,
    Result,
    SchemaDefinitionError,
    Success,
    ValidationError,
    custom_error,
)
from valida.field import Field, build_field
from valida.introspection import describe_schema
from valida.keys import canonical_key
from valida.logging import schema_logger
from valida.markers import ABSENT, Present
from valida.messages import DEFAULT_MESSAGES, MessageRenderer
from valida.registry import (
    ConstraintRegistry,
    TypeRegistry,
    default_constraint_registry,
    default_type_registry,
)
from valida.serializer import dump as serialize, serialize_value
from valida.types import EvalScope

logger = schema_logger()

BuildFn = Callable[["SchemaBuilder"], Any]


@dataclass(frozen=True, slots=True)
class SchemaOptions:
    """strict is recorded for callers and introspection; unknown keys are dropped either way.
    passthrough copies unknown keys into the output unchanged."""
    strict: bool = False
    passthrough: bool = False


class ValidatorScope:
    """Argument handed to schema-level validators.

    Exposes the coerced data and the caller context, and collects errors:
    check.error("password_confirmation", "doesn't match") or
    check.base_error("date range is empty").
    """

    __slots__ = ("data", "context", "_path", "_errors")

    def __init__(self, data: Mapping[str, Any], context: Context, path: Path = ()):
        self.data = data
        self.context = context
        self._path = path
        self._errors: list[Error] = []

    def __getitem__(self, name: Any) -> Any: return self.data.get(canonical_key(name))

    def __contains__(self, name: Any) -> bool: return canonical_key(name) in self.data

    @property
    def errors(self) -> list[Error]: return list(self._errors)

    def error(self, field: Union[PathSegment, tuple[PathSegment, ...]], message: str) -> None:
        segments = field if isinstance(field, tuple) else (canonical_key(field),)
        self._errors.append(custom_error((*self._path, *segments), message))

    def base_error(self, message: str) -> None:
        self._errors.append(custom_error(self._path, message))


Validator = Callable[[ValidatorScope], Any]


def _normalize_input(data: Any) -> dict[str, Any]:
    if data is None: return {}
    if not isinstance(data, Mapping): raise TypeError(f"Expected a mapping, got {type(data).__name__}")
    return {canonical_key(k): v for k, v in data.items()}


@dataclass(frozen=True, slots=True, eq=False)
class Schema:
    fields: Mapping[str, Field]
    options: SchemaOptions = SchemaOptions()
    validators: tuple[Validator, ...] = ()
    types: TypeRegistry = dataclass_field(default_factory=default_type_registry, repr=False)
    constraints: ConstraintRegistry = dataclass_field(default_factory=default_constraint_registry, repr=False)
    messages: MessageRenderer = dataclass_field(default=DEFAULT_MESSAGES, repr=False)

    def __post_init__(self):
        if not isinstance(self.fields, MappingProxyType):
            object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))
        object.__setattr__(self, "validators", tuple(self.validators))

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def safe_parse(self, data: Any, *, context: Any = None, path_prefix: Path = ()) -> Result:
        """Coerce and validate data, returning Success(data) or Failure(errors).

        Raises TypeError if data is neither None nor a mapping.
        """
        path_prefix = tuple(path_prefix)
        scope = EvalScope(context=Context.of(context), messages=self.messages)
        values = _normalize_input(data)
        output: dict[str, Any] = {}
        errors: list[Error] = []

        for name, f in self.fields.items():
            raw = Present(values[name]) if name in values else ABSENT
            value, field_errors = f.evaluate(raw, values, path_prefix, scope)
            if field_errors:
                errors.extend(field_errors)
            elif value is not ABSENT:
                output[name] = value.value

        if self.options.passthrough:
            output.update((k, v) for k, v in values.items() if k not in self.fields)

        if not errors and self.validators:
            errors = self._run_validators(output, scope.context, path_prefix)

        if errors:
            if not path_prefix and get_settings().LOG_EVALUATION:
                logger.debug("parse_failed", error_count=len(errors),
                    codes=sorted({e.code.value for e in errors}))
            return Failure(errors)
        return Success(output)

    def parse(self, data: Any, *, context: Any = None, path_prefix: Path = ()) -> Mapping[str, Any]:
        """Like safe_parse, but returns the data or raises ValidationError."""
        result = self.safe_parse(data, context=context, path_prefix=path_prefix)
        if result.is_failure(): raise ValidationError(result.errors)
        return result.data

    def _run_validators(self, output: dict[str, Any], context: Context, path: Path) -> list[Error]:
        check = ValidatorScope(MappingProxyType(output), context, path)
        for validator in self.validators: validator(check)
        return check.errors

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def dump(self, data: Any, *, context: Any = None, format: str = "dict") -> Any:
        """Parse, then serialize to primitives; raises ValidationError on failure."""
        return serialize(self.parse(data, context=context), format=format)

    def safe_dump(self, data: Any, *, context: Any = None) -> Result:
        return self.safe_parse(data, context=context).map(serialize_value)

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------

    def _derive(self, fields: Mapping[str, Field], validators: tuple[Validator, ...]) -> Schema:
        return Schema(fields=fields, options=self.options, validators=validators, types=self.types,
            constraints=self.constraints, messages=self.messages)

    def _known(self, names: tuple[Any, ...]) -> list[str]:
        keys = [canonical_key(n) for n in names]
        if unknown := [k for k in keys if k not in self.fields]:
            raise SchemaDefinitionError(f"Unknown fields: {', '.join(unknown)}")
        return keys

    def extend(self, build: BuildFn) -> Schema:
        """New schema with this schema's fields and validators plus those added by build."""
        builder = SchemaBuilder(strict=self.options.strict, passthrough=self.options.passthrough,
            types=self.types, constraints=self.constraints, messages=self.messages)
        builder.include(self)
        build(builder)
        return builder.build()

    def pick(self, *names: Any) -> Schema:
        keep = set(self._known(names))
        return self._derive({k: f for k, f in self.fields.items() if k in keep}, ())

    def omit(self, *names: Any) -> Schema:
        drop = set(self._known(names))
        return self._derive({k: f for k, f in self.fields.items() if k not in drop}, ())

    def merge(self, other: Schema) -> Schema:
        """Fields of other override same-named fields; validators run self's first."""
        return self._derive({**self.fields, **other.fields}, (*self.validators, *other.validators))

    def partial(self) -> Schema:
        return self._derive({k: f.as_optional() for k, f in self.fields.items()}, self.validators)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def field_names(self) -> list[str]: return list(self.fields)

    def field(self, name: Any) -> Field | None: return self.fields.get(canonical_key(name))

    def has_field(self, name: Any) -> bool: return canonical_key(name) in self.fields

    @property
    def required_fields(self) -> list[str]:
        return [k for k, f in self.fields.items() if f.required and not f.conditional and not f.has_default]

    @property
    def optional_fields(self) -> list[str]: return [k for k, f in self.fields.items() if f.optional]

    @property
    def conditional_fields(self) -> list[str]: return [k for k, f in self.fields.items() if f.conditional]

    @property
    def fields_with_defaults(self) -> list[str]: return [k for k, f in self.fields.items() if f.has_default]

    def describe(self) -> dict[str, Any]:
        return describe_schema(self)


class SchemaBuilder:
    """Mutable collector of field definitions; build() freezes them into a Schema."""

    def __init__(self, *, strict: bool = False, passthrough: bool = False,
                 types: TypeRegistry | None = None, constraints: ConstraintRegistry | None = None,
                 messages: MessageRenderer | None = None):
        self.options = SchemaOptions(strict=strict, passthrough=passthrough)
        self.types = types or default_type_registry()
        self.constraints = constraints or default_constraint_registry()
        self.messages = messages or DEFAULT_MESSAGES
        self._fields: dict[str, Field] = {}
        self._validators: list[Validator] = []

    def _inline(self, ref: Any) -> Any:
        """Turn an inline builder callable (of=/schema=/mapping values) into a Schema."""
        if ref is None or isinstance(ref, Schema) or isinstance(ref, type) or not callable(ref): return ref
        nested = SchemaBuilder(types=self.types, constraints=self.constraints, messages=self.messages)
        ref(nested)
        return nested.build()

    def add(self, f: Field) -> Field:
        if f.name in self._fields: raise SchemaDefinitionError(f"Field {f.name} already defined")
        self._fields[f.name] = f
        return f

    def include(self, schema: Schema) -> None:
        """Copy every field and validator of an existing schema into this builder."""
        for f in schema.fields.values(): self.add(f)
        self._validators.extend(schema.validators)

    def field(self, name: Any, type: Any = None, **options: Any) -> Field:
        for key in ("of", "schema"):
            if key in options: options[key] = self._inline(options[key])
        if isinstance(options.get("mapping"), Mapping):
            options["mapping"] = {k: self._inline(v) for k, v in options["mapping"].items()}
        return self.add(build_field(name, type, types=self.types, constraints=self.constraints, **options))

    def optional(self, name: Any, type: Any = None, **options: Any) -> Field:
        return self.field(name, type, **{**options, "optional": True})

    def required(self, name: Any, type: Any = None, **options: Any) -> Field:
        return self.field(name, type, **{**options, "optional": False})

    def validate(self, fn: Validator) -> Validator:
        """Register a schema-level validator; usable as a decorator."""
        if not callable(fn): raise SchemaDefinitionError(f"Validator must be callable, got {fn!r}")
        self._validators.append(fn)
        return fn

    def build(self) -> Schema:
        built = Schema(fields=self._fields, options=self.options, validators=tuple(self._validators),
            types=self.types, constraints=self.constraints, messages=self.messages)
        logger.debug("schema_built", field_count=len(self._fields), validator_count=len(self._validators),
            strict=self.options.strict, passthrough=self.options.passthrough)
        return built


def schema(build: BuildFn | None = None, *, strict: bool = False, passthrough: bool = False,
           types: TypeRegistry | None = None, constraints: ConstraintRegistry | None = None,
           messages: MessageRenderer | None = None) -> Union[Schema, Callable[[BuildFn], Schema]]:
    """Build a Schema from a builder function.

    Called with build, returns the Schema; called with only keyword options,
    returns a decorator:

        @valida.schema(strict=True)
        def login(s): ...
    """
    def decorate(fn: BuildFn) -> Schema:
        builder = SchemaBuilder(strict=strict, passthrough=passthrough, types=types,
            constraints=constraints, messages=messages)
        fn(builder)
        return builder.build()

    return decorate if build is None else decorate(build)
