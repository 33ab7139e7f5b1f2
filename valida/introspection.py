"""Schema Introspection

Plain-dict descriptions of schemas, fields, types and constraints, for
documentation pages, admin tooling and debugging. Dispatch is on the
kind tag of each variant, never on its class.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from valida.constraints import Constraint, ConstraintKind
from valida.types import Type, TypeKind

if TYPE_CHECKING:
    from valida.field import Field
    from valida.schema import Schema


def describe_type(t: Type) -> dict[str, Any]:
    info: dict[str, Any] = {"kind": t.kind.value, "name": t.type_name}
    match t.kind:
        case (TypeKind.STRING | TypeKind.INTEGER | TypeKind.FLOAT | TypeKind.DECIMAL | TypeKind.BOOLEAN
              | TypeKind.DATE | TypeKind.DATETIME | TypeKind.TIME | TypeKind.CUSTOM):
            pass
        case TypeKind.ARRAY:
            info["items"] = describe_type(t.of) if t.of is not None else None
        case TypeKind.OBJECT:
            info["schema"] = describe_schema(t.schema) if t.schema is not None else None
        case TypeKind.UNION:
            info["members"] = [describe_type(member) for member in t.types]
        case TypeKind.DISCRIMINATED_UNION:
            info["discriminator"] = t.discriminator
            info["mapping"] = {str(key): describe_schema(s) for key, s in t.mapping.items()}
        case TypeKind.LITERAL:
            info["values"] = list(t.values)
    return info


def describe_constraint(c: Constraint) -> dict[str, Any]:
    match c.kind:
        case ConstraintKind.MIN | ConstraintKind.MAX:
            return {"type": c.kind.value, "value": c.option_value}
        case ConstraintKind.LENGTH:
            return {"type": c.kind.value, "options": c.option_value}
        case ConstraintKind.FORMAT:
            return {"type": c.kind.value, "name": c.format_name, "pattern": c.pattern.pattern}
        case ConstraintKind.ENUM:
            return {"type": c.kind.value, "values": c.option_value}
        case ConstraintKind.CUSTOM:
            return {"type": type(c).__name__, "value": c.option_value}


def describe_field(f: Field) -> dict[str, Any]:
    return {
        "type": f.type.type_name,
        "optional": f.optional,
        "nullable": f.nullable,
        "has_default": f.has_default,
        "conditional": f.conditional,
        "coerce": f.coerce,
        "constraints": [describe_constraint(c) for c in f.constraints],
        "refinements": len(f.refinements),
    }


def describe_schema(schema: Schema) -> dict[str, Any]:
    return {
        "fields": {name: describe_field(f) for name, f in schema.fields.items()},
        "options": {"strict": schema.options.strict, "passthrough": schema.options.passthrough},
        "validators_count": len(schema.validators),
    }
