"""
Unit tests for schema introspection.

Coverage:
- field lists (required, optional, conditional, defaults)
- describe() output for types, constraints and options
"""
from __future__ import annotations

import re

import valida
from valida.constraints import Format, Length
from valida.introspection import describe_constraint, describe_type
from valida.types import ArrayType, IntegerType, LiteralType, UnionType


@valida.schema(passthrough=True)
def profile(s):
    s.field("handle", "string", length=(3, 20), format="slug")
    s.optional("bio", "string", nullable=True)
    s.field("role", "string", default="user")
    s.field("company", "string", when="employed")
    s.field("scores", of="integer", refine=lambda v: len(v) < 100)
    s.validate(lambda check: None)


def test_field_lists() -> None:
    assert profile.field_names == ["handle", "bio", "role", "company", "scores"]
    assert profile.required_fields == ["handle", "scores"]
    assert profile.optional_fields == ["bio"]
    assert profile.conditional_fields == ["company"]
    assert profile.fields_with_defaults == ["role"]
    assert profile.has_field("bio") and not profile.has_field("email")
    assert profile.field("email") is None


def test_describe_schema() -> None:
    described = profile.describe()

    assert described["options"] == {"strict": False, "passthrough": True}
    assert described["validators_count"] == 1
    assert described["fields"]["handle"] == {
        "type": "string",
        "optional": False,
        "nullable": False,
        "has_default": False,
        "conditional": False,
        "coerce": True,
        "constraints": [
            {"type": "length", "options": {"range": (3, 20)}},
            {"type": "format", "name": "slug", "pattern": Format.from_option("slug").pattern.pattern},
        ],
        "refinements": 0,
    }
    assert described["fields"]["scores"]["type"] == "array<integer>"
    assert described["fields"]["scores"]["refinements"] == 1
    assert described["fields"]["bio"]["nullable"]


def test_describe_nested_types() -> None:
    address = valida.schema(lambda s: s.field("zip", "string"))

    assert describe_type(ArrayType(of=IntegerType())) == {
        "kind": "array", "name": "array<integer>", "items": {"kind": "integer", "name": "integer"}}
    assert describe_type(UnionType(types=(IntegerType(),)))["members"] == [{"kind": "integer", "name": "integer"}]
    assert describe_type(LiteralType(values=("a", "b")))["values"] == ["a", "b"]
    assert describe_type(valida.default_type_registry().resolve(address))["schema"]["fields"]["zip"]["type"] == "string"


def test_describe_constraints() -> None:
    assert describe_constraint(Length(exact=3)) == {"type": "length", "options": {"exact": 3}}
    assert describe_constraint(Format.from_option(re.compile("[a-z]+"))) == {
        "type": "format", "name": None, "pattern": "[a-z]+"}
