"""
Unit tests for Field evaluation.

Coverage:
- missing / null / default handling and the ABSENT outcome
- preprocess, coercion, constraints, refinements and transform ordering
- field-level message override
- when/unless gates, plain and context-aware
- conditional fields evaluated without sibling data
"""
from __future__ import annotations

from typing import Any

import pytest

from valida.context import Context
from valida.errors import ErrorCode
from valida.field import Field, build_field
from valida.markers import ABSENT, Present
from valida.registry import default_constraint_registry, default_type_registry
from valida.types import EvalScope


def make_field(name: str, type_ref: Any = None, **options: Any) -> Field:
    return build_field(name, type_ref, types=default_type_registry(),
        constraints=default_constraint_registry(), **options)


def test_missing_required_field_is_an_error() -> None:
    value, errors = make_field("name", "string").evaluate(ABSENT)

    assert value is ABSENT
    assert [(e.path, e.code, e.message) for e in errors] == [(("name",), ErrorCode.REQUIRED, "is required")]


def test_missing_optional_field_is_omitted() -> None:
    assert make_field("age", "integer", optional=True).evaluate(ABSENT) == (ABSENT, [])


def test_path_prefix_is_extended_by_field_name() -> None:
    _, errors = make_field("zip", "string").evaluate(ABSENT, path=("user", "addresses", 0))

    assert errors[0].path == ("user", "addresses", 0, "zip")


def test_defaults_are_fresh_copies() -> None:
    tags = make_field("tags", "array", default=[])

    first, _ = tags.evaluate(ABSENT)
    second, _ = tags.evaluate(ABSENT)

    assert first == Present([])
    assert first.value is not second.value


def test_default_factory_and_transform() -> None:
    calls = []
    stamp = make_field("n", "integer", default_factory=lambda: calls.append(1) or len(calls))
    role = make_field("role", "string", default="USER", transform=str.lower)

    assert stamp.evaluate(ABSENT) == (Present(1), [])
    assert stamp.evaluate(ABSENT) == (Present(2), [])
    assert role.evaluate(ABSENT) == (Present("user"), [])


def test_null_handling() -> None:
    assert make_field("bio", "string", nullable=True).evaluate(Present(None)) == (Present(None), [])
    assert make_field("bio", "string", optional=True).evaluate(Present(None)) == (ABSENT, [])
    assert make_field("bio", "string", default="n/a").evaluate(Present(None)) == (Present("n/a"), [])
    assert make_field("bio", "string").evaluate(Present(None))[1][0].code is ErrorCode.REQUIRED


def test_preprocess_runs_before_coercion_and_null_check() -> None:
    code = make_field("code", "integer", preprocess=lambda v: v.strip() or None, optional=True)

    assert code.evaluate(Present(" 42 ")) == (Present(42), [])
    assert code.evaluate(Present("   ")) == (ABSENT, [])


def test_context_aware_callbacks() -> None:
    scope = EvalScope(context=Context(prefix="ID-"))
    ident = make_field("id", "string", preprocess_ctx=lambda v, ctx: v.upper(),
        transform_ctx=lambda v, ctx: ctx["prefix"] + v)

    assert ident.evaluate(Present("ab"), scope=scope) == (Present("ID-AB"), [])


def test_without_coercion_only_type_is_checked() -> None:
    age = make_field("age", "integer", coerce=False)

    assert age.evaluate(Present(17)) == (Present(17), [])
    assert age.evaluate(Present("17"))[1][0].code is ErrorCode.TYPE_ERROR


def test_all_constraint_errors_are_collected_in_declaration_order() -> None:
    _, errors = make_field("pin", "string", min=5, format="numeric").evaluate(Present("ab"))

    assert [e.code for e in errors] == [ErrorCode.MIN, ErrorCode.FORMAT]


def test_type_error_stops_before_constraints() -> None:
    _, errors = make_field("age", "integer", min=0).evaluate(Present("abc"))

    assert [e.code for e in errors] == [ErrorCode.TYPE_ERROR]


def test_constraint_errors_stop_before_refinements() -> None:
    calls = []
    _, errors = make_field("age", "integer", min=18, refine=lambda v: calls.append(v) or True).evaluate(Present(3))

    assert [e.code for e in errors] == [ErrorCode.MIN]
    assert calls == []


def test_all_refinements_run_and_carry_their_messages() -> None:
    code = make_field("code", "string", refine=[
        (lambda v: len(v) >= 10, "too short"),
        {"check": lambda v: any(c.isupper() for c in v), "message": "needs uppercase"},
        lambda v: any(c.isdigit() for c in v),
    ])

    _, errors = code.evaluate(Present("ab"))

    assert [e.message for e in errors] == ["too short", "needs uppercase", "failed refinement"]
    assert {e.code for e in errors} == {ErrorCode.REFINEMENT}


def test_refinement_runs_on_coerced_value_with_callable_message() -> None:
    age = make_field("age", "integer", refine={"check": lambda v: v >= 18, "message": lambda v: f"must be 18+, got {v}"})

    assert age.evaluate(Present("21")) == (Present(21), [])
    assert age.evaluate(Present("15"))[1][0].message == "must be 18+, got 15"


def test_context_refinement() -> None:
    amount = make_field("amount", "decimal", refine_ctx=lambda v, ctx: "limit" not in ctx or v <= ctx["limit"])

    assert amount.evaluate(Present("99999"))[1] == []
    assert amount.evaluate(Present("100"), scope=EvalScope(context=Context(limit=50)))[1][0].code is ErrorCode.REFINEMENT


def test_field_message_overrides_every_error_but_keeps_code() -> None:
    pin = make_field("pin", "string", min=5, format="numeric", message="invalid pin")

    _, errors = pin.evaluate(Present("ab"))
    _, missing = pin.evaluate(ABSENT)

    assert [(e.code, e.message) for e in errors] == [(ErrorCode.MIN, "invalid pin"), (ErrorCode.FORMAT, "invalid pin")]
    assert [(e.code, e.message) for e in missing] == [(ErrorCode.REQUIRED, "invalid pin")]


def test_when_sibling_gate() -> None:
    company = make_field("company", "string", when="employed", transform=str.title)

    assert company.evaluate(ABSENT, {"employed": False}) == (ABSENT, [])
    assert company.evaluate(Present(None), {"employed": False}) == (ABSENT, [])
    assert company.evaluate(Present("acme"), {"employed": False}) == (Present("Acme"), [])
    assert company.evaluate(ABSENT, {}) == (ABSENT, [])
    assert company.evaluate(ABSENT, {"employed": True})[1][0].code is ErrorCode.REQUIRED
    assert company.evaluate(Present("acme inc"), {"employed": "yes"}) == (Present("Acme Inc"), [])


def test_conditional_field_without_sibling_data_runs_full_pipeline() -> None:
    age = make_field("age", "integer", when=lambda data: data["adult"])

    value, errors = age.evaluate(Present("abc"))

    assert value is ABSENT
    assert [(e.path, e.code) for e in errors] == [(("age",), ErrorCode.TYPE_ERROR)]
    assert age.evaluate(Present("7")) == (Present(7), [])
    assert age.evaluate(ABSENT)[1][0].code is ErrorCode.REQUIRED


def test_unless_and_context_conditions() -> None:
    reason = make_field("reason", "string", unless=lambda data: data.get("approved"))
    override = make_field("override", "string", when_ctx=lambda data, ctx: ctx.get("admin", False))

    assert reason.evaluate(ABSENT, {"approved": True}) == (ABSENT, [])
    assert reason.evaluate(ABSENT, {"approved": False})[1][0].code is ErrorCode.REQUIRED
    assert override.evaluate(ABSENT, {}) == (ABSENT, [])
    assert override.evaluate(ABSENT, {}, scope=EvalScope(context=Context(admin=True)))[1] != []


def test_field_flags_and_constraint_lookup() -> None:
    name = make_field("name", "string", min=2, max=50, optional=True, when="x")

    assert name.optional and not name.required
    assert name.conditional
    assert not name.has_default
    assert name.constraint("min").limit == 2
    assert name.has_constraint("max")
    assert not name.has_constraint("format")
    assert name.constraint("divisible_by") is None
    assert not name.has_constraint("divisible_by")
    assert name.constraint_values() == {"min": 2, "max": 50}


@pytest.mark.parametrize(
    "options",
    [{"bogus": 1}, {"refine": 42}, {"refine": {"message": "no check"}}, {"refine": (lambda v: True, 5)},
     {"preprocess": str.strip, "preprocess_ctx": lambda v, c: v}, {"default": 1, "default_factory": list},
     {"default_factory": 3}, {"transform": "upper"}, {"when": 42}, {"of": "string"}, {"schema": object()},
     {"message": 42}],
)
def test_malformed_options_are_definition_errors(options: dict[str, Any]) -> None:
    from valida.errors import SchemaDefinitionError

    with pytest.raises(SchemaDefinitionError):
        make_field("x", "string", **options)


def test_field_requires_a_type() -> None:
    from valida.errors import SchemaDefinitionError

    with pytest.raises(SchemaDefinitionError, match="needs a type"):
        make_field("x")
    assert make_field("ids", of="integer").type.type_name == "array<integer>"
