"""
Unit tests for scalar type coercion.

Coverage:
- accepted inputs per type and the exact output type produced
- rejected inputs (bool as number, non-finite, malformed numerals)
- error code and message on failed coercion
- numerals past the interpreter digit limit
- float to Decimal at float precision
- evaluation scope defaults
"""
from __future__ import annotations

from decimal import Decimal
from enum import Enum
from fractions import Fraction

import pytest

from valida import schema
from valida.context import Context
from valida.errors import ErrorCode
from valida.markers import COERCION_FAILED
from valida.types import BooleanType, DecimalType, EvalScope, FloatType, IntegerType, StringType


class Color(Enum):
    RED = "red"


class Priority(Enum):
    HIGH = 3


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("x", "x"), (Color.RED, "red"), (Priority.HIGH, "HIGH"), (42, "42"), (1.5, "1.5"),
     (Decimal("2.50"), "2.50"), (Fraction(1, 2), "1/2")],
)
def test_string_coerces(raw: object, expected: str) -> None:
    assert StringType().coerce(raw).value == expected


@pytest.mark.parametrize("raw", [None, True, [], {"a": 1}, 10 ** 5000])
def test_string_rejects(raw: object) -> None:
    assert StringType().coerce(raw) is COERCION_FAILED


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(42, 42), (3.0, 3), ("17", 17), (" -5 ", -5), ("12.00", 12), ("-7.0", -7)],
)
def test_integer_coerces(raw: object, expected: int) -> None:
    value = IntegerType().coerce(raw).value

    assert value == expected
    assert type(value) is int


@pytest.mark.parametrize("raw", [True, False, "", "  ", "1.5", "abc", "1e3", 1.5, float("inf"), float("nan"), None])
def test_integer_rejects(raw: object) -> None:
    assert IntegerType().coerce(raw) is COERCION_FAILED


@pytest.mark.parametrize(("raw", "expected"), [(2.5, 2.5), (1, 1.0), ("2.5", 2.5), (" 3 ", 3.0), ("-0.25", -0.25)])
def test_float_coerces(raw: object, expected: float) -> None:
    value = FloatType().coerce(raw).value

    assert value == expected
    assert type(value) is float


@pytest.mark.parametrize("raw", [True, "1e5", "nan", "inf", "", ".5", float("nan"), float("-inf"), Decimal("1.5")])
def test_float_rejects(raw: object) -> None:
    assert FloatType().coerce(raw) is COERCION_FAILED


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(Decimal("1.10"), Decimal("1.10")), (5, Decimal(5)), (0.1, Decimal("0.1")), ("19.99", Decimal("19.99")),
     (Fraction(1, 3), Decimal("0.333333333333333"))],
)
def test_decimal_coerces(raw: object, expected: Decimal) -> None:
    value = DecimalType().coerce(raw).value

    assert value == expected
    assert isinstance(value, Decimal)


@pytest.mark.parametrize("raw", [True, Decimal("NaN"), Decimal("Infinity"), float("inf"), "abc", "1,5", None])
def test_decimal_rejects(raw: object) -> None:
    assert DecimalType().coerce(raw) is COERCION_FAILED


@pytest.mark.parametrize("raw", [True, 1, "1", "true", "TRUE", "Yes", "on", "t", "Y"])
def test_boolean_truthy(raw: object) -> None:
    assert BooleanType().coerce(raw).value is True


@pytest.mark.parametrize("raw", [False, 0, "0", "false", "NO", "off", "f", "n"])
def test_boolean_falsy(raw: object) -> None:
    assert BooleanType().coerce(raw).value is False


@pytest.mark.parametrize("raw", [None, "maybe", 2, 1.0, "", []])
def test_boolean_rejects(raw: object) -> None:
    assert BooleanType().coerce(raw) is COERCION_FAILED


def test_failed_coercion_reports_type_error_at_path() -> None:
    value, errors = IntegerType().evaluate("abc", ("age",))

    assert value is None
    assert len(errors) == 1
    assert errors[0].path == ("age",)
    assert errors[0].code is ErrorCode.TYPE_ERROR
    assert errors[0].message == "cannot coerce str to integer"


def test_check_without_coercion_only_validates() -> None:
    assert IntegerType().check(5) == (5, [])

    value, errors = IntegerType().check("5", ("age",))

    assert value is None
    assert errors[0].message == "must be a integer"


@pytest.mark.parametrize(("raw", "expected"), [(0.1 + 0.2, "0.3"), (100.0, "100"), (1 / 3, "0.333333333333333")])
def test_float_to_decimal_keeps_fifteen_significant_digits(raw: float, expected: str) -> None:
    assert str(DecimalType().coerce(raw).value) == expected


def test_oversized_integer_numeral_is_a_type_error() -> None:
    value, errors = IntegerType().evaluate("1" * 5000, ("n",))

    assert value is None
    assert [(e.path, e.code) for e in errors] == [(("n",), ErrorCode.TYPE_ERROR)]


def test_oversized_integer_numeral_fails_parse() -> None:
    counter = schema(lambda s: s.field("n", "integer"))

    assert counter.safe_parse({"n": "9" * 5000}).errors.first.code is ErrorCode.TYPE_ERROR


def test_eval_scope_defaults_to_empty_context() -> None:
    assert dict(EvalScope().context) == {}
    assert EvalScope(context=Context(a=1)).context["a"] == 1
