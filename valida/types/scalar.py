"""Scalar Types

String, Integer, Float, Decimal and Boolean coercion. Numeric strings must
be plain decimal numerals; bool is never accepted where a number is
expected, and non-finite numbers never pass.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import Context as DecimalContext, Decimal, InvalidOperation
from enum import Enum
from fractions import Fraction
from typing import Any, ClassVar

from valida.keys import symbol_name
from valida.markers import COERCION_FAILED, Coerced, Present

from .base import Type, TypeKind

_INTEGER_NUMERAL = re.compile(r"-?[0-9]+")
_WHOLE_FLOAT_NUMERAL = re.compile(r"-?[0-9]+\.0+")
_DECIMAL_NUMERAL = re.compile(r"-?[0-9]+(\.[0-9]+)?")

# Significant digits kept when a float or Fraction becomes a Decimal (float precision)
DECIMAL_PRECISION = 15
_PRECISE = DecimalContext(prec=DECIMAL_PRECISION)

TRUTHY_VALUES = frozenset({True, 1, "1", "true", "yes", "on", "t", "y"})
FALSY_VALUES = frozenset({False, 0, "0", "false", "no", "off", "f", "n"})


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal, Fraction)) and not isinstance(value, bool)


def _numeral(raw: str, pattern: re.Pattern[str]) -> str | None:
    stripped = raw.strip()
    return stripped if stripped and pattern.fullmatch(stripped) else None


@dataclass(frozen=True, slots=True)
class StringType(Type):
    kind: ClassVar[TypeKind] = TypeKind.STRING
    name: ClassVar[str] = "string"

    def coerce(self, raw: Any) -> Coerced:
        if isinstance(raw, str): return Present(raw)
        if isinstance(raw, Enum): return Present(symbol_name(raw))
        if is_number(raw):
            try:
                return Present(str(raw))
            except ValueError:
                return COERCION_FAILED
        return COERCION_FAILED

    def valid(self, value: Any) -> bool: return isinstance(value, str)


@dataclass(frozen=True, slots=True)
class IntegerType(Type):
    kind: ClassVar[TypeKind] = TypeKind.INTEGER
    name: ClassVar[str] = "integer"

    def coerce(self, raw: Any) -> Coerced:
        if isinstance(raw, bool): return COERCION_FAILED
        if isinstance(raw, int): return Present(raw)
        if isinstance(raw, float):
            return Present(int(raw)) if math.isfinite(raw) and raw.is_integer() else COERCION_FAILED
        if isinstance(raw, str):
            text = _numeral(raw, _INTEGER_NUMERAL)
            if text is None and (text := _numeral(raw, _WHOLE_FLOAT_NUMERAL)) is not None:
                text = text.split(".", 1)[0]
            if text is not None:
                try:
                    return Present(int(text))
                except ValueError:  # past sys.get_int_max_str_digits()
                    return COERCION_FAILED
        return COERCION_FAILED

    def valid(self, value: Any) -> bool:
        return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True, slots=True)
class FloatType(Type):
    kind: ClassVar[TypeKind] = TypeKind.FLOAT
    name: ClassVar[str] = "float"

    def coerce(self, raw: Any) -> Coerced:
        if isinstance(raw, bool): return COERCION_FAILED
        if isinstance(raw, float): return Present(raw) if math.isfinite(raw) else COERCION_FAILED
        if isinstance(raw, int): return Present(float(raw))
        if isinstance(raw, str) and (text := _numeral(raw, _DECIMAL_NUMERAL)) is not None:
            result = float(text)
            return Present(result) if math.isfinite(result) else COERCION_FAILED
        return COERCION_FAILED

    def valid(self, value: Any) -> bool:
        return isinstance(value, float) and math.isfinite(value)


@dataclass(frozen=True, slots=True)
class DecimalType(Type):
    kind: ClassVar[TypeKind] = TypeKind.DECIMAL
    name: ClassVar[str] = "decimal"

    def coerce(self, raw: Any) -> Coerced:
        if isinstance(raw, bool): return COERCION_FAILED
        if isinstance(raw, Decimal): return Present(raw) if raw.is_finite() else COERCION_FAILED
        if isinstance(raw, int): return Present(Decimal(raw))
        if isinstance(raw, float):
            if not math.isfinite(raw): return COERCION_FAILED
            return Present(Decimal(f"{raw:.{DECIMAL_PRECISION}g}"))
        if isinstance(raw, Fraction):
            return Present(_PRECISE.divide(Decimal(raw.numerator), Decimal(raw.denominator)))
        if isinstance(raw, str) and (text := _numeral(raw, _DECIMAL_NUMERAL)) is not None:
            try:
                return Present(Decimal(text))
            except InvalidOperation:
                return COERCION_FAILED
        return COERCION_FAILED

    def valid(self, value: Any) -> bool:
        return isinstance(value, Decimal) and value.is_finite()


@dataclass(frozen=True, slots=True)
class BooleanType(Type):
    kind: ClassVar[TypeKind] = TypeKind.BOOLEAN
    name: ClassVar[str] = "boolean"

    def coerce(self, raw: Any) -> Coerced:
        if raw is None or not isinstance(raw, (bool, int, str)): return COERCION_FAILED
        token = raw.lower() if isinstance(raw, str) else raw
        # True == 1 and False == 0, so ints and bools share set membership
        if token in TRUTHY_VALUES: return Present(True)
        if token in FALSY_VALUES: return Present(False)
        return COERCION_FAILED

    def valid(self, value: Any) -> bool: return isinstance(value, bool)
