"""
Unit tests for serialization of validated data.

Coverage:
- scalars, decimals and temporal values to primitives
- nested mappings, sequences, sets and objects
- dict vs json formats and Schema.dump / safe_dump
"""
from __future__ import annotations

import enum
import json
from collections import namedtuple
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from decimal import Decimal
from types import MappingProxyType

import pytest

import valida
from valida.errors import ValidationError
from valida.serializer import dump, serialize_value


class Status(enum.Enum):
    ACTIVE = "active"
    RETIRED = 2


@dataclass
class Point:
    x: int
    y: int


def test_scalars() -> None:
    assert serialize_value(None) is None
    assert serialize_value(True) is True
    assert serialize_value(3) == 3
    assert serialize_value(1.5) == 1.5
    assert serialize_value(Decimal("19.990")) == "19.990"
    assert serialize_value(Decimal("1E+2")) == "100"


def test_enums_use_their_string_form() -> None:
    assert serialize_value(Status.ACTIVE) == "active"
    assert serialize_value(Status.RETIRED) == "RETIRED"


def test_temporal_values_use_iso_format() -> None:
    assert serialize_value(date(2024, 3, 1)) == "2024-03-01"
    assert serialize_value(datetime(2024, 3, 1, 12, 30, tzinfo=timezone.utc)) == "2024-03-01T12:30:00+00:00"
    assert serialize_value(time(9, 5)) == "09:05:00"


def test_containers_and_objects() -> None:
    Pair = namedtuple("Pair", "left right")
    value = MappingProxyType({
        Status.ACTIVE: [Decimal("1.0"), (date(2024, 1, 1),)],
        "point": Point(1, 2),
        "pair": Pair(1, "b"),
        "tags": frozenset({"a"}),
        "other": object,
    })

    assert serialize_value(value) == {
        "active": ["1.0", ["2024-01-01"]],
        "point": {"x": 1, "y": 2},
        "pair": [1, "b"],
        "tags": ["a"],
        "other": str(object),
    }


def test_dump_formats() -> None:
    assert dump({"d": date(2024, 1, 2)}) == {"d": "2024-01-02"}
    assert json.loads(dump({"d": date(2024, 1, 2)}, format="json")) == {"d": "2024-01-02"}
    with pytest.raises(ValueError, match="Unknown format: yaml"):
        dump({}, format="yaml")


def test_schema_dump_and_safe_dump() -> None:
    @valida.schema
    def invoice(s):
        s.field("total", "decimal")
        s.field("due", "date")

    assert invoice.dump({"total": "10.50", "due": "2024-05-01"}) == {"total": "10.50", "due": "2024-05-01"}
    assert json.loads(invoice.dump({"total": 3, "due": "2024-05-01"}, format="json"))["total"] == "3"
    assert invoice.safe_dump({"total": "x", "due": "2024-05-01"}).is_failure()
    assert invoice.safe_dump({"total": "1", "due": "2024-05-01"}).data == {"total": "1", "due": "2024-05-01"}
    with pytest.raises(ValidationError):
        invoice.dump({})
