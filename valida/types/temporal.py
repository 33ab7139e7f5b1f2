"""Temporal Types

Date, DateTime and Time coercion over the stdlib datetime family.

Strings are tried in order: ISO-8601, a short list of fixed formats, then
the permissive dateutil parser. Numbers are read as Unix epoch seconds in
the configured zone (UTC unless VALIDA_EPOCH_TIMEZONE says otherwise).
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, time
from email.utils import parsedate_to_datetime
from typing import Any, Callable, ClassVar, TypeVar

from dateutil import parser as date_parser

from valida.config import get_settings
from valida.markers import COERCION_FAILED, Coerced, Present

from .base import Type, TypeKind

T = TypeVar("T")

DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d")
TIME_FORMATS = ("%H:%M", "%I:%M %p", "%I:%M:%S %p")


def _from_epoch(raw: Any) -> datetime | None:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)): return None
    if isinstance(raw, float) and not math.isfinite(raw): return None
    try:
        return datetime.fromtimestamp(raw, tz=get_settings().epoch_tz)
    except (OverflowError, OSError, ValueError):
        return None


def _first_parse(text: str, parsers: tuple[Callable[[str], T], ...]) -> T | None:
    for parse in parsers:
        try:
            return parse(text)
        except (ValueError, TypeError, OverflowError):
            continue
    return None


def _iso_datetime(text: str) -> datetime:
    return datetime.fromisoformat(text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text)


def _stripped(raw: Any) -> str | None:
    if not isinstance(raw, str): return None
    return raw.strip() or None


_DATE_PARSERS: tuple[Callable[[str], date], ...] = (
    date.fromisoformat,
    *(lambda text, fmt=fmt: datetime.strptime(text, fmt).date() for fmt in DATE_FORMATS),
    lambda text: date_parser.parse(text).date(),
)

_DATETIME_PARSERS: tuple[Callable[[str], datetime], ...] = (
    _iso_datetime,
    parsedate_to_datetime,
    date_parser.parse,
)

_TIME_PARSERS: tuple[Callable[[str], time], ...] = (
    time.fromisoformat,
    *(lambda text, fmt=fmt: datetime.strptime(text, fmt).time() for fmt in TIME_FORMATS),
    lambda text: date_parser.parse(text).timetz(),
)


@dataclass(frozen=True, slots=True)
class DateType(Type):
    kind: ClassVar[TypeKind] = TypeKind.DATE
    name: ClassVar[str] = "date"

    def coerce(self, raw: Any) -> Coerced:
        if isinstance(raw, datetime): return Present(raw.date())
        if isinstance(raw, date): return Present(raw)
        if (moment := _from_epoch(raw)) is not None: return Present(moment.date())
        if (text := _stripped(raw)) is not None and (parsed := _first_parse(text, _DATE_PARSERS)) is not None:
            return Present(parsed)
        return COERCION_FAILED

    def valid(self, value: Any) -> bool:
        return isinstance(value, date) and not isinstance(value, datetime)


@dataclass(frozen=True, slots=True)
class DateTimeType(Type):
    kind: ClassVar[TypeKind] = TypeKind.DATETIME
    name: ClassVar[str] = "datetime"

    def coerce(self, raw: Any) -> Coerced:
        if isinstance(raw, datetime): return Present(raw)
        if isinstance(raw, date): return Present(datetime(raw.year, raw.month, raw.day))
        # a bare time of day has no calendar date to widen onto
        if isinstance(raw, time): return COERCION_FAILED
        if (moment := _from_epoch(raw)) is not None: return Present(moment)
        if (text := _stripped(raw)) is not None and (parsed := _first_parse(text, _DATETIME_PARSERS)) is not None:
            return Present(parsed)
        return COERCION_FAILED

    def valid(self, value: Any) -> bool: return isinstance(value, datetime)


@dataclass(frozen=True, slots=True)
class TimeType(Type):
    kind: ClassVar[TypeKind] = TypeKind.TIME
    name: ClassVar[str] = "time"

    def coerce(self, raw: Any) -> Coerced:
        if isinstance(raw, time): return Present(raw)
        if isinstance(raw, datetime): return Present(raw.timetz())
        if isinstance(raw, date): return Present(time(0, 0))
        if (moment := _from_epoch(raw)) is not None: return Present(moment.timetz())
        if (text := _stripped(raw)) is not None and (parsed := _first_parse(text, _TIME_PARSERS)) is not None:
            return Present(parsed)
        return COERCION_FAILED

    def valid(self, value: Any) -> bool: return isinstance(value, time)
