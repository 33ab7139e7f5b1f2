"""Pipeline Markers

Explicit tri-state outcome for a single pipeline step:

- Present(value): a real value, which may legitimately be None
- ABSENT: the key was not supplied (or the field produced no output)
- COERCION_FAILED: a Type could not convert the raw value

None of these ever reach Success.data; Field and Schema unwrap Present and
drop ABSENT before assembling output.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Final, Literal, Union, final


class Marker(Enum):
    """Singleton non-values used inside the pipeline."""
    ABSENT = "absent"
    COERCION_FAILED = "coercion_failed"

    def __repr__(self) -> str:
        return self.name


ABSENT: Final = Marker.ABSENT
COERCION_FAILED: Final = Marker.COERCION_FAILED


@final
@dataclass(frozen=True, slots=True)
class Present:
    """A value that is actually there (None included)."""
    value: Any


Fetched = Union[Present, Literal[Marker.ABSENT]]
Coerced = Union[Present, Literal[Marker.COERCION_FAILED]]
