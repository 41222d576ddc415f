"""Typed coercion of native engine values.

The engine hands over loosely typed values (a point's ``x`` may be a number
on a numeric axis and a string on a category axis). ``NativeValue`` tags such
a value once at the boundary; the accessor functions then either return the
requested primitive or raise ``TypeMismatchError``. Nothing is converted
implicitly: ``as_string(42)`` fails rather than returning ``"42"``.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Any

import numpy as np

__all__ = [
    "TypeMismatchError",
    "ValueKind",
    "NativeValue",
    "as_double",
    "as_long",
    "as_string",
    "as_boolean",
    "has_value",
]

LONG_MAX = 2**63 - 1
LONG_MIN = -(2**63)


class TypeMismatchError(TypeError):
    """Raised when a native value's kind differs from the requested one."""

    def __init__(self, expected: "ValueKind", actual: "NativeValue", name: str | None = None):
        self.expected = expected
        self.actual = actual
        self.name = name
        subject = f"'{name}'" if name else "value"
        super().__init__(
            f"Expected {subject} to be {expected.value} but got {actual.kind.value} ({actual.raw!r})"
        )


class ValueKind(str, Enum):
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    NULL = "null"
    OBJECT = "object"


@dataclass(frozen=True)
class NativeValue:
    """A native value tagged with its kind.

    Attributes:
        kind: The detected ``ValueKind``.
        raw: The underlying Python value (numpy scalars are unwrapped).
    """

    kind: ValueKind
    raw: Any

    @classmethod
    def of(cls, raw: Any) -> "NativeValue":
        if isinstance(raw, NativeValue):
            return raw
        if isinstance(raw, np.generic):
            raw = raw.item()
        if raw is None:
            return cls(ValueKind.NULL, None)
        # bool is an Integral; classify it first
        if isinstance(raw, bool):
            return cls(ValueKind.BOOLEAN, raw)
        if isinstance(raw, numbers.Real):
            return cls(ValueKind.NUMBER, raw)
        if isinstance(raw, str):
            return cls(ValueKind.STRING, raw)
        return cls(ValueKind.OBJECT, raw)

    @property
    def is_null(self) -> bool:
        return self.kind is ValueKind.NULL


def as_double(value: Any, *, name: str | None = None) -> float:
    v = NativeValue.of(value)
    if v.kind is not ValueKind.NUMBER:
        raise TypeMismatchError(ValueKind.NUMBER, v, name)
    return float(v.raw)


def as_long(value: Any, *, name: str | None = None) -> int:
    """Integer view of the double coercion, truncated toward zero.

    Follows the engine host's 64-bit conversion: NaN becomes 0 and values
    outside the signed 64-bit range (including infinities) saturate.
    """
    number = as_double(value, name=name)
    if math.isnan(number):
        return 0
    if number >= LONG_MAX:
        return LONG_MAX
    if number <= LONG_MIN:
        return LONG_MIN
    return math.trunc(number)


def as_string(value: Any, *, name: str | None = None) -> str:
    v = NativeValue.of(value)
    if v.kind is not ValueKind.STRING:
        raise TypeMismatchError(ValueKind.STRING, v, name)
    return v.raw


def as_boolean(value: Any, *, name: str | None = None) -> bool:
    v = NativeValue.of(value)
    if v.kind is not ValueKind.BOOLEAN:
        raise TypeMismatchError(ValueKind.BOOLEAN, v, name)
    return v.raw


def has_value(value: Any) -> bool:
    return not NativeValue.of(value).is_null
