"""Event bridge, typed event views and native value coercion."""

from .bridge import (  # noqa: F401
    EventBridge,
    EventKind,
    Formatter,
    FormatterKind,
    NativeSignal,
    event_bridge,
)
from .coercion import (  # noqa: F401
    NativeValue,
    TypeMismatchError,
    ValueKind,
    as_boolean,
    as_double,
    as_long,
    as_string,
    has_value,
)

__all__ = [
    "EventBridge",
    "EventKind",
    "Formatter",
    "FormatterKind",
    "NativeSignal",
    "event_bridge",
    "NativeValue",
    "TypeMismatchError",
    "ValueKind",
    "as_boolean",
    "as_double",
    "as_long",
    "as_string",
    "has_value",
]
