"""chartbind public API.

Curated surface for application code: the option tree and builders, the
event bridge with its signal/kind enums, and the coercion errors handlers may
see. Diagnostics helpers live in ``chartbind.services``.
"""

from __future__ import annotations

from .options import (  # noqa: F401
    Animation,
    Axis,
    Chart,
    Color,
    ConfigNode,
    ConfigurationError,
    Configurable,
    DataLabels,
    EventOwner,
    Marker,
    OptionPath,
    PlotOptions,
    Series,
    Style,
    XAxis,
    YAxis,
)
from .events import (  # noqa: F401
    EventBridge,
    EventKind,
    FormatterKind,
    NativeSignal,
    NativeValue,
    TypeMismatchError,
    event_bridge,
)

__version__ = "0.1.0"
