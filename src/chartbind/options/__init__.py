"""Option tree and the fluent builders that write into it."""

from .tree import ConfigNode, ConfigurationError, OptionPath  # noqa: F401
from .configurable import Configurable, EventOwner  # noqa: F401
from .style import Animation, Color, Style  # noqa: F401
from .builders import (  # noqa: F401
    Axis,
    Chart,
    DataLabels,
    EventBinding,
    Marker,
    PlotOptions,
    Series,
    XAxis,
    YAxis,
)

__all__ = [
    "ConfigNode",
    "ConfigurationError",
    "OptionPath",
    "Configurable",
    "EventOwner",
    "Animation",
    "Color",
    "Style",
    "Axis",
    "Chart",
    "DataLabels",
    "EventBinding",
    "Marker",
    "PlotOptions",
    "Series",
    "XAxis",
    "YAxis",
]
