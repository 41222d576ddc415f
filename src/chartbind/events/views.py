"""Read-only event views handed to application handlers.

A view wraps one native payload (a mapping produced by the engine) plus the
contextual entities the event occurred on (``point``, ``series``, ``axis``).
Views are built per firing, keep no state of their own and are only valid
for the duration of the handler call.

Accessor naming follows the engine's fields: ``get_x_as_double`` /
``get_x_as_long`` / ``get_x_as_string`` / ``has_x_value``. Every typed
accessor goes through ``chartbind.events.coercion`` and raises
``TypeMismatchError`` on a kind mismatch.

Formatter data views (``ToolTipData`` and friends) use the same machinery for
the string-returning label formatters.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from .coercion import as_boolean, as_double, as_long, as_string, has_value

__all__ = [
    "EventView",
    "MouseEventView",
    "ChartClickEvent",
    "ChartSelectionEvent",
    "ChartLoadEvent",
    "ChartRedrawEvent",
    "PointEvent",
    "PointClickEvent",
    "PointSelectEvent",
    "PointUnselectEvent",
    "PointMouseOverEvent",
    "PointMouseOutEvent",
    "PointRemoveEvent",
    "PointUpdateEvent",
    "PointLegendItemClickEvent",
    "PointDropEvent",
    "SeriesEvent",
    "SeriesClickEvent",
    "SeriesHideEvent",
    "SeriesShowEvent",
    "SeriesCheckboxClickEvent",
    "SeriesLegendItemClickEvent",
    "SeriesMouseOverEvent",
    "SeriesMouseOutEvent",
    "AxisSetExtremesEvent",
    "DrilldownEvent",
    "DrillupEvent",
    "ToolTipData",
    "DataLabelsData",
    "AxisLabelsData",
    "StackLabelsData",
    "LegendLabelsData",
]


def _field(source: Any, name: str) -> Any:
    """Read ``name`` from a mapping or attribute-style native object."""
    if source is None:
        return None
    if isinstance(source, Mapping):
        return source.get(name)
    return getattr(source, name, None)


def _nested(source: Any, *names: str) -> Any:
    for name in names:
        source = _field(source, name)
        if source is None:
            return None
    return source


class EventView:
    """Base view over a native payload and its context references."""

    __slots__ = ("_event", "_context")

    def __init__(self, event: Any, context: Optional[Mapping[str, Any]] = None) -> None:
        self._event = event
        self._context = dict(context) if context else {}

    @property
    def native_event(self) -> Any:
        return self._event

    def context(self, name: str) -> Any:
        return self._context.get(name)

    def value(self, name: str) -> Any:
        """Raw payload field (no coercion)."""
        return _field(self._event, name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._event!r})"


class MouseEventView(EventView):
    __slots__ = ()

    def _int_field(self, name: str) -> int:
        raw = self.value(name)
        return as_long(raw, name=name) if has_value(raw) else 0

    def get_client_x(self) -> int:
        return self._int_field("clientX")

    def get_client_y(self) -> int:
        return self._int_field("clientY")

    def get_screen_x(self) -> int:
        return self._int_field("screenX")

    def get_screen_y(self) -> int:
        return self._int_field("screenY")

    def get_native_button(self) -> int:
        return self._int_field("button")

    def get_relative_x(self, target_left: int, scroll_left: int = 0) -> int:
        return self.get_client_x() - target_left + scroll_left

    def get_relative_y(self, target_top: int, scroll_top: int = 0) -> int:
        return self.get_client_y() - target_top + scroll_top

    # Modifier keys are truthy flags on the native event
    def is_alt_key_down(self) -> bool:
        return bool(self.value("altKey"))

    def is_control_key_down(self) -> bool:
        return bool(self.value("ctrlKey"))

    def is_meta_key_down(self) -> bool:
        return bool(self.value("metaKey"))

    def is_shift_key_down(self) -> bool:
        return bool(self.value("shiftKey"))


# ---------------------------------------------------------------------------
# Chart events
# ---------------------------------------------------------------------------
class _AxisValuesMixin:
    __slots__ = ()

    def _axis_field(self, axis: str, index: int, name: str) -> Any:
        axes = self.value(axis)  # type: ignore[attr-defined]
        if axes is None:
            raise IndexError(f"Event carries no {axis} values")
        try:
            entry = axes[index]
        except (IndexError, KeyError, TypeError):
            raise IndexError(f"No {axis} entry at index {index}") from None
        return _field(entry, name)


class ChartClickEvent(_AxisValuesMixin, MouseEventView):
    """Click on the plot area; exposes the axis values under the cursor."""

    __slots__ = ()

    def get_x_axis_value(self, axis_index: int = 0) -> float:
        return as_double(self._axis_field("xAxis", axis_index, "value"), name="xAxis.value")

    def get_x_axis_value_as_long(self, axis_index: int = 0) -> int:
        return as_long(self._axis_field("xAxis", axis_index, "value"), name="xAxis.value")

    def get_y_axis_value(self, axis_index: int = 0) -> float:
        return as_double(self._axis_field("yAxis", axis_index, "value"), name="yAxis.value")

    def get_y_axis_value_as_long(self, axis_index: int = 0) -> int:
        return as_long(self._axis_field("yAxis", axis_index, "value"), name="yAxis.value")


class ChartSelectionEvent(_AxisValuesMixin, MouseEventView):
    """Drag-selection on the plot area (zoom); ``is_reset`` for reset-zoom."""

    __slots__ = ()

    def is_reset(self) -> bool:
        return bool(self.value("resetSelection"))

    def get_x_axis_min(self, axis_index: int = 0) -> float:
        return as_double(self._axis_field("xAxis", axis_index, "min"), name="xAxis.min")

    def get_x_axis_min_as_long(self, axis_index: int = 0) -> int:
        return as_long(self._axis_field("xAxis", axis_index, "min"), name="xAxis.min")

    def get_x_axis_max(self, axis_index: int = 0) -> float:
        return as_double(self._axis_field("xAxis", axis_index, "max"), name="xAxis.max")

    def get_x_axis_max_as_long(self, axis_index: int = 0) -> int:
        return as_long(self._axis_field("xAxis", axis_index, "max"), name="xAxis.max")

    def get_y_axis_min(self, axis_index: int = 0) -> float:
        return as_double(self._axis_field("yAxis", axis_index, "min"), name="yAxis.min")

    def get_y_axis_min_as_long(self, axis_index: int = 0) -> int:
        return as_long(self._axis_field("yAxis", axis_index, "min"), name="yAxis.min")

    def get_y_axis_max(self, axis_index: int = 0) -> float:
        return as_double(self._axis_field("yAxis", axis_index, "max"), name="yAxis.max")

    def get_y_axis_max_as_long(self, axis_index: int = 0) -> int:
        return as_long(self._axis_field("yAxis", axis_index, "max"), name="yAxis.max")


class ChartLoadEvent(EventView):
    __slots__ = ()


class ChartRedrawEvent(EventView):
    __slots__ = ()


# ---------------------------------------------------------------------------
# Point events
# ---------------------------------------------------------------------------
class _PointValuesMixin:
    """x/y accessors over whatever object ``_values_source`` returns."""

    __slots__ = ()

    def _values_source(self) -> Any:  # pragma: no cover - overridden
        raise NotImplementedError

    def has_x_value(self) -> bool:
        return has_value(_field(self._values_source(), "x"))

    def get_x_as_double(self) -> float:
        return as_double(_field(self._values_source(), "x"), name="x")

    def get_x_as_long(self) -> int:
        return as_long(_field(self._values_source(), "x"), name="x")

    def get_x_as_string(self) -> str:
        return as_string(_field(self._values_source(), "x"), name="x")

    def has_y_value(self) -> bool:
        return has_value(_field(self._values_source(), "y"))

    def get_y_as_double(self) -> float:
        return as_double(_field(self._values_source(), "y"), name="y")

    def get_y_as_long(self) -> int:
        return as_long(_field(self._values_source(), "y"), name="y")

    def get_y_as_string(self) -> str:
        return as_string(_field(self._values_source(), "y"), name="y")


class PointEvent(_PointValuesMixin, MouseEventView):
    """Event fired on a single data point.

    The point is taken from the ``point`` context reference when the engine
    supplies one, otherwise from the payload itself (engines that fire point
    callbacks with the point as the payload).
    """

    __slots__ = ()

    @property
    def point(self) -> Any:
        point = self.context("point")
        return point if point is not None else self.native_event

    def _values_source(self) -> Any:
        return self.point

    def get_point_name(self) -> str:
        return as_string(_field(self.point, "name"), name="name")

    def get_series_id(self) -> Optional[str]:
        series = self.context("series") or _field(self.point, "series")
        raw = _nested(series, "options", "id")
        if raw is None:
            raw = _field(series, "id")
        return as_string(raw, name="series.id") if has_value(raw) else None

    def get_series_name(self) -> Optional[str]:
        series = self.context("series") or _field(self.point, "series")
        raw = _field(series, "name")
        return as_string(raw, name="series.name") if has_value(raw) else None


class PointClickEvent(PointEvent):
    __slots__ = ()


class PointSelectEvent(PointEvent):
    __slots__ = ()

    def is_accumulate(self) -> bool:
        """True when the selection adds to existing selections (ctrl/shift)."""
        return bool(self.value("accumulate"))


class PointUnselectEvent(PointEvent):
    __slots__ = ()

    def is_accumulate(self) -> bool:
        return bool(self.value("accumulate"))


class PointMouseOverEvent(PointEvent):
    __slots__ = ()


class PointMouseOutEvent(PointEvent):
    __slots__ = ()


class PointRemoveEvent(PointEvent):
    __slots__ = ()


class PointUpdateEvent(PointEvent):
    __slots__ = ()

    def get_new_options(self) -> Any:
        """Raw options the point is about to be updated with."""
        return self.value("options")


class PointLegendItemClickEvent(PointEvent):
    __slots__ = ()


class PointDropEvent(PointEvent):
    __slots__ = ()

    def get_new_y_as_double(self) -> float:
        return as_double(self.value("newY"), name="newY")


# ---------------------------------------------------------------------------
# Series events
# ---------------------------------------------------------------------------
class SeriesEvent(MouseEventView):
    __slots__ = ()

    @property
    def series(self) -> Any:
        return self.context("series")

    def get_series_id(self) -> Optional[str]:
        raw = _nested(self.series, "options", "id")
        if raw is None:
            raw = _field(self.series, "id")
        return as_string(raw, name="series.id") if has_value(raw) else None

    def get_series_name(self) -> Optional[str]:
        raw = _field(self.series, "name")
        return as_string(raw, name="series.name") if has_value(raw) else None


class SeriesClickEvent(SeriesEvent):
    """Click on a series; the engine reports the nearest point in ``point``."""

    __slots__ = ()

    @property
    def nearest_point(self) -> Any:
        return self.value("point")

    def get_nearest_point_name(self) -> str:
        return as_string(_field(self.nearest_point, "name"), name="point.name")

    def get_nearest_x_as_double(self) -> float:
        return as_double(_field(self.nearest_point, "x"), name="point.x")

    def get_nearest_x_as_long(self) -> int:
        return as_long(_field(self.nearest_point, "x"), name="point.x")

    def get_nearest_x_as_string(self) -> str:
        return as_string(_field(self.nearest_point, "x"), name="point.x")

    def get_nearest_y_as_double(self) -> float:
        return as_double(_field(self.nearest_point, "y"), name="point.y")

    def get_nearest_y_as_long(self) -> int:
        return as_long(_field(self.nearest_point, "y"), name="point.y")

    def get_nearest_y_as_string(self) -> str:
        return as_string(_field(self.nearest_point, "y"), name="point.y")


class SeriesHideEvent(SeriesEvent):
    __slots__ = ()


class SeriesShowEvent(SeriesEvent):
    __slots__ = ()


class SeriesCheckboxClickEvent(SeriesEvent):
    __slots__ = ()

    def is_checked(self) -> bool:
        return as_boolean(self.value("checked"), name="checked")


class SeriesLegendItemClickEvent(SeriesEvent):
    __slots__ = ()

    def is_visible(self) -> bool:
        return as_boolean(_field(self.series, "visible"), name="series.visible")


class SeriesMouseOverEvent(SeriesEvent):
    __slots__ = ()


class SeriesMouseOutEvent(SeriesEvent):
    __slots__ = ()


# ---------------------------------------------------------------------------
# Axis / drilldown events
# ---------------------------------------------------------------------------
class AxisSetExtremesEvent(EventView):
    """New axis extremes; ``min``/``max`` are null when zoom is reset."""

    __slots__ = ()

    def get_axis(self) -> Any:
        return self.context("axis")

    def has_min_value(self) -> bool:
        return has_value(self.value("min"))

    def has_max_value(self) -> bool:
        return has_value(self.value("max"))

    def get_min(self) -> Optional[float]:
        raw = self.value("min")
        return as_double(raw, name="min") if has_value(raw) else None

    def get_max(self) -> Optional[float]:
        raw = self.value("max")
        return as_double(raw, name="max") if has_value(raw) else None


class DrilldownEvent(EventView):
    """Drilldown on a chart; the clicked point is in the payload."""

    __slots__ = ()

    drilldown = True

    def is_drilldown(self) -> bool:
        return self.drilldown

    @property
    def point(self) -> Any:
        return self.value("point")

    def get_point_name(self) -> str:
        return as_string(_field(self.point, "name"), name="point.name")


class DrillupEvent(DrilldownEvent):
    """Drillup back to the parent level; carries no point."""

    __slots__ = ()

    drilldown = False


# ---------------------------------------------------------------------------
# Formatter data
# ---------------------------------------------------------------------------
# Formatters receive the engine's formatter context (``this`` in the engine's
# callback) as the payload and return the label text.
class _TotalMixin:
    __slots__ = ()

    def get_total(self) -> float:
        return as_double(self.value("total"), name="total")  # type: ignore[attr-defined]

    def get_total_as_long(self) -> int:
        return as_long(self.value("total"), name="total")  # type: ignore[attr-defined]


class _LabelledPointData(_TotalMixin, _PointValuesMixin, EventView):
    __slots__ = ()

    def _values_source(self) -> Any:
        return self.native_event

    def get_percentage(self) -> float:
        return as_double(self.value("percentage"), name="percentage")

    def get_point(self) -> Any:
        return self.value("point")

    def get_point_name(self) -> str:
        return as_string(_nested(self.native_event, "point", "name"), name="point.name")

    def get_series_name(self) -> str:
        return as_string(_nested(self.native_event, "series", "name"), name="series.name")


class ToolTipData(_LabelledPointData):
    """Tooltip formatter context for the hovered point."""

    __slots__ = ()


class DataLabelsData(_LabelledPointData):
    __slots__ = ()


class AxisLabelsData(EventView):
    """Axis label formatter context; ``value`` is the tick value."""

    __slots__ = ()

    def get_value_as_double(self) -> float:
        return as_double(self.value("value"), name="value")

    def get_value_as_long(self) -> int:
        return as_long(self.value("value"), name="value")

    def get_value_as_string(self) -> str:
        return as_string(self.value("value"), name="value")


class StackLabelsData(_TotalMixin, EventView):
    __slots__ = ()


class LegendLabelsData(EventView):
    """Legend label formatter context: a series, or a point for pie legends."""

    __slots__ = ()

    def get_series_id(self) -> Optional[str]:
        raw = _nested(self.native_event, "options", "id")
        return as_string(raw, name="options.id") if has_value(raw) else None

    def get_series_name(self) -> str:
        return as_string(self.value("name"), name="name")

    def get_point_name(self) -> str:
        return as_string(self.value("name"), name="name")
