"""Representative option builders.

Every setter here is a thin ``set_option(fixed_path, value)`` call; the
interesting behaviour lives in ``Configurable`` and the option tree. Handler
and formatter setters register on the builder's event bridge and take
``None`` to clear.

Point event handlers are registered under a separate owner id
(``<owner_id>.point``) because the engine fires them from the
``point.events`` block rather than the series ``events`` block.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from chartbind.events import views
from chartbind.events.bridge import EventBridge, EventHandler, EventKind, Formatter, FormatterKind

from .configurable import Configurable, EventOwner
from .style import Animation, Color, Style
from .tree import ConfigNode

__all__ = [
    "Marker",
    "DataLabels",
    "PlotOptions",
    "Axis",
    "XAxis",
    "YAxis",
    "Series",
    "Chart",
    "EventBinding",
]

ColorValue = Union[str, Color, None]


class Marker(Configurable):
    class Symbol(str, Enum):
        CIRCLE = "circle"
        SQUARE = "square"
        DIAMOND = "diamond"
        TRIANGLE = "triangle"
        TRIANGLE_DOWN = "triangle-down"

    def set_enabled(self, enabled: bool) -> "Marker":
        return self.set_option("enabled", enabled)

    def set_fill_color(self, fill_color: ColorValue) -> "Marker":
        return self.set_option("fillColor", fill_color)

    def set_line_color(self, line_color: ColorValue) -> "Marker":
        return self.set_option("lineColor", line_color)

    def set_line_width(self, line_width: float) -> "Marker":
        return self.set_option("lineWidth", line_width)

    def set_radius(self, radius: float) -> "Marker":
        return self.set_option("radius", radius)

    def set_symbol(self, symbol: Optional["Marker.Symbol"]) -> "Marker":
        return self.set_option("symbol", symbol)

    def set_symbol_url(self, url: str) -> "Marker":
        return self.set_option("symbol", f"url({url})")

    def set_hover_state(self, hover_state: Optional["Marker"]) -> "Marker":
        return self.set_option("/states/hover", hover_state)

    def set_select_state(self, select_state: Optional["Marker"]) -> "Marker":
        return self.set_option("/states/select", select_state)


class DataLabels(Configurable):
    class Align(str, Enum):
        LEFT = "left"
        CENTER = "center"
        RIGHT = "right"

    def set_enabled(self, enabled: bool) -> "DataLabels":
        return self.set_option("enabled", enabled)

    def set_align(self, align: "DataLabels.Align") -> "DataLabels":
        return self.set_option("align", align)

    def set_color(self, color: ColorValue) -> "DataLabels":
        return self.set_option("color", color)

    def set_format(self, fmt: str) -> "DataLabels":
        return self.set_option("format", fmt)

    def set_rotation(self, rotation: float) -> "DataLabels":
        return self.set_option("rotation", rotation)

    def set_style(self, style: Optional[Style]) -> "DataLabels":
        return self.set_option("style", style)

    def set_x(self, x: float) -> "DataLabels":
        return self.set_option("x", x)

    def set_y(self, y: float) -> "DataLabels":
        return self.set_option("y", y)


class PlotOptions(EventOwner):
    """Options shared by all series types, plus series and point handlers."""

    class Stacking(str, Enum):
        NORMAL = "normal"
        PERCENT = "percent"

    class Cursor(str, Enum):
        DEFAULT = "default"
        POINTER = "pointer"
        CROSSHAIR = "crosshair"

    @property
    def point_owner_id(self) -> str:
        return f"{self.owner_id}.point"

    def set_allow_point_select(self, allow: bool) -> "PlotOptions":
        return self.set_option("allowPointSelect", allow)

    def set_animation(self, animation: Union[bool, Animation]) -> "PlotOptions":
        return self.set_option("animation", animation)

    def set_color(self, color: ColorValue) -> "PlotOptions":
        return self.set_option("color", color)

    def set_cursor(self, cursor: "PlotOptions.Cursor") -> "PlotOptions":
        return self.set_option("cursor", cursor)

    def set_data_labels(self, data_labels: Optional[DataLabels]) -> "PlotOptions":
        return self.set_option("dataLabels", data_labels)

    def set_enable_mouse_tracking(self, enabled: bool) -> "PlotOptions":
        return self.set_option("enableMouseTracking", enabled)

    def set_line_width(self, line_width: float) -> "PlotOptions":
        return self.set_option("lineWidth", line_width)

    def set_marker(self, marker: Optional[Marker]) -> "PlotOptions":
        return self.set_option("marker", marker)

    def set_shadow(self, shadow: bool) -> "PlotOptions":
        return self.set_option("shadow", shadow)

    def set_stacking(self, stacking: Optional["PlotOptions.Stacking"]) -> "PlotOptions":
        return self.set_option("stacking", stacking)

    def set_visible(self, visible: bool) -> "PlotOptions":
        return self.set_option("visible", visible)

    def set_z_index(self, z_index: int) -> "PlotOptions":
        return self.set_option("zIndex", z_index)

    # Series handlers ---------------------------------------------------
    def set_series_click_event_handler(self, handler: Optional[EventHandler]) -> "PlotOptions":
        return self._set_event_handler(EventKind.CLICK, handler, views.SeriesClickEvent)

    def set_series_checkbox_click_event_handler(
        self, handler: Optional[EventHandler]
    ) -> "PlotOptions":
        return self._set_event_handler(
            EventKind.CHECKBOX_CLICK, handler, views.SeriesCheckboxClickEvent
        )

    def set_series_hide_event_handler(self, handler: Optional[EventHandler]) -> "PlotOptions":
        return self._set_event_handler(EventKind.HIDE, handler, views.SeriesHideEvent)

    def set_series_show_event_handler(self, handler: Optional[EventHandler]) -> "PlotOptions":
        return self._set_event_handler(EventKind.SHOW, handler, views.SeriesShowEvent)

    def set_series_legend_item_click_event_handler(
        self, handler: Optional[EventHandler]
    ) -> "PlotOptions":
        return self._set_event_handler(
            EventKind.LEGEND_ITEM_CLICK, handler, views.SeriesLegendItemClickEvent
        )

    def set_series_mouse_over_event_handler(self, handler: Optional[EventHandler]) -> "PlotOptions":
        return self._set_event_handler(EventKind.MOUSE_OVER, handler, views.SeriesMouseOverEvent)

    def set_series_mouse_out_event_handler(self, handler: Optional[EventHandler]) -> "PlotOptions":
        return self._set_event_handler(EventKind.MOUSE_OUT, handler, views.SeriesMouseOutEvent)

    def get_series_click_event_handler(self) -> Optional[EventHandler]:
        return self._get_event_handler(EventKind.CLICK)

    # Point handlers ----------------------------------------------------
    def _set_point_handler(self, kind: EventKind, handler, view_type) -> "PlotOptions":
        return self._set_event_handler(kind, handler, view_type, owner_id=self.point_owner_id)

    def set_point_click_event_handler(self, handler: Optional[EventHandler]) -> "PlotOptions":
        return self._set_point_handler(EventKind.CLICK, handler, views.PointClickEvent)

    def set_point_select_event_handler(self, handler: Optional[EventHandler]) -> "PlotOptions":
        return self._set_point_handler(EventKind.SELECT, handler, views.PointSelectEvent)

    def set_point_unselect_event_handler(self, handler: Optional[EventHandler]) -> "PlotOptions":
        return self._set_point_handler(EventKind.UNSELECT, handler, views.PointUnselectEvent)

    def set_point_mouse_over_event_handler(self, handler: Optional[EventHandler]) -> "PlotOptions":
        return self._set_point_handler(EventKind.MOUSE_OVER, handler, views.PointMouseOverEvent)

    def set_point_mouse_out_event_handler(self, handler: Optional[EventHandler]) -> "PlotOptions":
        return self._set_point_handler(EventKind.MOUSE_OUT, handler, views.PointMouseOutEvent)

    def set_point_remove_event_handler(self, handler: Optional[EventHandler]) -> "PlotOptions":
        return self._set_point_handler(EventKind.REMOVE, handler, views.PointRemoveEvent)

    def set_point_update_event_handler(self, handler: Optional[EventHandler]) -> "PlotOptions":
        return self._set_point_handler(EventKind.UPDATE, handler, views.PointUpdateEvent)

    def set_point_drop_event_handler(self, handler: Optional[EventHandler]) -> "PlotOptions":
        return self._set_point_handler(EventKind.DROP, handler, views.PointDropEvent)

    def set_point_legend_item_click_event_handler(
        self, handler: Optional[EventHandler]
    ) -> "PlotOptions":
        return self._set_point_handler(
            EventKind.LEGEND_ITEM_CLICK, handler, views.PointLegendItemClickEvent
        )

    def get_point_click_event_handler(self) -> Optional[EventHandler]:
        return self._get_event_handler(EventKind.CLICK, owner_id=self.point_owner_id)

    # Formatters --------------------------------------------------------
    def set_data_labels_formatter(self, formatter: Optional[Formatter]) -> "PlotOptions":
        return self._set_formatter(FormatterKind.DATA_LABELS, formatter, views.DataLabelsData)

    def get_data_labels_formatter(self) -> Optional[Formatter]:
        return self._get_formatter(FormatterKind.DATA_LABELS)


class Axis(EventOwner):
    class Type(str, Enum):
        LINEAR = "linear"
        LOGARITHMIC = "logarithmic"
        DATE_TIME = "datetime"
        CATEGORY = "category"

    def set_title(self, text: Optional[str], style: Optional[Style] = None) -> "Axis":
        self.set_option("/title/text", text)
        if style is not None:
            self.set_option("/title/style", style)
        return self

    def set_type(self, axis_type: "Axis.Type") -> "Axis":
        return self.set_option("type", axis_type)

    def set_categories(self, categories: Sequence[str]) -> "Axis":
        return self.set_option("categories", list(categories))

    def set_min(self, minimum: Optional[float]) -> "Axis":
        return self.set_option("min", minimum)

    def set_max(self, maximum: Optional[float]) -> "Axis":
        return self.set_option("max", maximum)

    def set_extremes(self, minimum: Optional[float], maximum: Optional[float]) -> "Axis":
        return self.set_min(minimum).set_max(maximum)

    def set_reversed(self, reversed_: bool) -> "Axis":
        return self.set_option("reversed", reversed_)

    def set_grid_line_color(self, color: ColorValue) -> "Axis":
        return self.set_option("gridLineColor", color)

    def set_labels_style(self, style: Optional[Style]) -> "Axis":
        return self.set_option("/labels/style", style)

    def set_axis_set_extremes_event_handler(self, handler: Optional[EventHandler]) -> "Axis":
        return self._set_event_handler(EventKind.SET_EXTREMES, handler, views.AxisSetExtremesEvent)

    def get_axis_set_extremes_event_handler(self) -> Optional[EventHandler]:
        return self._get_event_handler(EventKind.SET_EXTREMES)

    def set_labels_formatter(self, formatter: Optional[Formatter]) -> "Axis":
        return self._set_formatter(FormatterKind.AXIS_LABELS, formatter, views.AxisLabelsData)

    def get_labels_formatter(self) -> Optional[Formatter]:
        return self._get_formatter(FormatterKind.AXIS_LABELS)


class XAxis(Axis):
    pass


class YAxis(Axis):
    def set_stack_labels_enabled(self, enabled: bool) -> "YAxis":
        return self.set_option("/stackLabels/enabled", enabled)

    def set_stack_labels_formatter(self, formatter: Optional[Formatter]) -> "YAxis":
        return self._set_formatter(FormatterKind.STACK_LABELS, formatter, views.StackLabelsData)


class Series(PlotOptions):
    """One data series; its ``id`` option doubles as the event owner id."""

    class Type(str, Enum):
        AREA = "area"
        AREA_SPLINE = "areaspline"
        BAR = "bar"
        COLUMN = "column"
        LINE = "line"
        PIE = "pie"
        SCATTER = "scatter"
        SPLINE = "spline"

    def __init__(self, *, owner_id: str | None = None, bridge: EventBridge | None = None) -> None:
        super().__init__(owner_id=owner_id, bridge=bridge)
        self.set_option("id", self.owner_id)

    def set_name(self, name: str) -> "Series":
        return self.set_option("name", name)

    def set_type(self, series_type: "Series.Type") -> "Series":
        return self.set_option("type", series_type)

    def set_stack(self, stack: Union[str, int]) -> "Series":
        return self.set_option("stack", stack)

    def set_x_axis(self, index: int) -> "Series":
        return self.set_option("xAxis", index)

    def set_y_axis(self, index: int) -> "Series":
        return self.set_option("yAxis", index)

    def set_plot_options(self, plot_options: PlotOptions) -> "Series":
        """Absorb a copy of ``plot_options`` at the series top level.

        Its series and point handlers and its formatters are copied onto this
        series as well, replacing any already registered for the same kind.
        """
        for key, value in plot_options.get_options().items():
            self.set_option(key, value)
        self._adopt_registrations(plot_options, ["", ".point"])
        return self

    def add_point(self, y: Any, x: Any = None, *, name: str | None = None) -> "Series":
        """Append a point: bare ``y``, ``[x, y]`` or ``{name, y}``."""
        if name is not None:
            point: Any = {"name": name, "y": y} if x is None else {"name": name, "x": x, "y": y}
        elif x is not None:
            point = [x, y]
        else:
            point = y
        return self.append_option("data", point)

    def set_points(self, points: Any) -> "Series":
        """Replace all points (sequence of y values, ``[x, y]`` pairs or an array)."""
        return self.set_option("data", points)

    def get_points(self) -> List[Any]:
        return list(self.get_option("data") or [])


@dataclass(frozen=True)
class EventBinding:
    """Where the engine should attach a native callback or formatter."""

    path: str
    owner_id: str
    kind: str
    callback: Callable[..., Any]


# Option path (relative to the owner's prefix) of each formatter kind
FORMATTER_PATHS: Dict[str, str] = {
    FormatterKind.TOOLTIP.value: "/tooltip/formatter",
    FormatterKind.DATA_LABELS.value: "/dataLabels/formatter",
    FormatterKind.AXIS_LABELS.value: "/labels/formatter",
    FormatterKind.STACK_LABELS.value: "/stackLabels/formatter",
    FormatterKind.LEGEND_LABELS.value: "/legend/labelFormatter",
}


class Chart(EventOwner):
    """Top-level chart: chart options plus live series, axes and plot options.

    Series and axes added with ``add_series`` / ``add_x_axis`` /
    ``add_y_axis`` stay owned by the chart and are read again each time
    ``render_options`` runs, unlike values passed to ``set_option`` which are
    copied at the time they are set. Plot options set on the chart have their
    options copied but are themselves kept, so their handlers and formatters
    stay registered and appear in ``event_bindings``.
    """

    class ZoomType(str, Enum):
        X = "x"
        Y = "y"
        XY = "xy"

    def __init__(self, *, owner_id: str | None = None, bridge: EventBridge | None = None) -> None:
        super().__init__(owner_id=owner_id, bridge=bridge)
        self._series: List[Series] = []
        self._x_axes: List[XAxis] = []
        self._y_axes: List[YAxis] = []
        self._plot_options: Dict[str, PlotOptions] = {}

    # Chart options -------------------------------------------------------
    def set_type(self, series_type: Series.Type) -> "Chart":
        return self.set_option("/chart/type", series_type)

    def set_title(self, text: Optional[str], style: Optional[Style] = None) -> "Chart":
        self.set_option("/title/text", text)
        if style is not None:
            self.set_option("/title/style", style)
        return self

    def set_subtitle(self, text: Optional[str]) -> "Chart":
        return self.set_option("/subtitle/text", text)

    def set_animation(self, animation: Union[bool, Animation]) -> "Chart":
        return self.set_option("/chart/animation", animation)

    def set_background_color(self, color: ColorValue) -> "Chart":
        return self.set_option("/chart/backgroundColor", color)

    def set_border_color(self, color: ColorValue) -> "Chart":
        return self.set_option("/chart/borderColor", color)

    def set_border_width(self, width: float) -> "Chart":
        return self.set_option("/chart/borderWidth", width)

    def set_width(self, width: int) -> "Chart":
        return self.set_option("/chart/width", width)

    def set_height(self, height: int) -> "Chart":
        return self.set_option("/chart/height", height)

    def set_margin(self, top: float, right: float, bottom: float, left: float) -> "Chart":
        return self.set_option("/chart/margin", [top, right, bottom, left])

    def set_zoom_type(self, zoom_type: Optional["Chart.ZoomType"]) -> "Chart":
        return self.set_option("/chart/zoomType", zoom_type)

    def set_colors(self, *colors: Union[str, Color]) -> "Chart":
        return self.set_option("colors", list(colors))

    def set_series_plot_options(self, plot_options: Optional[PlotOptions]) -> "Chart":
        return self._set_plot_options("series", plot_options)

    def set_type_plot_options(
        self, series_type: Series.Type, plot_options: Optional[PlotOptions]
    ) -> "Chart":
        return self._set_plot_options(series_type.value, plot_options)

    def get_plot_options(self, key: str = "series") -> Optional[PlotOptions]:
        """Plot options set for ``key`` (``"series"`` or a series type name)."""
        return self._plot_options.get(key)

    def _set_plot_options(self, key: str, plot_options: Optional[PlotOptions]) -> "Chart":
        if plot_options is None:
            self._plot_options.pop(key, None)
        else:
            self._plot_options[key] = plot_options
        return self.set_option(f"/plotOptions/{key}", plot_options)

    # Children ------------------------------------------------------------
    def create_series(self) -> Series:
        return Series(bridge=self.bridge)

    def add_series(self, series: Series) -> "Chart":
        self._series.append(series)
        return self

    def remove_series(self, series: Series) -> bool:
        if series in self._series:
            self._series.remove(series)
            return True
        return False

    def get_series(self, series_id: Optional[str] = None) -> Union[List[Series], Series, None]:
        if series_id is None:
            return list(self._series)
        for series in self._series:
            if series.owner_id == series_id:
                return series
        return None

    def add_x_axis(self, axis: Optional[XAxis] = None) -> XAxis:
        axis = axis or XAxis(bridge=self.bridge)
        self._x_axes.append(axis)
        return axis

    def add_y_axis(self, axis: Optional[YAxis] = None) -> YAxis:
        axis = axis or YAxis(bridge=self.bridge)
        self._y_axes.append(axis)
        return axis

    # Chart handlers ------------------------------------------------------
    def set_click_event_handler(self, handler: Optional[EventHandler]) -> "Chart":
        return self._set_event_handler(EventKind.CLICK, handler, views.ChartClickEvent)

    def set_load_event_handler(self, handler: Optional[EventHandler]) -> "Chart":
        return self._set_event_handler(EventKind.LOAD, handler, views.ChartLoadEvent)

    def set_redraw_event_handler(self, handler: Optional[EventHandler]) -> "Chart":
        return self._set_event_handler(EventKind.REDRAW, handler, views.ChartRedrawEvent)

    def set_selection_event_handler(self, handler: Optional[EventHandler]) -> "Chart":
        return self._set_event_handler(EventKind.SELECTION, handler, views.ChartSelectionEvent)

    def set_drilldown_event_handler(self, handler: Optional[EventHandler]) -> "Chart":
        return self._set_event_handler(EventKind.DRILLDOWN, handler, views.DrilldownEvent)

    def set_drillup_event_handler(self, handler: Optional[EventHandler]) -> "Chart":
        return self._set_event_handler(EventKind.DRILLUP, handler, views.DrillupEvent)

    def get_click_event_handler(self) -> Optional[EventHandler]:
        return self._get_event_handler(EventKind.CLICK)

    # Chart formatters ----------------------------------------------------
    def set_tooltip_formatter(self, formatter: Optional[Formatter]) -> "Chart":
        return self._set_formatter(FormatterKind.TOOLTIP, formatter, views.ToolTipData)

    def get_tooltip_formatter(self) -> Optional[Formatter]:
        return self._get_formatter(FormatterKind.TOOLTIP)

    def set_legend_labels_formatter(self, formatter: Optional[Formatter]) -> "Chart":
        return self._set_formatter(FormatterKind.LEGEND_LABELS, formatter, views.LegendLabelsData)

    # Engine handoff ------------------------------------------------------
    def render_options(self) -> ConfigNode:
        """Full snapshot handed to the engine at render/update time."""
        snapshot = self.get_options()
        if self._x_axes:
            snapshot.set("xAxis", [axis.get_options() for axis in self._x_axes])
        if self._y_axes:
            snapshot.set("yAxis", [axis.get_options() for axis in self._y_axes])
        snapshot.set("series", [series.get_options() for series in self._series])
        return snapshot

    def event_bindings(self) -> List[EventBinding]:
        """Native callbacks and formatters the engine must attach, keyed by option path."""
        bindings: List[EventBinding] = []
        bridge = self.bridge

        def collect(owner_id: str, events_prefix: str, formatter_prefix: str = "") -> None:
            for kind in bridge.registered_kinds(owner_id):
                bindings.append(
                    EventBinding(
                        path=f"{events_prefix}/events/{kind}",
                        owner_id=owner_id,
                        kind=kind,
                        callback=bridge.native_callback(owner_id, kind),
                    )
                )
            for kind in bridge.formatter_kinds(owner_id):
                bindings.append(
                    EventBinding(
                        path=formatter_prefix + FORMATTER_PATHS.get(kind, f"/{kind}/formatter"),
                        owner_id=owner_id,
                        kind=kind,
                        callback=bridge.native_formatter(owner_id, kind),
                    )
                )

        # chart events live under /chart, chart formatters at the root
        collect(self.owner_id, "/chart")
        for key, plot_options in self._plot_options.items():
            prefix = f"/plotOptions/{key}"
            collect(plot_options.owner_id, prefix, prefix)
            collect(plot_options.point_owner_id, f"{prefix}/point")
        for index, axis in enumerate(self._x_axes):
            collect(axis.owner_id, f"/xAxis/{index}", f"/xAxis/{index}")
        for index, axis in enumerate(self._y_axes):
            collect(axis.owner_id, f"/yAxis/{index}", f"/yAxis/{index}")
        for index, series in enumerate(self._series):
            prefix = f"/series/{index}"
            collect(series.owner_id, prefix, prefix)
            collect(series.point_owner_id, f"{prefix}/point")
        return bindings
