"""Tests for handler registration and dispatch on the event bridge."""

from __future__ import annotations

import gc

import pytest

from chartbind.events import EventBridge, EventKind, FormatterKind, NativeSignal
from chartbind.events.views import EventView, PointClickEvent, SeriesClickEvent, ToolTipData
from chartbind.options import Chart, PlotOptions, Series


class CountingView(EventView):
    __slots__ = ()
    built = 0

    def __init__(self, event, context=None):
        type(self).built += 1
        super().__init__(event, context)


def test_unregistered_dispatch_proceeds_without_building_view(bridge: EventBridge):
    CountingView.built = 0
    bridge.register("other", "click", lambda e: True, view_type=CountingView)
    assert bridge.dispatch("series-1", "click", {"x": 1}) is NativeSignal.PROCEED
    assert CountingView.built == 0


def test_boolean_result_maps_to_signal(bridge: EventBridge):
    bridge.register("a", EventKind.CLICK, lambda e: True)
    bridge.register("b", EventKind.CLICK, lambda e: False)
    assert bridge.dispatch("a", "click") is NativeSignal.PROCEED
    assert bridge.dispatch("b", "click") is NativeSignal.CANCEL
    assert NativeSignal.CANCEL.as_native() is False


def test_point_click_end_to_end(bridge: EventBridge):
    series = Series(owner_id="series-1", bridge=bridge)
    seen = []

    def on_click(event: PointClickEvent) -> bool:
        seen.append((event.get_x_as_double(), event.get_y_as_string()))
        return False

    bridge.register("series-1", "click", on_click)
    result = bridge.dispatch(series.owner_id, "click", {"x": 12.0, "y": "Q1"})
    assert result is NativeSignal.CANCEL
    assert seen == [(12.0, "Q1")]


def test_kind_accepts_enum_or_engine_name(bridge: EventBridge):
    handler = lambda e: True  # noqa: E731
    bridge.register("o", "mouseOver", handler)
    assert bridge.handler_for("o", EventKind.MOUSE_OVER) is handler
    assert bridge.registered_kinds("o") == ["mouseOver"]


def test_register_replaces_and_none_clears(bridge: EventBridge):
    calls = []
    bridge.register("o", "click", lambda e: calls.append("first") or True)
    bridge.register("o", "click", lambda e: calls.append("second") or True)
    bridge.dispatch("o", "click")
    assert calls == ["second"]
    assert len(bridge) == 1
    bridge.register("o", "click", None)
    assert bridge.handler_for("o", "click") is None
    assert bridge.dispatch("o", "click") is NativeSignal.PROCEED
    assert calls == ["second"]


def test_non_callable_handler_rejected(bridge: EventBridge):
    with pytest.raises(TypeError):
        bridge.register("o", "click", "not callable")  # type: ignore[arg-type]


def test_reregistering_during_dispatch_affects_next_firing_only(bridge: EventBridge):
    calls = []

    def second(event) -> bool:
        calls.append("second")
        return False

    def first(event) -> bool:
        calls.append("first")
        bridge.register("o", "click", second)
        return True

    bridge.register("o", "click", first)
    assert bridge.dispatch("o", "click") is NativeSignal.PROCEED
    assert bridge.dispatch("o", "click") is NativeSignal.CANCEL
    assert calls == ["first", "second"]


def test_handler_mutating_options_does_not_touch_prior_snapshot(bridge: EventBridge):
    series = Series(owner_id="s", bridge=bridge).set_name("before")
    snapshot = series.get_options()

    def rename(event) -> bool:
        series.set_name("after")
        return True

    series.set_point_click_event_handler(rename)
    bridge.dispatch(series.point_owner_id, "click", {"x": 1, "y": 2})
    assert snapshot["name"] == "before"
    assert series.get_option("name") == "after"


def test_handler_exception_propagates_and_is_recorded(bridge: EventBridge):
    def boom(event) -> bool:
        raise RuntimeError("handler failed")

    bridge.register("o", "load", boom)
    with pytest.raises(RuntimeError, match="handler failed"):
        bridge.dispatch("o", "load")
    failures = bridge.errors
    assert len(failures) == 1
    assert failures[0].owner_id == "o"
    assert failures[0].kind == "load"
    assert isinstance(failures[0].error, RuntimeError)


def test_coercion_failure_inside_handler_propagates(bridge: EventBridge):
    bridge.register("o", "click", lambda e: e.get_x_as_string() == "x")
    with pytest.raises(TypeError):
        bridge.dispatch("o", "click", {"x": 5})
    assert len(bridge.errors) == 1


def test_non_boolean_result_rejected(bridge: EventBridge):
    bridge.register("o", "click", lambda e: None)
    with pytest.raises(TypeError):
        bridge.dispatch("o", "click")
    bridge.register("o", "click", lambda e: 1)
    with pytest.raises(TypeError):
        bridge.dispatch("o", "click")


def test_native_signal_result_passes_through(bridge: EventBridge):
    bridge.register("o", "click", lambda e: NativeSignal.CANCEL)
    assert bridge.dispatch("o", "click") is NativeSignal.CANCEL


def test_repeated_firings_each_dispatch(bridge: EventBridge):
    count = []
    bridge.register("o", "redraw", lambda e: count.append(1) or True)
    for _ in range(3):
        bridge.dispatch("o", "redraw")
    assert len(count) == 3


def test_native_callback_returns_bool_and_passes_context(bridge: EventBridge):
    received = []

    def on_click(event: SeriesClickEvent) -> bool:
        received.append(event.get_series_name())
        return False

    bridge.register("s", "click", on_click, view_type=SeriesClickEvent)
    callback = bridge.native_callback("s", EventKind.CLICK)
    assert callback({"point": {"x": 1}}, series={"name": "Sales"}) is False
    assert received == ["Sales"]
    assert bridge.native_callback("nobody", "click")() is True


def test_registration_view_type_overrides_default(bridge: EventBridge):
    registration = bridge.register("o", "click", lambda e: True)
    assert registration.view_type is PointClickEvent
    custom = bridge.register("o", "click", lambda e: True, view_type=SeriesClickEvent)
    assert custom.view_type is SeriesClickEvent
    assert bridge.registration_for("o", "click") is custom
    assert bridge.register("o", "custom", lambda e: True).view_type is EventView


def test_tracing_records_outcomes(bridge: EventBridge):
    bridge.enable_tracing(capacity=3)
    bridge.register("o", "click", lambda e: False)
    bridge.dispatch("o", "click")
    bridge.dispatch("x", "click")
    assert [t.outcome for t in bridge.recent_traces()] == ["cancel", "unhandled"]
    for _ in range(5):
        bridge.dispatch("o", "click")
    assert len(bridge.recent_traces()) == 3
    bridge.clear_traces()
    bridge.enable_tracing(False)
    bridge.dispatch("o", "click")
    assert bridge.recent_traces() == []
    assert not bridge.tracing_enabled


def test_release_drops_owner_and_point_scope(bridge: EventBridge):
    plot = PlotOptions(owner_id="plot", bridge=bridge)
    plot.set_series_click_event_handler(lambda e: True)
    plot.set_point_click_event_handler(lambda e: True)
    bridge.register("plotter", "click", lambda e: True)
    assert bridge.release("plot") == 2
    assert plot.get_series_click_event_handler() is None
    assert plot.get_point_click_event_handler() is None
    assert bridge.handler_for("plotter", "click") is not None


def test_series_and_point_click_slots_are_separate(bridge: EventBridge):
    plot = PlotOptions(owner_id="p", bridge=bridge)
    series_handler = lambda e: True  # noqa: E731
    point_handler = lambda e: False  # noqa: E731
    plot.set_series_click_event_handler(series_handler)
    plot.set_point_click_event_handler(point_handler)
    assert plot.get_series_click_event_handler() is series_handler
    assert plot.get_point_click_event_handler() is point_handler
    assert plot.event_kinds() == ["click"]


def test_generated_owner_released_when_collected(bridge: EventBridge):
    chart = Chart(bridge=bridge)
    chart.set_load_event_handler(lambda e: True)
    owner = chart.owner_id
    assert bridge.handler_for(owner, "load") is not None
    del chart
    gc.collect()
    assert bridge.handler_for(owner, "load") is None


def test_explicit_owner_survives_builder_collection(bridge: EventBridge):
    Chart(owner_id="main", bridge=bridge).set_load_event_handler(lambda e: True)
    gc.collect()
    assert bridge.handler_for("main", "load") is not None


def test_clear_resets_registrations_and_errors(bridge: EventBridge):
    bridge.register("o", "click", lambda e: 1 / 0)
    with pytest.raises(ZeroDivisionError):
        bridge.dispatch("o", "click")
    bridge.clear()
    assert len(bridge) == 0
    assert bridge.errors == []


def test_formatters_live_beside_handlers(bridge: EventBridge):
    bridge.register("c", "click", lambda e: True)
    bridge.register_formatter("c", FormatterKind.TOOLTIP, lambda d: "tip")
    assert len(bridge) == 1
    assert bridge.registered_kinds("c") == ["click"]
    assert bridge.formatter_kinds("c") == ["tooltip"]
    registration = bridge.formatter_registrations("c")[0]
    assert registration.view_type is ToolTipData
    with pytest.raises(TypeError):
        bridge.register_formatter("c", "tooltip", "not callable")
    assert bridge.format("c", "tooltip") == "tip"


def test_format_without_formatter_is_none(bridge: EventBridge):
    bridge.enable_tracing()
    assert bridge.format("c", FormatterKind.LEGEND_LABELS, {"name": "x"}) is None
    bridge.register_formatter("c", "legendLabels", lambda d: d.get_series_name())
    assert bridge.format("c", "legendLabels", {"name": "x"}) == "x"
    assert [t.outcome for t in bridge.recent_traces()] == ["unhandled", "formatted"]


def test_release_drops_formatters_of_owner_and_point_scope(bridge: EventBridge):
    bridge.register_formatter("s", "dataLabels", lambda d: "a")
    bridge.register_formatter("s.point", "tooltip", lambda d: "b")
    bridge.register("s", "hide", lambda e: True)
    assert bridge.release("s") == 3
    assert bridge.formatter_for("s", "dataLabels") is None
    assert bridge.formatter_kinds("s.point") == []


def test_garbage_collected_owner_releases_formatters(bridge: EventBridge):
    plot = PlotOptions(bridge=bridge).set_data_labels_formatter(lambda d: "x")
    owner = plot.owner_id
    del plot
    gc.collect()
    assert bridge.formatter_for(owner, "dataLabels") is None
