"""Event bridge between the rendering engine and application handlers.

Each ``(owner_id, kind)`` slot holds at most one handler. When the engine
fires an event the bridge looks the slot up, builds the typed view for that
firing, calls the handler once and converts its boolean answer into a
``NativeSignal`` (``True`` lets the engine run its default action,
``False`` cancels it).

Behaviour notes:
 - No handler: ``PROCEED`` is returned and no view is built.
 - Handler exceptions are logged, recorded in ``errors`` and re-raised so the
   engine's callback boundary decides what happens next.
 - The slot is read once before the handler runs, so a handler may
   (re)register handlers for the same slot without affecting the current
   firing. Every firing is dispatched independently (no de-duplication).
 - Dispatch is synchronous and single-threaded; there is no locking.

Label formatters (tooltip, data labels, axis labels, ...) live in a second
table with the same slot rules; ``format`` returns the text to render, or
``None`` to let the engine hide the label.

Tracing (optional, disabled by default) keeps a fixed-size ring buffer of
recent dispatches for diagnostics.

Log records carry ``owner_id`` and ``event_kind`` attributes (``extra``) so
diagnostics can be filtered per owner.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from time import perf_counter
from typing import Any, Callable, Deque, Dict, List, Mapping, Optional, Tuple, Type, Union

from chartbind.config.settings import DEFAULT_TRACE_CAPACITY

from . import views
from .views import EventView

__all__ = [
    "EventKind",
    "FormatterKind",
    "NativeSignal",
    "EventHandler",
    "Formatter",
    "EventRegistration",
    "FormatterRegistration",
    "DispatchFailure",
    "DispatchTrace",
    "EventBridge",
    "event_bridge",
]

log = logging.getLogger(__name__)


class EventKind(str, Enum):  # str subclass so kinds compare equal to engine names
    CLICK = "click"
    LOAD = "load"
    REDRAW = "redraw"
    SELECTION = "selection"
    SELECT = "select"
    UNSELECT = "unselect"
    MOUSE_OVER = "mouseOver"
    MOUSE_OUT = "mouseOut"
    REMOVE = "remove"
    UPDATE = "update"
    LEGEND_ITEM_CLICK = "legendItemClick"
    DROP = "drop"
    CHECKBOX_CLICK = "checkboxClick"
    HIDE = "hide"
    SHOW = "show"
    SET_EXTREMES = "setExtremes"
    DRILLDOWN = "drilldown"
    DRILLUP = "drillup"


# View built for a kind when the registration does not name one
DEFAULT_VIEWS: Dict[str, Type[EventView]] = {
    EventKind.CLICK.value: views.PointClickEvent,
    EventKind.LOAD.value: views.ChartLoadEvent,
    EventKind.REDRAW.value: views.ChartRedrawEvent,
    EventKind.SELECTION.value: views.ChartSelectionEvent,
    EventKind.SELECT.value: views.PointSelectEvent,
    EventKind.UNSELECT.value: views.PointUnselectEvent,
    EventKind.MOUSE_OVER.value: views.PointMouseOverEvent,
    EventKind.MOUSE_OUT.value: views.PointMouseOutEvent,
    EventKind.REMOVE.value: views.PointRemoveEvent,
    EventKind.UPDATE.value: views.PointUpdateEvent,
    EventKind.LEGEND_ITEM_CLICK.value: views.SeriesLegendItemClickEvent,
    EventKind.DROP.value: views.PointDropEvent,
    EventKind.CHECKBOX_CLICK.value: views.SeriesCheckboxClickEvent,
    EventKind.HIDE.value: views.SeriesHideEvent,
    EventKind.SHOW.value: views.SeriesShowEvent,
    EventKind.SET_EXTREMES.value: views.AxisSetExtremesEvent,
    EventKind.DRILLDOWN.value: views.DrilldownEvent,
    EventKind.DRILLUP.value: views.DrillupEvent,
}


class FormatterKind(str, Enum):
    """Label formatter callbacks; each returns the text the engine renders."""

    TOOLTIP = "tooltip"
    DATA_LABELS = "dataLabels"
    AXIS_LABELS = "axisLabels"
    STACK_LABELS = "stackLabels"
    LEGEND_LABELS = "legendLabels"


DEFAULT_FORMATTER_VIEWS: Dict[str, Type[EventView]] = {
    FormatterKind.TOOLTIP.value: views.ToolTipData,
    FormatterKind.DATA_LABELS.value: views.DataLabelsData,
    FormatterKind.AXIS_LABELS.value: views.AxisLabelsData,
    FormatterKind.STACK_LABELS.value: views.StackLabelsData,
    FormatterKind.LEGEND_LABELS.value: views.LegendLabelsData,
}


class NativeSignal(Enum):
    """Control signal returned to the engine after a dispatch."""

    PROCEED = "proceed"
    CANCEL = "cancel"

    @classmethod
    def from_result(cls, result: Any) -> "NativeSignal":
        if isinstance(result, NativeSignal):
            return result
        if isinstance(result, bool):
            return cls.PROCEED if result else cls.CANCEL
        raise TypeError(
            f"Event handlers must return bool or NativeSignal, got {type(result).__name__}"
        )

    def as_native(self) -> bool:
        """Boolean form expected by the engine's callback convention."""
        return self is NativeSignal.PROCEED


EventHandler = Callable[[Any], Union[bool, NativeSignal]]
Formatter = Callable[[Any], Optional[str]]


@dataclass(frozen=True)
class EventRegistration:
    owner_id: str
    kind: str
    handler: EventHandler
    view_type: Type[EventView]


@dataclass(frozen=True)
class FormatterRegistration:
    owner_id: str
    kind: str
    formatter: Formatter
    view_type: Type[EventView]


@dataclass(frozen=True)
class DispatchFailure:
    owner_id: str
    kind: str
    error: BaseException


@dataclass(frozen=True)
class DispatchTrace:
    owner_id: str
    kind: str
    timestamp: float
    outcome: str  # "unhandled", "proceed", "cancel", "formatted" or "error"


def _kind_key(kind: Union[str, Enum]) -> str:
    return kind.value if isinstance(kind, Enum) else kind


def _log_context(key: Tuple[str, str]) -> Dict[str, str]:
    return {"owner_id": key[0], "event_kind": key[1]}


class EventBridge:
    """Holds handler and formatter registrations and dispatches native firings."""

    def __init__(self, *, trace_capacity: int = DEFAULT_TRACE_CAPACITY) -> None:
        self._registrations: Dict[Tuple[str, str], EventRegistration] = {}
        self._formatters: Dict[Tuple[str, str], FormatterRegistration] = {}
        self._errors: List[DispatchFailure] = []
        self._tracing_enabled = False
        self._traces: Deque[DispatchTrace] = deque(maxlen=max(1, trace_capacity))

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def register(
        self,
        owner_id: str,
        kind: Union[str, EventKind],
        handler: Optional[EventHandler],
        *,
        view_type: Optional[Type[EventView]] = None,
    ) -> Optional[EventRegistration]:
        """Store ``handler`` for ``(owner_id, kind)``; ``None`` clears the slot."""
        key = (owner_id, _kind_key(kind))
        if handler is None:
            if self._registrations.pop(key, None) is not None:
                log.debug("cleared %s handler for %s", key[1], owner_id, extra=_log_context(key))
            return None
        if not callable(handler):
            raise TypeError(f"Event handler for {key[1]} must be callable")
        registration = EventRegistration(
            owner_id=owner_id,
            kind=key[1],
            handler=handler,
            view_type=view_type or DEFAULT_VIEWS.get(key[1], EventView),
        )
        replaced = key in self._registrations
        self._registrations[key] = registration
        log.debug(
            "%s %s handler for %s",
            "replaced" if replaced else "registered",
            key[1],
            owner_id,
            extra=_log_context(key),
        )
        return registration

    def register_formatter(
        self,
        owner_id: str,
        kind: Union[str, FormatterKind],
        formatter: Optional[Formatter],
        *,
        view_type: Optional[Type[EventView]] = None,
    ) -> Optional[FormatterRegistration]:
        """Store ``formatter`` for ``(owner_id, kind)``; ``None`` clears the slot."""
        key = (owner_id, _kind_key(kind))
        if formatter is None:
            if self._formatters.pop(key, None) is not None:
                log.debug("cleared %s formatter for %s", key[1], owner_id, extra=_log_context(key))
            return None
        if not callable(formatter):
            raise TypeError(f"Formatter for {key[1]} must be callable")
        registration = FormatterRegistration(
            owner_id=owner_id,
            kind=key[1],
            formatter=formatter,
            view_type=view_type or DEFAULT_FORMATTER_VIEWS.get(key[1], EventView),
        )
        self._formatters[key] = registration
        log.debug("registered %s formatter for %s", key[1], owner_id, extra=_log_context(key))
        return registration

    def handler_for(self, owner_id: str, kind: Union[str, EventKind]) -> Optional[EventHandler]:
        registration = self._registrations.get((owner_id, _kind_key(kind)))
        return registration.handler if registration else None

    def registration_for(
        self, owner_id: str, kind: Union[str, EventKind]
    ) -> Optional[EventRegistration]:
        return self._registrations.get((owner_id, _kind_key(kind)))

    def formatter_for(self, owner_id: str, kind: Union[str, FormatterKind]) -> Optional[Formatter]:
        registration = self._formatters.get((owner_id, _kind_key(kind)))
        return registration.formatter if registration else None

    def registered_kinds(self, owner_id: str) -> List[str]:
        return [kind for (owner, kind) in self._registrations if owner == owner_id]

    def formatter_kinds(self, owner_id: str) -> List[str]:
        return [kind for (owner, kind) in self._formatters if owner == owner_id]

    def registrations(self, owner_id: str) -> List[EventRegistration]:
        return [r for r in self._registrations.values() if r.owner_id == owner_id]

    def formatter_registrations(self, owner_id: str) -> List[FormatterRegistration]:
        return [r for r in self._formatters.values() if r.owner_id == owner_id]

    def release(self, owner_id: str) -> int:
        """Drop every registration of ``owner_id`` and its scoped sub-owners.

        Sub-owners are ids of the form ``<owner_id>.<scope>`` (e.g. the
        ``.point`` scope used for point handlers). Handlers and formatters
        are both dropped. Returns how many registrations were removed.
        """
        scoped = owner_id + "."

        def owned(key: Tuple[str, str]) -> bool:
            return key[0] == owner_id or key[0].startswith(scoped)

        removed = 0
        for table in (self._registrations, self._formatters):
            keys = [key for key in table if owned(key)]
            for key in keys:
                del table[key]
            removed += len(keys)
        if removed:
            log.debug(
                "released %d registration(s) for %s", removed, owner_id, extra={"owner_id": owner_id}
            )
        return removed

    def clear(self) -> None:
        self._registrations.clear()
        self._formatters.clear()
        self._errors.clear()

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------
    def dispatch(
        self,
        owner_id: str,
        kind: Union[str, EventKind],
        payload: Any = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> NativeSignal:
        key = (owner_id, _kind_key(kind))
        registration = self._registrations.get(key)
        if registration is None:
            self._trace(key, "unhandled")
            return NativeSignal.PROCEED
        view = registration.view_type(payload, context)
        try:
            signal = NativeSignal.from_result(registration.handler(view))
        except Exception as exc:
            self._fail(key, exc, "handler")
            raise
        self._trace(key, signal.value)
        return signal

    def format(
        self,
        owner_id: str,
        kind: Union[str, FormatterKind],
        data: Any = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> Optional[str]:
        """Run the formatter for ``(owner_id, kind)``; ``None`` when unset."""
        key = (owner_id, _kind_key(kind))
        registration = self._formatters.get(key)
        if registration is None:
            self._trace(key, "unhandled")
            return None
        view = registration.view_type(data, context)
        try:
            text = registration.formatter(view)
            if text is not None and not isinstance(text, str):
                raise TypeError(f"Formatters must return str or None, got {type(text).__name__}")
        except Exception as exc:
            self._fail(key, exc, "formatter")
            raise
        self._trace(key, "formatted")
        return text

    def native_callback(
        self, owner_id: str, kind: Union[str, EventKind]
    ) -> Callable[..., bool]:
        """Return the callable handed to the engine for ``(owner_id, kind)``.

        The engine invokes it as ``callback(payload, **context)`` and receives
        ``True`` to continue its default action or ``False`` to cancel it.
        """
        kind_key = _kind_key(kind)

        def _callback(payload: Any = None, **context: Any) -> bool:
            return self.dispatch(owner_id, kind_key, payload, context).as_native()

        _callback.__name__ = f"on_{kind_key}"
        return _callback

    def native_formatter(
        self, owner_id: str, kind: Union[str, FormatterKind]
    ) -> Callable[..., Union[str, bool]]:
        """Return the formatter callable handed to the engine.

        The engine renders the returned text; ``False`` (from a ``None``
        result) tells it to show no label.
        """
        kind_key = _kind_key(kind)

        def _formatter(data: Any = None, **context: Any) -> Union[str, bool]:
            text = self.format(owner_id, kind_key, data, context)
            return False if text is None else text

        _formatter.__name__ = f"format_{kind_key}"
        return _formatter

    def _fail(self, key: Tuple[str, str], exc: Exception, role: str) -> None:
        self._errors.append(DispatchFailure(owner_id=key[0], kind=key[1], error=exc))
        self._trace(key, "error")
        log.error("%s %s for %s raised", key[1], role, key[0], exc_info=True, extra=_log_context(key))

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    @property
    def errors(self) -> List[DispatchFailure]:
        return list(self._errors)

    def __len__(self) -> int:
        return len(self._registrations)

    # ------------------------------------------------------------------
    # Tracing
    # ------------------------------------------------------------------
    def enable_tracing(self, enabled: bool = True, *, capacity: int | None = None) -> None:
        self._tracing_enabled = enabled
        if capacity is not None and capacity != self._traces.maxlen:
            self._traces = deque(self._traces, maxlen=max(1, capacity))

    @property
    def tracing_enabled(self) -> bool:
        return self._tracing_enabled

    def recent_traces(self) -> List[DispatchTrace]:
        return list(self._traces)

    def clear_traces(self) -> None:
        self._traces.clear()

    def _trace(self, key: Tuple[str, str], outcome: str) -> None:
        if self._tracing_enabled:
            self._traces.append(
                DispatchTrace(owner_id=key[0], kind=key[1], timestamp=perf_counter(), outcome=outcome)
            )


event_bridge = EventBridge()
