"""Fluent builder bases shared by every option class.

Subclasses expose typed setters that reduce to
``self.set_option(fixed_path, value)`` and return ``self`` so calls chain::

    Marker().set_enabled(True).set_radius(4).set_symbol(Marker.Symbol.DIAMOND)

``Configurable`` owns one ``ConfigNode`` root and nothing else; value
objects (colors, styles, markers) use it directly. ``EventOwner`` adds an
identity on an ``EventBridge`` (the module-level ``event_bridge`` unless one
is injected) for builders that carry handlers or formatters.
"""

from __future__ import annotations

import itertools
import weakref
from typing import Any, List, Optional, Type, TypeVar, Union

from chartbind.events.bridge import (
    EventBridge,
    EventHandler,
    EventKind,
    Formatter,
    FormatterKind,
    event_bridge,
)
from chartbind.events.views import EventView

from .tree import ConfigNode, OptionPath, copy_value
from .values import normalize_option_value

__all__ = ["Configurable", "EventOwner"]

_C = TypeVar("_C", bound="Configurable")
_E = TypeVar("_E", bound="EventOwner")

_owner_ids = itertools.count(1)


class Configurable:
    """Base for option builders: owns an option tree."""

    def __init__(self) -> None:
        self._options = ConfigNode()

    def set_option(self: _C, path: Union[str, OptionPath], value: Any) -> _C:
        """Set ``value`` at ``path`` and return self for chaining.

        Nested builders are copied in; later changes to them do not show up
        here unless they are set again.
        """
        self._options.set(path, normalize_option_value(value))
        return self

    def append_option(self: _C, path: Union[str, OptionPath], value: Any) -> _C:
        """Append ``value`` to the list at ``path`` (created when absent)."""
        self._options.append(path, normalize_option_value(value))
        return self

    def get_option(self, path: Union[str, OptionPath], default: Any = None) -> Any:
        return copy_value(self._options.get(path, default))

    def get_options(self) -> ConfigNode:
        """Detached snapshot of the option tree."""
        return self._options.copy()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(options={self._options.to_dict()!r})"


class EventOwner(Configurable):
    """Option builder that also owns handler and formatter registrations.

    Args:
        owner_id: Stable identity on the event bridge (e.g. a series id).
            When omitted a unique id is generated and the registrations are
            released automatically once the builder is garbage collected.
        bridge: Event bridge to register handlers on.
    """

    def __init__(self, *, owner_id: str | None = None, bridge: EventBridge | None = None) -> None:
        super().__init__()
        self._bridge = bridge if bridge is not None else event_bridge
        if owner_id is None:
            owner_id = f"{type(self).__name__.lower()}-{next(_owner_ids)}"
            weakref.finalize(self, self._bridge.release, owner_id)
        self._owner_id = owner_id

    @property
    def owner_id(self) -> str:
        return self._owner_id

    @property
    def bridge(self) -> EventBridge:
        return self._bridge

    # ------------------------------------------------------------------
    # Event handlers and formatters
    # ------------------------------------------------------------------
    def _set_event_handler(
        self: _E,
        kind: Union[str, EventKind],
        handler: Optional[EventHandler],
        view_type: Type[EventView],
        *,
        owner_id: str | None = None,
    ) -> _E:
        self._bridge.register(owner_id or self._owner_id, kind, handler, view_type=view_type)
        return self

    def _get_event_handler(
        self, kind: Union[str, EventKind], *, owner_id: str | None = None
    ) -> Optional[EventHandler]:
        return self._bridge.handler_for(owner_id or self._owner_id, kind)

    def _set_formatter(
        self: _E, kind: FormatterKind, formatter: Optional[Formatter], view_type: Type[EventView]
    ) -> _E:
        self._bridge.register_formatter(self._owner_id, kind, formatter, view_type=view_type)
        return self

    def _get_formatter(self, kind: FormatterKind) -> Optional[Formatter]:
        return self._bridge.formatter_for(self._owner_id, kind)

    def _adopt_registrations(self, source: "EventOwner", scopes: List[str]) -> None:
        """Copy ``source``'s handlers and formatters onto this owner.

        ``scopes`` lists sub-owner suffixes (``""`` for the owner itself,
        ``".point"`` for point handlers) copied between matching ids.
        """
        for scope in scopes:
            target = self._owner_id + scope
            for reg in source.bridge.registrations(source.owner_id + scope):
                self._bridge.register(target, reg.kind, reg.handler, view_type=reg.view_type)
            for fmt in source.bridge.formatter_registrations(source.owner_id + scope):
                self._bridge.register_formatter(
                    target, fmt.kind, fmt.formatter, view_type=fmt.view_type
                )

    def event_kinds(self) -> List[str]:
        return self._bridge.registered_kinds(self._owner_id)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(owner_id={self._owner_id!r}, options={self._options.to_dict()!r})"
