"""Hierarchical option tree addressed by slash-delimited paths.

Every option builder owns exactly one ``ConfigNode`` root and mutates it
through ``ConfigNode.set``. The tree has no schema: any non-empty string is
a legal segment.

Policy summary:
 - Intermediate containers are created on demand and never replaced by a
   descending write.
 - The terminal value is replaced wholesale (a scalar may replace a
   container at the exact same path).
 - Descending through an existing scalar, ``None`` or sequence raises
   ``ConfigurationError`` and leaves the tree untouched.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Tuple, Union

from chartbind.config.settings import JSON_INDENT, PATH_DELIMITER

__all__ = [
    "ConfigurationError",
    "ConfigNode",
    "ConfigValue",
    "OptionPath",
    "copy_value",
]

log = logging.getLogger(__name__)

_SCALAR_TYPES = (str, bool, int, float, type(None))

ConfigValue = Union[None, bool, int, float, str, "ConfigNode", List[Any]]


class ConfigurationError(ValueError):
    """Raised for malformed paths, path collisions and unsupported values."""


@dataclass(frozen=True)
class OptionPath:
    """Parsed, non-empty sequence of path segments."""

    segments: Tuple[str, ...]

    @classmethod
    def parse(cls, raw: Union[str, "OptionPath"]) -> "OptionPath":
        if isinstance(raw, OptionPath):
            return raw
        if not isinstance(raw, str):
            raise ConfigurationError(f"Option path must be a string, got {type(raw).__name__}")
        segments = tuple(seg for seg in raw.split(PATH_DELIMITER) if seg)
        if not segments:
            raise ConfigurationError(f"Option path has no segments: {raw!r}")
        return cls(segments)

    @property
    def parents(self) -> Tuple[str, ...]:
        return self.segments[:-1]

    @property
    def terminal(self) -> str:
        return self.segments[-1]

    def __str__(self) -> str:
        return PATH_DELIMITER + PATH_DELIMITER.join(self.segments)


def _structural(value: Any) -> ConfigValue:
    """Convert plain nested data (dicts, lists, tuples) into tree values."""
    if isinstance(value, ConfigNode):
        return value.copy()
    if isinstance(value, _SCALAR_TYPES):
        return value
    if isinstance(value, Mapping):
        return ConfigNode(value)
    if isinstance(value, (list, tuple)):
        return [_structural(v) for v in value]
    raise ConfigurationError(f"Unsupported option value type: {type(value).__name__}")


def copy_value(value: ConfigValue) -> ConfigValue:
    if isinstance(value, ConfigNode):
        return value.copy()
    if isinstance(value, list):
        return [copy_value(v) for v in value]
    return value


def _plain(value: ConfigValue) -> Any:
    if isinstance(value, ConfigNode):
        return value.to_dict()
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value


class ConfigNode(Mapping):
    """One level of configuration: an ordered ``str -> ConfigValue`` mapping.

    Lookup methods (``get``, ``has``, ``[]``) accept full option paths as
    well as single keys, so ``node["/dataLabels/style/fontWeight"]`` reads a
    nested value directly.
    """

    __slots__ = ("_items",)

    def __init__(self, items: Mapping[str, Any] | None = None) -> None:
        self._items: Dict[str, ConfigValue] = {}
        if items:
            for key, value in items.items():
                if not isinstance(key, str) or not key or PATH_DELIMITER in key:
                    raise ConfigurationError(f"Option keys must be non-empty strings: {key!r}")
                self._items[key] = _structural(value)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def set(self, path: Union[str, OptionPath], value: Any) -> "ConfigNode":
        """Set ``value`` at ``path``, creating intermediate containers.

        Returns self so callers can chain writes on a bare node.
        """
        parsed = OptionPath.parse(path)
        stored = _structural(value)
        node = self
        for depth, segment in enumerate(parsed.parents):
            if segment not in node._items:
                child = ConfigNode()
                node._items[segment] = child
                node = child
                continue
            existing = node._items[segment]
            if not isinstance(existing, ConfigNode):
                prefix = PATH_DELIMITER + PATH_DELIMITER.join(parsed.segments[: depth + 1])
                log.debug(
                    "option path collision at %s while setting %s",
                    prefix,
                    parsed,
                    extra={"option_path": str(parsed)},
                )
                raise ConfigurationError(
                    f"Cannot set {parsed}: {prefix} already holds a "
                    f"{type(existing).__name__} value"
                )
            node = existing
        node._items[parsed.terminal] = stored
        return self

    def append(self, path: Union[str, OptionPath], value: Any) -> "ConfigNode":
        """Append ``value`` to the sequence at ``path``.

        An absent path is created holding ``[value]``; any other existing
        value raises ``ConfigurationError``.
        """
        parsed = OptionPath.parse(path)
        found, existing = self._lookup(parsed)
        if not found:
            return self.set(parsed, [value])
        if not isinstance(existing, list):
            log.debug("cannot append to %s", parsed, extra={"option_path": str(parsed)})
            raise ConfigurationError(
                f"Cannot append to {parsed}: it holds a {type(existing).__name__} value"
            )
        existing.append(_structural(value))
        return self

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def _lookup(self, path: Union[str, OptionPath]) -> Tuple[bool, ConfigValue]:
        parsed = OptionPath.parse(path)
        node: ConfigValue = self
        for segment in parsed.segments:
            if not isinstance(node, ConfigNode) or segment not in node._items:
                return False, None
            node = node._items[segment]
        return True, node

    def get(self, path: Union[str, OptionPath], default: Any = None) -> Any:  # type: ignore[override]
        found, value = self._lookup(path)
        return value if found else default

    def has(self, path: Union[str, OptionPath]) -> bool:
        """True when ``path`` is present, including an explicit ``None``."""
        return self._lookup(path)[0]

    def __getitem__(self, path: Union[str, OptionPath]) -> ConfigValue:
        found, value = self._lookup(path)
        if not found:
            raise KeyError(str(path))
        return value

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, OptionPath)):
            return False
        try:
            return self.has(path)
        except ConfigurationError:
            return False

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ConfigNode):
            return self._items == other._items
        if isinstance(other, Mapping):
            return self.to_dict() == dict(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ConfigNode({self.to_dict()!r})"

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------
    def copy(self) -> "ConfigNode":
        clone = ConfigNode()
        for key, value in self._items.items():
            clone._items[key] = copy_value(value)
        return clone

    def to_dict(self) -> Dict[str, Any]:
        return {key: _plain(value) for key, value in self._items.items()}

    def to_json(self) -> str:
        if JSON_INDENT:
            return json.dumps(self.to_dict(), indent=int(JSON_INDENT))
        return json.dumps(self.to_dict(), separators=(",", ":"))
