"""Normalisation of typed option values into tree values.

Typed setters on builders hand arbitrary Python objects to
``Configurable.set_option``; this module maps them onto the primitive shapes
the tree stores:

 - ``Enum`` members become their wire value
 - color objects become a hex/rgb string or a gradient node
 - nested builders become a copy of their option tree
 - numpy arrays / scalars become lists / Python scalars
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any, Protocol, runtime_checkable

import numpy as np

from .tree import ConfigNode

__all__ = ["normalize_option_value", "OptionSource", "OptionValueSource"]


@runtime_checkable
class OptionSource(Protocol):  # pragma: no cover - structural only
    def get_options(self) -> ConfigNode: ...


@runtime_checkable
class OptionValueSource(Protocol):  # pragma: no cover - structural only
    """Value objects (colors) that resolve to a single option value."""

    def get_option_value(self) -> Any: ...


def normalize_option_value(value: Any) -> Any:
    # str/int based enums would otherwise pass as plain scalars
    if isinstance(value, Enum):
        return normalize_option_value(value.value)
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, OptionValueSource):
        return normalize_option_value(value.get_option_value())
    if isinstance(value, ConfigNode):
        return value.copy()
    if isinstance(value, OptionSource):
        # get_options() already hands out a detached copy
        return value.get_options()
    if isinstance(value, np.ndarray):
        return [normalize_option_value(v) for v in value.tolist()]
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, Mapping):
        return {key: normalize_option_value(v) for key, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [normalize_option_value(v) for v in value]
    # Leave anything else for the tree to reject with a ConfigurationError
    return value
