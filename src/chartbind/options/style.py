"""Value objects converted to primitive option values: colors, styles, animation."""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Sequence, Union

from .configurable import Configurable

__all__ = ["Color", "Style", "Animation"]

GradientCoordinate = Union[int, float, str]
ColorSpec = Union[str, Sequence[float]]


def _rgb(r: int, g: int, b: int) -> str:
    return f"rgb({r},{g},{b})"


def _rgba(r: int, g: int, b: int, a: float) -> str:
    return f"rgba({r},{g},{b},{a})"


def _color_string(spec: ColorSpec) -> str:
    if isinstance(spec, str):
        return spec
    parts = list(spec)
    if len(parts) == 3:
        return _rgb(*(int(p) for p in parts))
    if len(parts) == 4:
        r, g, b, a = parts
        return _rgba(int(r), int(g), int(b), float(a))
    raise ValueError(f"Color components must be (r, g, b) or (r, g, b, a), got {spec!r}")


def _gradient_coordinate(value: GradientCoordinate) -> Any:
    # Floats are fractions of the element box and become percentages
    if isinstance(value, float):
        return f"{int(value * 100)}%"
    return value


class Color(Configurable):
    """A solid color or a linear gradient.

    A solid color resolves to its string form; once a gradient or a color
    stop is set the color resolves to the gradient option node instead.

    Example::

        Color().set_linear_gradient(0.0, 0.0, 1.0, 1.0)
               .add_color_stop(0, "#FFFFFF")
               .add_color_stop(1, (0, 0, 0))
    """

    def __init__(self, value: ColorSpec | None = None) -> None:
        super().__init__()
        self._value: str | None = _color_string(value) if value is not None else None
        self._stops: List[list] = []

    @classmethod
    def rgb(cls, r: int, g: int, b: int) -> "Color":
        return cls((r, g, b))

    @classmethod
    def rgba(cls, r: int, g: int, b: int, a: float) -> "Color":
        return cls((r, g, b, a))

    def set_linear_gradient(
        self,
        x0: GradientCoordinate,
        y0: GradientCoordinate,
        x1: GradientCoordinate,
        y1: GradientCoordinate,
    ) -> "Color":
        self._value = None
        coords = [_gradient_coordinate(c) for c in (x0, y0, x1, y1)]
        return self.set_option("linearGradient", coords)

    def add_color_stop(self, offset: float, color: ColorSpec) -> "Color":
        self._value = None
        self._stops.append([offset, _color_string(color)])
        return self.set_option("stops", self._stops)

    def get_option_value(self) -> Any:
        return self._value if self._value is not None else self.get_options()


class Style(Configurable):
    """CSS-like style block (``style`` options of titles, labels, tooltips)."""

    def set_color(self, color: Union[str, Color]) -> "Style":
        return self.set_option("color", color)

    def set_cursor(self, cursor: str) -> "Style":
        return self.set_option("cursor", cursor)

    def set_font(self, font: str) -> "Style":
        return self.set_option("font", font)

    def set_font_family(self, font_family: str) -> "Style":
        return self.set_option("fontFamily", font_family)

    def set_font_size(self, font_size: str) -> "Style":
        return self.set_option("fontSize", font_size)

    def set_font_style(self, font_style: str) -> "Style":
        return self.set_option("fontStyle", font_style)

    def set_font_weight(self, font_weight: str) -> "Style":
        return self.set_option("fontWeight", font_weight)

    def set_margin(self, margin: str) -> "Style":
        return self.set_option("margin", margin)

    def set_position(self, position: str) -> "Style":
        return self.set_option("position", position)

    def set_left(self, left: str) -> "Style":
        return self.set_option("left", left)

    def set_top(self, top: str) -> "Style":
        return self.set_option("top", top)


class Animation(Configurable):
    class Easing(str, Enum):
        LINEAR = "linear"
        SWING = "swing"

    def set_duration(self, duration: float) -> "Animation":
        return self.set_option("duration", duration)

    def set_easing(self, easing: Union["Animation.Easing", str]) -> "Animation":
        return self.set_option("easing", easing)
