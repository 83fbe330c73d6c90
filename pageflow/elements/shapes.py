"""Geometric primitives."""

from __future__ import annotations

import enum

from reportlab.lib import colors

from ..constants import EPSILON
from ..geometry import Position, Size
from ..render import Area
from ..style import LineStyle, Style
from .base import Context, Element, RenderResult


class ShapeKind(enum.Enum):
    LINE = "line"
    RECTANGLE = "rectangle"


class Shape(Element):
    """A line or rectangle of a fixed size, stroked with ``line_style``.

    A line runs from the top-left to the bottom-right corner of its box, so
    ``Shape.line(width)`` draws a horizontal rule. Shapes are never split: a
    shape taller than the remaining area moves to the next page.
    """

    def __init__(
        self,
        kind: ShapeKind,
        size: Size,
        line_style: LineStyle | None = None,
        fill: colors.Color | None = None,
    ) -> None:
        self.kind = kind
        self.size = size
        self.line_style = line_style or LineStyle()
        self.fill = fill

    @classmethod
    def line(cls, width: float, height: float = 0.0, line_style: LineStyle | None = None) -> Shape:
        return cls(ShapeKind.LINE, Size(width, height), line_style)

    @classmethod
    def rectangle(
        cls,
        width: float,
        height: float,
        line_style: LineStyle | None = None,
        fill: colors.Color | None = None,
    ) -> Shape:
        return cls(ShapeKind.RECTANGLE, Size(width, height), line_style, fill)

    def render(self, context: Context, area: Area, style: Style) -> RenderResult:
        thickness = self.line_style.thickness
        width = min(self.size.width, area.width)
        if self.kind is ShapeKind.LINE:
            height = self.size.height + thickness
        else:
            height = self.size.height
        if height > area.height + EPSILON:
            return RenderResult(has_more=True)

        offset = thickness / 2
        if self.kind is ShapeKind.LINE:
            area.draw_line(
                [Position(0, offset), Position(width, self.size.height + offset)],
                self.line_style,
            )
        else:
            area.draw_rect(
                Position(offset, offset),
                Size(max(0.0, width - thickness), max(0.0, height - thickness)),
                fill=self.fill,
                line_style=self.line_style,
            )
        return RenderResult(Size(width, height))
