"""Container elements: vertical stacking, padding, style overlays and frames."""

from __future__ import annotations

from typing import Iterable, List

from ..geometry import Margins, MarginsLike, Position, Size, as_margins
from ..render import Area
from ..style import LineStyle, Style
from .base import Context, Element, RenderResult


class LinearLayout(Element):
    """Stacks child elements vertically, each using the full width.

    Rendering stops as soon as a child reports more content or the area is
    exhausted; the next render resumes with the interrupted child.
    """

    def __init__(self, elements: Iterable[Element] = ()) -> None:
        self.elements: List[Element] = list(elements)
        self._index = 0

    @classmethod
    def vertical(cls) -> LinearLayout:
        return cls()

    def __len__(self) -> int:
        return len(self.elements)

    def push(self, element: Element) -> LinearLayout:
        self.elements.append(element)
        return self

    def element(self, element: Element) -> LinearLayout:
        return self.push(element)

    def render(self, context: Context, area: Area, style: Style) -> RenderResult:
        result = RenderResult()
        area = area.copy()
        while area.height > 0 and self._index < len(self.elements):
            child = self.elements[self._index].render(context, area.copy(), style)
            area.add_offset(Position(0, child.size.height))
            result.size = result.size.stack_vertical(child.size)
            if child.has_more:
                result.has_more = True
                return result
            self._index += 1
        result.has_more = self._index < len(self.elements)
        return result


class PaddedElement(Element):
    """Adds margins around a child element on every fragment."""

    def __init__(self, element: Element, margins: MarginsLike) -> None:
        self.element = element
        self.margins: Margins = as_margins(margins)

    def render(self, context: Context, area: Area, style: Style) -> RenderResult:
        inner = area.copy()
        inner.add_margins(self.margins)
        result = self.element.render(context, inner, style)
        if result.has_more and result.size.height <= 0:
            return RenderResult(has_more=True)
        result.size = Size(
            min(area.width, result.size.width + self.margins.horizontal),
            min(area.height, result.size.height + self.margins.vertical),
        )
        return result


class StyledElement(Element):
    """Renders a child with ``style`` overlaid on the inherited style."""

    def __init__(self, element: Element, style: Style) -> None:
        self.element = element
        self.style = style

    def render(self, context: Context, area: Area, style: Style) -> RenderResult:
        return self.element.render(context, area, style.merged(self.style))


class FramedElement(Element):
    """Draws a border around a child element.

    When the child continues on another page the frame stays open: the
    bottom edge is omitted on the interrupted fragment and the top edge on
    the continuation.
    """

    def __init__(self, element: Element, line_style: LineStyle | None = None) -> None:
        self.element = element
        self.line_style = line_style or LineStyle()
        self._is_first = True

    def render(self, context: Context, area: Area, style: Style) -> RenderResult:
        thickness = self.line_style.thickness
        top = thickness if self._is_first else 0.0
        inner = area.copy()
        inner.add_margins(Margins(top, thickness, thickness, thickness))
        result = self.element.render(context, inner, style)
        if result.has_more and result.size.height <= 0:
            return RenderResult(has_more=True)

        height = result.size.height + top
        if not result.has_more:
            height += thickness
        result.size = Size(area.width, min(height, area.height))

        offset = thickness / 2
        right = result.size.width - offset
        bottom = result.size.height - offset
        top_left = Position(offset, offset)
        top_right = Position(right, offset)
        bottom_left = Position(offset, bottom)
        bottom_right = Position(right, bottom)
        if self._is_first:
            area.draw_line([bottom_left, top_left, top_right, bottom_right], self.line_style)
        else:
            area.draw_line([Position(offset, 0), bottom_left], self.line_style)
            area.draw_line([Position(right, 0), bottom_right], self.line_style)
        if not result.has_more:
            area.draw_line([bottom_left, bottom_right], self.line_style)
        self._is_first = False
        return result
