"""Bulleted and numbered lists."""

from __future__ import annotations

from abc import abstractmethod
from typing import Iterable, List

from ..constants import DEFAULT_BULLET, EPSILON
from ..geometry import Position, Size
from ..render import Area
from ..style import Style
from .base import Context, Element, RenderResult
from .layout import LinearLayout

BULLET_SPACE = 5.67


class BulletPoint(Element):
    """An element indented behind a marker such as a bullet or a number.

    The marker is right-aligned in a column of width ``indent`` and drawn
    once, on the first fragment that renders content.

    Args:
        element: Item content.
        bullet: Marker text.
        indent: Width of the marker column; defaults to the marker width
            plus ``bullet_space``.
        bullet_space: Gap between the marker and the content.
    """

    def __init__(
        self,
        element: Element,
        bullet: str = DEFAULT_BULLET,
        indent: float | None = None,
        bullet_space: float = BULLET_SPACE,
    ) -> None:
        self.element = element
        self.bullet = bullet
        self.indent = indent
        self.bullet_space = bullet_space
        self._bullet_drawn = False

    def with_bullet(self, bullet: str) -> BulletPoint:
        self.bullet = bullet
        return self

    def with_indent(self, indent: float) -> BulletPoint:
        self.indent = indent
        return self

    def render(self, context: Context, area: Area, style: Style) -> RenderResult:
        cache = context.font_cache
        bullet_width = style.str_width(cache, self.bullet)
        indent = self.indent if self.indent is not None else bullet_width + self.bullet_space

        content = area.copy()
        content.add_offset(Position(indent, 0))
        result = self.element.render(context, content, style)
        if result.has_more and result.size.height <= 0:
            return result

        if not self._bullet_drawn:
            line_height = style.line_metrics(cache).line_height
            if line_height <= area.height + EPSILON:
                x = max(0.0, indent - bullet_width - self.bullet_space)
                area.draw_text(cache, Position(x, 0), style, self.bullet, allow_overflow=True)
                result.size = Size(
                    result.size.width,
                    max(result.size.height, min(line_height, area.height)),
                )
            self._bullet_drawn = True
        result.size = Size(min(area.width, result.size.width + indent), result.size.height)
        return result


class _MarkedList(Element):
    """Vertical list of items sharing a marker column sized to the widest label."""

    def __init__(self, elements: Iterable[Element] = ()) -> None:
        self.items: List[Element] = list(elements)
        self._layout: LinearLayout | None = None

    def __len__(self) -> int:
        return len(self.items)

    def push(self, element: Element) -> _MarkedList:
        self.items.append(element)
        return self

    def element(self, element: Element) -> _MarkedList:
        return self.push(element)

    @abstractmethod
    def labels(self) -> List[str]:
        """Return one marker label per item."""

    def render(self, context: Context, area: Area, style: Style) -> RenderResult:
        if self._layout is None:
            labels = self.labels()
            widest = max(
                (style.str_width(context.font_cache, label) for label in labels),
                default=0.0,
            )
            indent = widest + BULLET_SPACE
            self._layout = LinearLayout(
                BulletPoint(item, label, indent) for item, label in zip(self.items, labels)
            )
        return self._layout.render(context, area, style)


class UnorderedList(_MarkedList):
    """A list whose items share one bullet marker.

    Example:
        >>> UnorderedList([Paragraph("a"), Paragraph("b")]).labels()  # doctest: +SKIP
        ['–', '–']
    """

    def __init__(self, elements: Iterable[Element] = (), bullet: str = DEFAULT_BULLET) -> None:
        super().__init__(elements)
        self.bullet = bullet

    def labels(self) -> List[str]:
        return [self.bullet for _ in self.items]


class OrderedList(_MarkedList):
    """A list numbered ``start.``, ``start+1.``, ..."""

    def __init__(self, elements: Iterable[Element] = (), start: int = 1) -> None:
        super().__init__(elements)
        self.start = start

    def labels(self) -> List[str]:
        return [f"{self.start + idx}." for idx in range(len(self.items))]
