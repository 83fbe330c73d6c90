"""Element rendering protocol shared by all document elements."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..geometry import MarginsLike, Size
from ..style import LineStyle, Style
from ..text import Hyphenator, NoHyphenation

if TYPE_CHECKING:
    from ..fonts import FontCache
    from ..render import Area
    from .layout import FramedElement, PaddedElement, StyledElement


@dataclass(slots=True)
class RenderResult:
    """Outcome of one ``Element.render`` call.

    Args:
        size: Space used inside the received area; never larger than the area.
        has_more: Content remains and must be rendered into a fresh area.
    """

    size: Size = field(default_factory=Size)
    has_more: bool = False


@dataclass(slots=True)
class Context:
    """Document-wide services available while rendering.

    Args:
        font_cache: Font metrics cache of the document.
        hyphenator: Strategy used to break overflowing words.
        locale: Hyphenation locale.
    """

    font_cache: FontCache
    hyphenator: Hyphenator = field(default_factory=NoHyphenation)
    locale: str = "en_US"


class Element(ABC):
    """A node of the document tree that can render itself into an area.

    Subclasses implement ``render``. Elements are resumable: after a call
    returned ``has_more=True``, the next call with a fresh area continues
    where the previous one stopped.
    """

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    def render(self, context: Context, area: Area, style: Style) -> RenderResult:
        """Render as much of the element as fits into ``area``.

        Args:
            context: Document services (fonts, hyphenation).
            area: Drawing surface; may be modified by the element.
            style: Inherited style context.
        Returns:
            RenderResult describing used space and remaining content.
        """

    def padded(self, margins: MarginsLike) -> PaddedElement:
        from .layout import PaddedElement

        return PaddedElement(self, margins)

    def styled(self, style: Style) -> StyledElement:
        from .layout import StyledElement

        return StyledElement(self, style)

    def framed(self, line_style: LineStyle | None = None) -> FramedElement:
        from .layout import FramedElement

        return FramedElement(self, line_style or LineStyle())
