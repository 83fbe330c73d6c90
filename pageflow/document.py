"""
Documents, page decorators and the pagination driver.

``Document.render`` lays out a copy of the element sequence page by page. The
driver keeps a cursor over the top-level elements: an element that reports
more content is rendered again on a new page, a completed element advances the
cursor on the same page. Recorded drawing operations reach the writer only
after the whole document has been laid out, so a failed layout never produces
partial output.
"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, List, Tuple, Union

from tqdm import tqdm

from .constants import EPSILON
from .elements.base import Context, Element
from .errors import LayoutOverflow
from .fonts import Builtin, FontCache, FontFamily
from .geometry import Margins, MarginsLike, Position, Size, as_margins
from .log import _debug, get_logger
from .render import Area, Renderer
from .settings import PageSettings
from .style import Style
from .text import Hyphenator, NoHyphenation
from .writer import DocumentWriter, ReportlabWriter

HeaderCallback = Callable[[int], Element]
PaperSize = Union[Size, Tuple[float, float]]


class PageDecorator(ABC):
    """Prepares every page before body content is rendered onto it."""

    @abstractmethod
    def decorate_page(self, context: Context, area: Area, style: Style) -> Area:
        """Decorate a new page and return the area left for content.

        Args:
            context: Render context.
            area: Area covering the whole page.
            style: Document default style.
        Returns:
            Content area.
        """


class SimplePageDecorator(PageDecorator):
    """Applies page margins and renders an optional per-page header.

    Args:
        margins: Page margins.
        header: Callback returning the header element for a 1-based page number.
    """

    def __init__(
        self,
        margins: MarginsLike | None = None,
        header: HeaderCallback | None = None,
    ) -> None:
        self.margins: Margins | None = as_margins(margins) if margins is not None else None
        self.header = header
        self._page = 0

    def set_margins(self, margins: MarginsLike) -> None:
        self.margins = as_margins(margins)

    def set_header(self, header: HeaderCallback) -> None:
        self.header = header

    def decorate_page(self, context: Context, area: Area, style: Style) -> Area:
        self._page += 1
        if self.margins is not None:
            area.add_margins(self.margins)
        if self.header is not None:
            element = self.header(self._page)
            result = element.render(context, area.copy(), style)
            area.add_offset(Position(0, result.size.height))
        return area


class Document:
    """A sequence of elements rendered onto pages.

    Example:
        >>> doc = Document()
        >>> doc.set_title("Demo")
        >>> doc.push(Paragraph("This is a demo document."))  # doctest: +SKIP
        >>> doc.render_to_bytes().startswith(b"%PDF")  # doctest: +SKIP
        True
    """

    def __init__(
        self,
        font_family: FontFamily | None = None,
        settings: PageSettings | None = None,
    ) -> None:
        self.settings = settings or PageSettings()
        self.font_cache = FontCache(font_family or FontFamily.from_builtin(Builtin.HELVETICA))
        self.hyphenator: Hyphenator = NoHyphenation()
        self.decorator: PageDecorator = SimplePageDecorator(self.settings.margins)
        self.elements: List[Element] = []

    @property
    def default_style(self) -> Style:
        return Style(font_size=self.settings.font_size, line_spacing=self.settings.line_spacing)

    def set_title(self, title: str) -> None:
        self.settings.title = title

    def set_paper_size(self, size: PaperSize) -> None:
        width, height = (size.width, size.height) if isinstance(size, Size) else size
        self.settings.page_width = width
        self.settings.page_height = height

    def set_font_size(self, font_size: float) -> None:
        self.settings.font_size = font_size

    def set_line_spacing(self, line_spacing: float) -> None:
        self.settings.line_spacing = line_spacing

    def set_hyphenator(self, hyphenator: Hyphenator, locale: str | None = None) -> None:
        self.hyphenator = hyphenator
        if locale is not None:
            self.settings.hyphenation_locale = locale

    def set_page_decorator(self, decorator: PageDecorator) -> None:
        self.decorator = decorator

    def add_font_family(self, family: FontFamily) -> str:
        """Register an additional font family and return the name to style with."""

        return self.font_cache.add_family(family)

    def push(self, element: Element) -> Document:
        self.elements.append(element)
        return self

    def render(self, writer: DocumentWriter) -> None:
        """Lay out the document and send it to ``writer``.

        The element tree is copied first, so rendering never changes the
        document and repeated renders produce identical output.

        Args:
            writer: Target document writer.
        Returns:
            None.
        Raises:
            PageflowError: Layout or font errors; the writer is not touched.
        """

        renderer = self.layout()
        renderer.flush(writer, self.font_cache, self.settings.title)

    def render_to_bytes(self) -> bytes:
        writer = ReportlabWriter()
        self.render(writer)
        return writer.serialize()

    def render_to_file(self, path: Path | str) -> Path:
        """Render the document as PDF to ``path`` and return the path."""

        output = Path(path)
        output.write_bytes(self.render_to_bytes())
        get_logger().info(f"Wrote {output}")
        return output

    def layout(self) -> Renderer:
        """Paginate a copy of the element tree into recorded pages.

        Returns:
            Renderer holding the recorded pages.
        Raises:
            LayoutOverflow: An element cannot fit on an empty page.
        """

        elements = copy.deepcopy(self.elements)
        decorator = copy.deepcopy(self.decorator)
        context = Context(self.font_cache, self.hyphenator, self.settings.hyphenation_locale)
        style = self.default_style
        renderer = Renderer()
        area = self._start_page(
            renderer=renderer, decorator=decorator, context=context, style=style
        )
        fresh = True
        progress = (
            tqdm(total=len(elements), desc="Rendering elements", unit="element")
            if self.settings.show_progress and elements
            else None
        )
        try:
            index = 0
            while index < len(elements):
                element = elements[index]
                result = element.render(context, area.copy(), style)
                if result.has_more:
                    if fresh and result.size.height <= EPSILON:
                        get_logger().error(
                            f"{element.name} does not fit on empty page {renderer.page_count()}"
                        )
                        raise LayoutOverflow(element.name, renderer.page_count())
                    _debug(msg=f"{element.name} continues after page {renderer.page_count()}")
                    area = self._start_page(
                        renderer=renderer, decorator=decorator, context=context, style=style
                    )
                    fresh = True
                    continue
                area.add_offset(Position(0, result.size.height))
                if result.size.height > EPSILON:
                    fresh = False
                index += 1
                if progress is not None:
                    progress.update(1)
        finally:
            if progress is not None:
                progress.close()
        return renderer

    def _start_page(
        self,
        *,
        renderer: Renderer,
        decorator: PageDecorator,
        context: Context,
        style: Style,
    ) -> Area:
        """Open a page and return its decorated content area.

        Args:
            renderer: Renderer receiving the page.
            decorator: Page decorator of this render.
            context: Render context.
            style: Document default style.
        Returns:
            Content area of the new page.
        """

        page = renderer.add_page(self.settings.page_size)
        return decorator.decorate_page(context, page.area(), style)
