"""Text elements: single lines, wrapped paragraphs and vertical breaks."""

from __future__ import annotations

from typing import Iterable, List

from ..constants import EPSILON
from ..geometry import Position, Size
from ..layout_utils import Alignment, alignment_offset
from ..markup import styled_strings_from_html
from ..render import Area
from ..style import Style, StyledLike, StyledString, as_styled, as_styled_list
from ..wrap import Line, Word, tokenize, wrap_lines
from .base import Context, Element, RenderResult


class Text(Element):
    """A single line of styled text that is never wrapped.

    Raises ``TextWidthExceeded`` while rendering if the text is wider than the
    area.
    """

    def __init__(self, text: StyledLike) -> None:
        self.text: StyledString = as_styled(text)

    def render(self, context: Context, area: Area, style: Style) -> RenderResult:
        run = self.text.restyled(style)
        metrics = run.style.line_metrics(context.font_cache)
        if metrics.line_height > area.height + EPSILON:
            return RenderResult(has_more=True)
        width = area.draw_text(context.font_cache, Position(), run.style, run.text)
        return RenderResult(Size(width, metrics.line_height))


class Paragraph(Element):
    """Wrapped, aligned text made of one or more styled runs.

    The paragraph is tokenized on its first render; each later render resumes
    after the last line drawn, including the remainder of a hyphenated word.

    Example:
        >>> Paragraph("Hello ").push(("world", Style(bold=True))).text
        'Hello world'
    """

    def __init__(
        self,
        text: Iterable[StyledLike] | StyledLike = (),
        alignment: Alignment = Alignment.LEFT,
    ) -> None:
        self.runs: List[StyledString] = as_styled_list(text) if text else []
        self.alignment = alignment
        self._words: List[Word] | None = None

    @classmethod
    def from_html(
        cls,
        html: str,
        alignment: Alignment = Alignment.LEFT,
        style: Style | None = None,
    ) -> Paragraph:
        """Build a paragraph from inline HTML markup (see ``markup``)."""

        return cls(styled_strings_from_html(html, style=style), alignment)

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)

    def push(self, text: StyledLike) -> Paragraph:
        """Append a styled run and return the paragraph."""

        self.runs.append(as_styled(text))
        return self

    def aligned(self, alignment: Alignment) -> Paragraph:
        self.alignment = alignment
        return self

    def render(self, context: Context, area: Area, style: Style) -> RenderResult:
        if self._words is None:
            self._words = tokenize([run.restyled(style) for run in self.runs])
        words = self._words
        result = RenderResult()
        width = 0.0
        y = 0.0
        last: Line | None = None
        lines = wrap_lines(
            words,
            cache=context.font_cache,
            width=area.width,
            hyphenator=context.hyphenator,
            locale=context.locale,
        )
        for line in lines:
            if line.metrics.line_height > area.height - y + EPSILON:
                result.has_more = True
                break
            is_last = line.carry is None and line.end_index >= len(words)
            self._draw_line(context=context, area=area, line=line, y=y, is_last=is_last)
            y += line.metrics.line_height
            width = max(width, min(line.width, area.width))
            last = line
        if last is not None:
            carry = [last.carry] if last.carry is not None else []
            self._words = carry + words[last.end_index:]
        result.size = Size(width, y)
        return result

    def _draw_line(
        self,
        *,
        context: Context,
        area: Area,
        line: Line,
        y: float,
        is_last: bool,
    ) -> None:
        """Draw one wrapped line at vertical offset ``y``.

        Args:
            context: Render context.
            area: Paragraph area.
            line: Line to draw.
            y: Top of the line box relative to the area.
            is_last: Whether this is the final line of the paragraph.
        Returns:
            None.
        """

        cache = context.font_cache
        x = alignment_offset(alignment=self.alignment, width=line.width, available=area.width)
        extra = 0.0
        if (
            self.alignment is Alignment.JUSTIFY
            and not is_last
            and not line.forced
            and not line.overflow
            and line.gap_count
        ):
            extra = max(0.0, area.width - line.width) / line.gap_count
        line_start = True
        for idx, word in enumerate(line.words):
            for piece in word.pieces:
                if not piece.text:
                    continue
                x += area.draw_text(
                    cache,
                    Position(x, y),
                    piece.style,
                    piece.text,
                    allow_overflow=line.overflow,
                    line_start=line_start,
                    ascent=line.metrics.ascent,
                )
                line_start = False
            if idx == len(line.words) - 1:
                break
            for run in word.space:
                x += area.draw_text(
                    cache,
                    Position(x, y),
                    run.style,
                    run.text,
                    allow_overflow=True,
                    line_start=False,
                    ascent=line.metrics.ascent,
                )
            x += extra


class Break(Element):
    """Vertical space measured in lines of the current style."""

    def __init__(self, lines: float = 1.0) -> None:
        self.lines = lines

    def render(self, context: Context, area: Area, style: Style) -> RenderResult:
        if self.lines <= 0:
            return RenderResult()
        height = style.line_metrics(context.font_cache).line_height * self.lines
        return RenderResult(Size(0.0, min(height, area.height)))


class PageBreak(Element):
    """Forces the following content onto a new page.

    The first render claims the rest of the area and asks for a fresh one;
    the second render completes without using space.
    """

    def __init__(self) -> None:
        self._broken = False

    def render(self, context: Context, area: Area, style: Style) -> RenderResult:
        if self._broken:
            return RenderResult()
        self._broken = True
        return RenderResult(Size(0.0, area.height), has_more=True)
