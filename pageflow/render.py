"""
In-memory drawing surfaces: pages, layers, areas and recorded drawing ops.

Elements never talk to the document writer directly. They draw onto an
``Area``, which records drawing operations on a layer of a ``Page``. The
``Renderer`` owns all pages and replays the recorded operations onto a
``DocumentWriter`` once the whole document has been laid out.

Coordinates are in points with the origin at the top-left corner of the page
and y growing downward; the writer converts them to PDF user space.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterable, List, Sequence, Tuple, Union

from reportlab.lib import colors

from .constants import EPSILON
from .errors import AreaConsumedError, FontLoadFailure, TextWidthExceeded
from .geometry import Margins, MarginsLike, Position, Size, as_margins
from .layout_utils import column_widths
from .log import get_logger
from .style import Effect, LineStyle, Style

if TYPE_CHECKING:
    from PIL.Image import Image as PILImage

    from .fonts import FontCache
    from .writer import DocumentWriter

UNDERLINE_OFFSET = 0.125
STRIKETHROUGH_OFFSET = 0.3
EFFECT_THICKNESS = 0.05


@dataclass(frozen=True, slots=True)
class TextOp:
    """A run of text drawn at a baseline position.

    Args:
        text: Characters to draw.
        font_name: Writer-facing font name.
        font_size: Font size in points.
        color: Fill color.
        position: Left end of the baseline, in page coordinates.
        offsets: Per-glyph x offsets when kerning applies, else None.
    """

    text: str
    font_name: str
    font_size: float
    color: colors.Color
    position: Position
    offsets: Tuple[float, ...] | None = None


@dataclass(frozen=True, slots=True)
class LineOp:
    points: Tuple[Position, ...]
    line_style: LineStyle


@dataclass(frozen=True, slots=True)
class RectOp:
    position: Position
    size: Size
    fill: colors.Color | None = None
    line_style: LineStyle | None = None


@dataclass(frozen=True, slots=True)
class ImageOp:
    """An image drawn into its (rotated) bounding box.

    Args:
        image: Decoded Pillow image.
        position: Top-left corner of the bounding box in page coordinates.
        size: Unrotated size of the drawn image.
        rotation: Clockwise rotation in degrees.
    """

    image: "PILImage"
    position: Position
    size: Size
    rotation: float = 0.0


DrawOp = Union[TextOp, LineOp, RectOp, ImageOp]


@dataclass(slots=True)
class Layer:
    """Ordered drawing operations sharing one z-level of a page."""

    index: int
    ops: List[DrawOp] = field(default_factory=list)


@dataclass(slots=True)
class Page:
    """A page with its size and its layers, lowest first."""

    number: int
    size: Size
    layers: List[Layer] = field(default_factory=list)

    def layer(self, index: int) -> Layer:
        """Return layer ``index``, creating missing layers on demand."""

        while len(self.layers) <= index:
            self.layers.append(Layer(len(self.layers)))
        return self.layers[index]

    def area(self) -> Area:
        """Return an area covering the whole page on the first layer."""

        return Area(self, 0, Position(), self.size)

    def ops(self) -> List[DrawOp]:
        """Return all operations in paint order."""

        return [op for layer in self.layers for op in layer.ops]


class Renderer:
    """Owns the pages of one render and replays them onto a writer."""

    def __init__(self) -> None:
        self.pages: List[Page] = []

    def add_page(self, size: Size) -> Page:
        page = Page(len(self.pages) + 1, size)
        page.layer(0)
        self.pages.append(page)
        get_logger().debug(f"Starting page {page.number}")
        return page

    def page_count(self) -> int:
        return len(self.pages)

    def flush(self, writer: DocumentWriter, cache: FontCache, title: str = "") -> None:
        """Send every recorded page to ``writer`` in order.

        Args:
            writer: Target document writer.
            cache: Font cache whose loaded fonts are embedded.
            title: Document title.
        Returns:
            None.
        Raises:
            FontLoadFailure: A used font has neither font data nor a built-in
                name; raised before the writer is touched.
        """

        fonts = cache.loaded_fonts()
        for font in fonts:
            if not font.builtin and font.raw_data is None:
                raise FontLoadFailure(font.name, "no font data to embed")
        if title:
            writer.set_title(title)
        handles: Dict[str, str] = {}
        for font in fonts:
            handles[font.name] = font.name if font.builtin else writer.embed_font(font)
        for page in self.pages:
            writer.add_page(page.size)
            for op in page.ops():
                _replay(writer=writer, op=op, handles=handles)


class Area:
    """A rectangular view onto one layer of a page.

    Positions passed to the drawing methods are relative to the top-left
    corner of the area. Splitting an area consumes it: the returned sub-areas
    must be used instead, and drawing on the parent raises
    ``AreaConsumedError``.
    """

    def __init__(self, page: Page, layer_index: int, origin: Position, size: Size) -> None:
        self.page = page
        self.layer_index = layer_index
        self.origin = origin
        self.size = size
        self.consumed = False

    def __repr__(self) -> str:
        return (
            f"Area(page={self.page.number}, layer={self.layer_index}, "
            f"origin={self.origin}, size={self.size})"
        )

    @property
    def width(self) -> float:
        return self.size.width

    @property
    def height(self) -> float:
        return self.size.height

    def copy(self) -> Area:
        return Area(self.page, self.layer_index, self.origin, self.size)

    def next_layer(self) -> Area:
        """Return the same region on the next layer, which paints on top."""

        self.page.layer(self.layer_index + 1)
        return Area(self.page, self.layer_index + 1, self.origin, self.size)

    def add_margins(self, margins: MarginsLike) -> None:
        """Shrink the area by ``margins`` on every side."""

        m: Margins = as_margins(margins)
        self.origin = self.origin + Position(m.left, m.top)
        self.size = Size(
            max(0.0, self.size.width - m.horizontal),
            max(0.0, self.size.height - m.vertical),
        )

    def add_offset(self, offset: Position) -> None:
        """Move the top-left corner by ``offset``, keeping the bottom-right corner."""

        self.origin = self.origin + offset
        self.size = Size(
            max(0.0, self.size.width - offset.x),
            max(0.0, self.size.height - offset.y),
        )

    def set_width(self, width: float) -> None:
        self.size = Size(width, self.size.height)

    def set_height(self, height: float) -> None:
        self.size = Size(self.size.width, height)

    def split_horizontal(self, at: float) -> Tuple[Area, Area]:
        """Split into a left area of width ``at`` and a right area.

        Returns:
            (left, right) sub-areas; this area is consumed.
        """

        self._check_open()
        at = min(max(0.0, at), self.size.width)
        left = Area(self.page, self.layer_index, self.origin, Size(at, self.size.height))
        right = Area(
            self.page,
            self.layer_index,
            self.origin + Position(at, 0),
            Size(self.size.width - at, self.size.height),
        )
        self.consumed = True
        return left, right

    def split_vertical(self, at: float) -> Tuple[Area, Area]:
        """Split into a top area of height ``at`` and a bottom area.

        Returns:
            (top, bottom) sub-areas; this area is consumed.
        """

        self._check_open()
        at = min(max(0.0, at), self.size.height)
        top = Area(self.page, self.layer_index, self.origin, Size(self.size.width, at))
        bottom = Area(
            self.page,
            self.layer_index,
            self.origin + Position(0, at),
            Size(self.size.width, self.size.height - at),
        )
        self.consumed = True
        return top, bottom

    def split_horizontally(self, weights: Sequence[float]) -> List[Area]:
        """Split into columns whose widths are proportional to ``weights``.

        Returns:
            One sub-area per weight, left to right; this area is consumed.
        """

        self._check_open()
        areas: List[Area] = []
        x = 0.0
        for width in column_widths(columns=weights, total_width=self.size.width):
            areas.append(
                Area(
                    self.page,
                    self.layer_index,
                    self.origin + Position(x, 0),
                    Size(width, self.size.height),
                )
            )
            x += width
        self.consumed = True
        return areas

    def draw_text(
        self,
        cache: FontCache,
        position: Position,
        style: Style,
        text: str,
        *,
        allow_overflow: bool = False,
        line_start: bool = True,
        ascent: float | None = None,
    ) -> float:
        """Record a run of text whose line box starts at ``position``.

        Args:
            cache: Font cache providing the metrics of ``style``.
            position: Top-left corner of the line box, relative to the area.
            style: Fully resolved style of the run.
            text: Characters to draw.
            allow_overflow: Draw even if the run is wider than the area.
            line_start: Shift the run left by the bearing of its first glyph.
            ascent: Baseline offset from the top of the line box; defaults to
                the ascent of ``style``.
        Returns:
            Distance the text cursor advanced from ``position.x``.
        Raises:
            TextWidthExceeded: The run does not fit and overflow is not allowed.
            UnsupportedEncoding: The font has no glyph for a character.
        """

        self._check_open()
        if not text:
            return 0.0
        metrics = style.metrics(cache)
        size = style.size
        offsets = metrics.glyph_offsets(text, size)
        width = metrics.str_width(text, size)
        bearing = style.char_left_side_bearing(cache, text[0]) if line_start else 0.0
        advance = width - bearing
        available = self.size.width - position.x
        if advance > available + EPSILON and not allow_overflow:
            raise TextWidthExceeded(text, advance, available)

        line_metrics = style.line_metrics(cache)
        baseline = ascent if ascent is not None else line_metrics.ascent
        start = self.origin + Position(position.x - bearing, position.y + baseline)
        natural = _natural_offsets(metrics=metrics, text=text, size=size)
        kerned = any(abs(a - b) > EPSILON for a, b in zip(offsets, natural))
        self._layer().ops.append(
            TextOp(
                text=text,
                font_name=style.font_name(cache),
                font_size=size,
                color=style.fill_color,
                position=start,
                offsets=tuple(offsets) if kerned else None,
            )
        )
        self._draw_effects(style=style, start=start, width=width)
        return advance

    def draw_line(self, points: Iterable[Position], line_style: LineStyle) -> None:
        """Record a polyline through ``points`` (relative to the area)."""

        self._check_open()
        absolute = tuple(self.origin + point for point in points)
        if len(absolute) < 2:
            return
        self._layer().ops.append(LineOp(absolute, line_style))

    def draw_rect(
        self,
        position: Position,
        size: Size,
        fill: colors.Color | None = None,
        line_style: LineStyle | None = None,
    ) -> None:
        """Record a rectangle, filled and/or stroked."""

        self._check_open()
        self._layer().ops.append(RectOp(self.origin + position, size, fill, line_style))

    def draw_image(
        self,
        image: "PILImage",
        position: Position,
        size: Size,
        rotation: float = 0.0,
    ) -> None:
        """Record an image whose bounding box starts at ``position``."""

        self._check_open()
        self._layer().ops.append(ImageOp(image, self.origin + position, size, rotation))

    def _layer(self) -> Layer:
        return self.page.layer(self.layer_index)

    def _check_open(self) -> None:
        if self.consumed:
            raise AreaConsumedError(f"{self!r} was split and can no longer be drawn on")

    def _draw_effects(self, *, style: Style, start: Position, width: float) -> None:
        """Record underline and strikethrough strokes for a run.

        Args:
            style: Style of the run.
            start: Absolute baseline start of the run.
            width: Advance width of the run.
        Returns:
            None.
        """

        if style.effects == Effect.NONE:
            return
        stroke = LineStyle(thickness=style.size * EFFECT_THICKNESS, color=style.fill_color)
        offsets: List[float] = []
        if Effect.UNDERLINE in style.effects:
            offsets.append(style.size * UNDERLINE_OFFSET)
        if Effect.STRIKETHROUGH in style.effects:
            offsets.append(-style.size * STRIKETHROUGH_OFFSET)
        layer = self._layer()
        for dy in offsets:
            layer.ops.append(
                LineOp(
                    (start + Position(0, dy), start + Position(width, dy)),
                    stroke,
                )
            )


def _natural_offsets(*, metrics, text: str, size: float) -> List[float]:
    """Return glyph offsets without kerning.

    Args:
        metrics: Font metrics of the run.
        text: Run text.
        size: Font size in points.
    Returns:
        Cumulative advance before each glyph.
    """

    scale = metrics.scale(size)
    offsets: List[float] = []
    cursor = 0.0
    for glyph in metrics.glyph_ids(text):
        offsets.append(cursor)
        cursor += metrics.advance_width(glyph) * scale
    return offsets


def _replay(*, writer: DocumentWriter, op: DrawOp, handles: Dict[str, str]) -> None:
    """Send one recorded operation to the writer.

    Args:
        writer: Target writer.
        op: Operation to replay.
        handles: Font names as registered with the writer.
    Returns:
        None.
    """

    if isinstance(op, TextOp):
        font_name = handles.get(op.font_name, op.font_name)
        if font_name != op.font_name:
            op = TextOp(op.text, font_name, op.font_size, op.color, op.position, op.offsets)
        writer.draw_text(op, op.position, op.color)
    elif isinstance(op, LineOp):
        writer.draw_line(op.points, op.line_style)
    elif isinstance(op, RectOp):
        writer.draw_rect(op.position, op.size, op.fill, op.line_style)
    elif isinstance(op, ImageOp):
        writer.draw_image(op.image, op.position, op.size, op.rotation)
