"""
Document writers and image decoding.

The layout engine treats the writer as a sink: it records drawing operations
in memory and replays them onto a ``DocumentWriter`` only after a successful
layout pass. ``ReportlabWriter`` produces PDF bytes with a reportlab canvas.
"""

from __future__ import annotations

import hashlib
import io
import math
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, Sequence

from PIL import Image as PILImageModule
from PIL import UnidentifiedImageError
from reportlab.lib import colors
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from .errors import ImageError
from .geometry import Position, Size
from .log import get_logger

if TYPE_CHECKING:
    from PIL.Image import Image as PILImage

    from .fonts import FontData
    from .render import TextOp
    from .style import LineStyle


class DocumentWriter(Protocol):
    """Sink for paginated drawing operations.

    Positions are in points relative to the top-left corner of the current
    page, y growing downward.
    """

    def set_title(self, title: str) -> None:
        ...

    def embed_font(self, font: FontData) -> str:
        """Make ``font`` available for text drawing and return its handle."""

    def add_page(self, size: Size) -> None:
        ...

    def draw_text(self, run: TextOp, position: Position, color: colors.Color) -> None:
        ...

    def draw_line(self, points: Sequence[Position], line_style: LineStyle) -> None:
        ...

    def draw_rect(
        self,
        position: Position,
        size: Size,
        fill: colors.Color | None,
        line_style: LineStyle | None,
    ) -> None:
        ...

    def draw_image(
        self,
        image: PILImage,
        position: Position,
        size: Size,
        rotation: float,
    ) -> None:
        ...

    def serialize(self) -> bytes:
        ...


class ReportlabWriter:
    """PDF writer backed by ``reportlab.pdfgen.canvas.Canvas``.

    Example:
        >>> writer = ReportlabWriter()
        >>> writer.add_page(Size(200, 100))
        >>> writer.serialize().startswith(b"%PDF")
        True
    """

    def __init__(self) -> None:
        self._buffer = io.BytesIO()
        self._canvas = canvas.Canvas(self._buffer)
        self._page_height = 0.0
        self._page_open = False
        self._page_count = 0

    @property
    def page_count(self) -> int:
        return self._page_count

    def set_title(self, title: str) -> None:
        self._canvas.setTitle(title)

    def embed_font(self, font: FontData) -> str:
        """Register TrueType data with reportlab and return its handle.

        The handle combines the font name with a digest of the font bytes;
        different data registered under the same name gets its own handle in
        reportlab's process-wide font table.

        Args:
            font: Font data with raw TrueType bytes.
        Returns:
            Handle to draw text with.
        """

        digest = hashlib.sha1(font.raw_data).hexdigest()[:12]
        handle = f"{font.name}-{digest}"
        if handle not in pdfmetrics.getRegisteredFontNames():
            pdfmetrics.registerFont(TTFont(handle, io.BytesIO(font.raw_data)))
            get_logger().debug(f"Embedded font {font.name} as {handle}")
        return handle

    def add_page(self, size: Size) -> None:
        if self._page_open:
            self._canvas.showPage()
        self._canvas.setPageSize((size.width, size.height))
        self._page_height = size.height
        self._page_open = True
        self._page_count += 1

    def draw_text(self, run: TextOp, position: Position, color: colors.Color) -> None:
        c = self._canvas
        c.setFont(run.font_name, run.font_size)
        c.setFillColor(color)
        y = self._flip(position.y)
        if run.offsets is None:
            c.drawString(position.x, y, run.text)
            return
        for char, offset in zip(run.text, run.offsets):
            c.drawString(position.x + offset, y, char)

    def draw_line(self, points: Sequence[Position], line_style: LineStyle) -> None:
        c = self._canvas
        c.saveState()
        self._apply_stroke(line_style=line_style)
        path = c.beginPath()
        first, *rest = points
        path.moveTo(first.x, self._flip(first.y))
        for point in rest:
            path.lineTo(point.x, self._flip(point.y))
        c.drawPath(path, stroke=1, fill=0)
        c.restoreState()

    def draw_rect(
        self,
        position: Position,
        size: Size,
        fill: colors.Color | None,
        line_style: LineStyle | None,
    ) -> None:
        c = self._canvas
        c.saveState()
        if fill is not None:
            c.setFillColor(fill)
        if line_style is not None:
            self._apply_stroke(line_style=line_style)
        c.rect(
            position.x,
            self._flip(position.y + size.height),
            size.width,
            size.height,
            stroke=1 if line_style is not None else 0,
            fill=1 if fill is not None else 0,
        )
        c.restoreState()

    def draw_image(
        self,
        image: PILImage,
        position: Position,
        size: Size,
        rotation: float,
    ) -> None:
        """Draw ``image`` centred in its rotated bounding box.

        Args:
            image: Decoded image.
            position: Top-left corner of the bounding box.
            size: Unrotated image size.
            rotation: Clockwise rotation in degrees.
        Returns:
            None.
        """

        c = self._canvas
        bbox = rotated_bounding_box(size, rotation)
        center_x = position.x + bbox.width / 2
        center_y = self._flip(position.y + bbox.height / 2)
        c.saveState()
        c.translate(center_x, center_y)
        c.rotate(-rotation)
        c.drawImage(
            ImageReader(image),
            -size.width / 2,
            -size.height / 2,
            width=size.width,
            height=size.height,
        )
        c.restoreState()

    def serialize(self) -> bytes:
        """Finish the document and return the PDF bytes."""

        if self._page_open:
            self._canvas.showPage()
            self._page_open = False
        self._canvas.save()
        return self._buffer.getvalue()

    def _flip(self, y: float) -> float:
        return self._page_height - y

    def _apply_stroke(self, *, line_style: LineStyle) -> None:
        self._canvas.setStrokeColor(line_style.color)
        self._canvas.setLineWidth(line_style.thickness)
        self._canvas.setDash(list(line_style.dash))


def rotated_bounding_box(size: Size, rotation: float) -> Size:
    """Return the size of the box enclosing ``size`` rotated by ``rotation`` degrees.

    Example:
        >>> rotated_bounding_box(Size(10, 20), 90)
        Size(width=20.0, height=10.0)
    """

    radians = math.radians(rotation % 360)
    cos = abs(math.cos(radians))
    sin = abs(math.sin(radians))
    return Size(
        round(size.width * cos + size.height * sin, 6),
        round(size.width * sin + size.height * cos, 6),
    )


def decode_image(data: bytes) -> PILImage:
    """Decode raw image bytes with Pillow.

    Args:
        data: Encoded image (PNG, JPEG, BMP, ...).
    Returns:
        Loaded Pillow image.
    Raises:
        ImageError: The data is not a decodable image.
    """

    try:
        image = PILImageModule.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError) as exc:
        raise ImageError(f"Could not decode image data: {exc}") from exc
    return image


def load_image(path: Path | str) -> PILImage:
    """Read and decode the image at ``path``.

    Raises:
        ImageError: The file cannot be read or decoded.
    """

    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise ImageError(f"Could not read image {path}: {exc}") from exc
    return decode_image(data)
