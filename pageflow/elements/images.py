"""Raster images decoded with Pillow."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import TYPE_CHECKING, Tuple

from ..constants import DEFAULT_DPI, EPSILON, POINTS_PER_INCH
from ..geometry import Position, Size
from ..layout_utils import Alignment, alignment_offset
from ..render import Area
from ..style import Style
from ..writer import decode_image, load_image, rotated_bounding_box
from .base import Context, Element, RenderResult

if TYPE_CHECKING:
    from PIL.Image import Image as PILImage


class Image(Element):
    """An image placed by alignment or at an absolute position.

    The rendered size follows from the pixel dimensions, the DPI (300 unless
    overridden) and the scale factors. A rotation turns the image clockwise
    around its centre; layout uses the rotated bounding box. Images are never
    split across pages. An image with an absolute position takes no space in
    the flow.

    Example:
        >>> from PIL import Image as PILImage
        >>> Image(PILImage.new("RGB", (300, 150))).size
        Size(width=72.0, height=36.0)
    """

    def __init__(
        self,
        image: PILImage,
        alignment: Alignment = Alignment.LEFT,
        position: Position | None = None,
        scale: Tuple[float, float] = (1.0, 1.0),
        rotation: float = 0.0,
        dpi: float | None = None,
    ) -> None:
        self.image = image
        self.alignment = alignment
        self.position = position
        self.scale = scale
        self.rotation = rotation
        self.dpi = dpi

    def __deepcopy__(self, memo) -> Image:
        # Pixel data is never modified; copies share it.
        clone = copy.copy(self)
        memo[id(self)] = clone
        return clone

    @classmethod
    def from_bytes(cls, data: bytes) -> Image:
        return cls(decode_image(data))

    @classmethod
    def from_path(cls, path: Path | str) -> Image:
        return cls(load_image(path))

    def with_alignment(self, alignment: Alignment) -> Image:
        self.alignment = alignment
        return self

    def with_position(self, position: Position) -> Image:
        self.position = position
        return self

    def with_scale(self, x: float, y: float | None = None) -> Image:
        self.scale = (x, x if y is None else y)
        return self

    def with_clockwise_rotation(self, degrees: float) -> Image:
        self.rotation = degrees
        return self

    def with_dpi(self, dpi: float) -> Image:
        self.dpi = dpi
        return self

    @property
    def size(self) -> Size:
        """Unrotated size in points."""

        dpi = self.dpi or DEFAULT_DPI
        px_width, px_height = self.image.size
        scale_x, scale_y = self.scale
        return Size(
            POINTS_PER_INCH * scale_x * px_width / dpi,
            POINTS_PER_INCH * scale_y * px_height / dpi,
        )

    def render(self, context: Context, area: Area, style: Style) -> RenderResult:
        size = self.size
        bbox = rotated_bounding_box(size, self.rotation)
        if self.position is not None:
            area.draw_image(self.image, self.position, size, self.rotation)
            return RenderResult()

        if bbox.height > area.height + EPSILON:
            return RenderResult(has_more=True)
        x = alignment_offset(alignment=self.alignment, width=bbox.width, available=area.width)
        area.draw_image(self.image, Position(x, 0), size, self.rotation)
        return RenderResult(Size(min(bbox.width, area.width), bbox.height))
