"""Page geometry and document defaults."""

from __future__ import annotations

from dataclasses import dataclass, field

from reportlab.lib.pagesizes import A4

from .constants import EPSILON
from .geometry import Margins, Size


@dataclass(slots=True)
class PageSettings:
    """Document-wide layout defaults.

    Example:
        >>> settings = PageSettings()
        >>> settings.body_width > 0
        True
    """

    page_width: float = A4[0]
    page_height: float = A4[1]
    margins: Margins = field(default_factory=Margins)
    font_size: float = 12.0
    line_spacing: float = 1.0
    hyphenation_locale: str = "en_US"
    title: str = ""
    show_progress: bool = False

    @property
    def page_size(self) -> Size:
        return Size(self.page_width, self.page_height)

    @property
    def body_width(self) -> float:
        """Return the width available for content inside margins.

        Returns:
            Width in points.
        """

        return self.page_width - self.margins.horizontal

    @property
    def body_height(self) -> float:
        """Return the height available for content inside margins.

        Returns:
            Height in points.
        """

        return self.page_height - self.margins.vertical + EPSILON
