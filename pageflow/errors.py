"""Exception hierarchy for layout and rendering failures.

Every error raised by the engine derives from ``PageflowError``. Errors coming
from the document writer (reportlab, file system) are not wrapped and reach
the caller unchanged.
"""

from __future__ import annotations


class PageflowError(Exception):
    """Base exception for all pageflow errors."""


# Font errors
class FontError(PageflowError):
    """Base class for font resolution and measurement errors."""


class FontLoadFailure(FontError):
    """Raised when font data for a family variant is missing or malformed."""

    def __init__(self, font_name: str, reason: str):
        self.font_name = font_name
        self.reason = reason
        super().__init__(f"Failed to load font {font_name!r}: {reason}")


class InvalidStyleReference(FontError):
    """Raised when a style references a font family that was never registered."""

    def __init__(self, family: str | None):
        self.family = family
        super().__init__(f"Font family {family!r} is not registered")


class UnsupportedEncoding(FontError):
    """Raised when text contains characters the active font cannot encode."""

    def __init__(self, font_name: str, text: str, characters: str):
        self.font_name = font_name
        self.text = text
        self.characters = characters
        super().__init__(
            f"Font {font_name!r} cannot encode {characters!r} in text {text!r}"
        )


# Layout errors
class LayoutError(PageflowError):
    """Base class for geometric layout errors."""


class LayoutOverflow(LayoutError):
    """Raised when an element cannot fit even on a fresh, empty page."""

    def __init__(self, element_name: str, page_number: int):
        self.element_name = element_name
        self.page_number = page_number
        super().__init__(
            f"{element_name} does not fit on an empty page (page {page_number})"
        )


class TextWidthExceeded(LayoutError):
    """Raised when a text run is wider than the area it is drawn into."""

    def __init__(self, text: str, width: float, available: float):
        self.text = text
        self.width = width
        self.available = available
        super().__init__(
            f"Text {text!r} is {width:.2f}pt wide but only {available:.2f}pt are available"
        )


class AreaConsumedError(LayoutError):
    """Raised when drawing on an area that was already split into sub-areas."""


class InvalidTableRow(LayoutError):
    """Raised when a table row does not match the table's column count."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected {expected} cells in table row, got {actual}")


# Image errors
class ImageError(PageflowError):
    """Raised when image data cannot be decoded."""
