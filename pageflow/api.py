"""Public entry points re-exported for callers building documents."""

from __future__ import annotations

from .document import Document, PageDecorator, SimplePageDecorator
from .elements.base import Context, Element, RenderResult
from .elements.images import Image
from .elements.layout import FramedElement, LinearLayout, PaddedElement, StyledElement
from .elements.lists import BulletPoint, OrderedList, UnorderedList
from .elements.shapes import Shape, ShapeKind
from .elements.table import FrameCellDecorator, TableLayout
from .elements.text import Break, PageBreak, Paragraph, Text
from .errors import (
    AreaConsumedError,
    FontError,
    FontLoadFailure,
    ImageError,
    InvalidStyleReference,
    InvalidTableRow,
    LayoutError,
    LayoutOverflow,
    PageflowError,
    TextWidthExceeded,
    UnsupportedEncoding,
)
from .fonts import Builtin, FontData, FontFamily, from_files
from .geometry import Margins, Position, Size
from .layout_utils import Alignment, Fixed
from .settings import PageSettings
from .style import Effect, LineStyle, Style, StyledString
from .text import NoHyphenation, PyphenHyphenator
from .writer import ReportlabWriter

__all__ = [
    "Alignment",
    "AreaConsumedError",
    "Break",
    "BulletPoint",
    "Builtin",
    "Context",
    "Document",
    "Effect",
    "Element",
    "Fixed",
    "FontData",
    "FontError",
    "FontFamily",
    "FontLoadFailure",
    "FrameCellDecorator",
    "FramedElement",
    "Image",
    "ImageError",
    "InvalidStyleReference",
    "InvalidTableRow",
    "LayoutError",
    "LayoutOverflow",
    "LinearLayout",
    "LineStyle",
    "Margins",
    "NoHyphenation",
    "OrderedList",
    "PaddedElement",
    "PageBreak",
    "PageDecorator",
    "PageSettings",
    "PageflowError",
    "Paragraph",
    "Position",
    "PyphenHyphenator",
    "RenderResult",
    "ReportlabWriter",
    "Shape",
    "ShapeKind",
    "SimplePageDecorator",
    "Size",
    "Style",
    "StyledElement",
    "StyledString",
    "TableLayout",
    "Text",
    "TextWidthExceeded",
    "UnorderedList",
    "UnsupportedEncoding",
    "from_files",
]
