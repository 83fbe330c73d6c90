import io

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen
from fontTools.ttLib import newTable
from fontTools.ttLib.tables._k_e_r_n import KernTable_format_0

from pageflow.elements.base import Context
from pageflow.fonts import Builtin, FontCache, FontData, FontFamily
from pageflow.geometry import Size
from pageflow.render import Renderer


class RecordingWriter:
    """Document writer that records every call instead of producing a file."""

    def __init__(self):
        self.calls = []

    def set_title(self, title):
        self.calls.append(("set_title", title))

    def embed_font(self, font):
        self.calls.append(("embed_font", font.name))
        return f"embedded-{font.name}"

    def add_page(self, size):
        self.calls.append(("add_page", size))

    def draw_text(self, run, position, color):
        self.calls.append(("draw_text", run.text, run.font_name, position))

    def draw_line(self, points, line_style):
        self.calls.append(("draw_line", tuple(points), line_style))

    def draw_rect(self, position, size, fill, line_style):
        self.calls.append(("draw_rect", position, size, fill, line_style))

    def draw_image(self, image, position, size, rotation):
        self.calls.append(("draw_image", position, size, rotation))

    def serialize(self):
        return b""

    def texts(self):
        return [call[1] for call in self.calls if call[0] == "draw_text"]

    def page_count(self):
        return sum(1 for call in self.calls if call[0] == "add_page")


def _draw_box(pen, x_min):
    pen.moveTo((x_min, 0))
    pen.lineTo((x_min, 700))
    pen.lineTo((500, 700))
    pen.lineTo((500, 0))
    pen.closePath()


def build_truetype_font(family="TestSans"):
    """Return bytes of a minimal TrueType font with an A/V kerning pair."""

    fb = FontBuilder(1000, isTTF=True)
    fb.setupGlyphOrder([".notdef", "space", "A", "V"])
    fb.setupCharacterMap({32: "space", 65: "A", 86: "V"})
    pen = TTGlyphPen(None)
    _draw_box(pen, 100)
    box = pen.glyph()
    pen = TTGlyphPen(None)
    _draw_box(pen, 20)
    narrow = pen.glyph()
    empty = TTGlyphPen(None).glyph()
    fb.setupGlyf({".notdef": empty, "space": empty, "A": box, "V": narrow})
    fb.setupHorizontalMetrics(
        {".notdef": (500, 0), "space": (250, 0), "A": (600, 100), "V": (650, 20)}
    )
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable(
        {
            "familyName": family,
            "styleName": "Regular",
            "fullName": f"{family} Regular",
            "psName": f"{family}-Regular",
        }
    )
    fb.setupOS2(sTypoAscender=800, usWinAscent=800, usWinDescent=200)
    fb.setupPost()

    kern = newTable("kern")
    kern.version = 0
    subtable = KernTable_format_0()
    subtable.coverage = 1
    subtable.kernTable = {("A", "V"): -80}
    kern.kernTables = [subtable]
    fb.font["kern"] = kern

    buffer = io.BytesIO()
    fb.save(buffer)
    return buffer.getvalue()


@pytest.fixture(scope="session")
def truetype_bytes():
    return build_truetype_font()


@pytest.fixture(scope="session")
def other_truetype_bytes():
    """A second, different font file."""
    return build_truetype_font("OtherSans")


@pytest.fixture
def truetype_family(truetype_bytes):
    fonts = [FontData.from_bytes(f"TestSans-{idx}", truetype_bytes) for idx in range(4)]
    return FontFamily("TestSans", *fonts)


@pytest.fixture
def font_cache():
    return FontCache(FontFamily.from_builtin(Builtin.HELVETICA))


@pytest.fixture
def context(font_cache):
    return Context(font_cache)


@pytest.fixture
def make_area():
    """Factory returning the full-page area of a fresh page of the given size."""

    def _make(width, height):
        return Renderer().add_page(Size(width, height)).area()

    return _make


@pytest.fixture
def writer():
    return RecordingWriter()
