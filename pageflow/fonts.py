"""Font data, font metrics and the per-document font metrics cache.

Metrics for the built-in PDF fonts come from reportlab's bundled standard font
widths. TrueType and OpenType data is parsed with fontTools. Parsed metrics are
cached per (family, variant) in a ``FontCache`` owned by one document; nothing
here touches process-wide state.
"""

from __future__ import annotations

import enum
import io
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Tuple

from fontTools.ttLib import TTFont
from reportlab.pdfbase import pdfmetrics

from .errors import FontLoadFailure, InvalidStyleReference, UnsupportedEncoding
from .log import get_logger

BUILTIN_ENCODING = "cp1252"


class FontVariant(enum.Enum):
    """The four style variants a font family can provide."""

    REGULAR = "regular"
    BOLD = "bold"
    ITALIC = "italic"
    BOLD_ITALIC = "bold_italic"

    @classmethod
    def from_flags(cls, *, bold: bool, italic: bool) -> FontVariant:
        if bold and italic:
            return cls.BOLD_ITALIC
        if bold:
            return cls.BOLD
        if italic:
            return cls.ITALIC
        return cls.REGULAR


class Builtin(enum.Enum):
    """Standard PDF font families that need no embedded font data."""

    HELVETICA = (
        "Helvetica",
        "Helvetica-Bold",
        "Helvetica-Oblique",
        "Helvetica-BoldOblique",
    )
    TIMES = ("Times-Roman", "Times-Bold", "Times-Italic", "Times-BoldItalic")
    COURIER = ("Courier", "Courier-Bold", "Courier-Oblique", "Courier-BoldOblique")

    def font_name(self, variant: FontVariant) -> str:
        """Return the standard font name for a variant of this family."""

        regular, bold, italic, bold_italic = self.value
        return {
            FontVariant.REGULAR: regular,
            FontVariant.BOLD: bold,
            FontVariant.ITALIC: italic,
            FontVariant.BOLD_ITALIC: bold_italic,
        }[variant]


@dataclass(frozen=True, slots=True)
class LineMetrics:
    """Vertical metrics of a line of text, in points.

    Args:
        ascent: Distance from the top of the line to the baseline.
        descent: Distance from the baseline to the lowest glyph extent.
        line_gap: Extra leading recommended by the font.
        glyph_height: ``ascent + descent``.
        line_height: ``(ascent + descent + line_gap) * line_spacing``.
    """

    ascent: float = 0.0
    descent: float = 0.0
    line_gap: float = 0.0
    glyph_height: float = 0.0
    line_height: float = 0.0

    def max(self, other: LineMetrics) -> LineMetrics:
        """Return the component-wise maximum of two metrics."""

        return LineMetrics(
            ascent=max(self.ascent, other.ascent),
            descent=max(self.descent, other.descent),
            line_gap=max(self.line_gap, other.line_gap),
            glyph_height=max(self.glyph_height, other.glyph_height),
            line_height=max(self.line_height, other.line_height),
        )


@dataclass(frozen=True, slots=True)
class FontMetrics:
    """Parsed, immutable metrics of one font, in font units.

    Args:
        font_name: Name of the font the metrics belong to.
        units_per_em: Font units per em square.
        ascent: Ascender height above the baseline.
        descent: Descender depth below the baseline (positive).
        line_gap: Recommended extra leading.
        glyph_map: Code point to glyph id.
        advances: Glyph id to advance width.
        bearings: Glyph id to left-side bearing.
        kerning_pairs: (left glyph id, right glyph id) to advance adjustment.
    """

    font_name: str
    units_per_em: float
    ascent: float
    descent: float
    line_gap: float
    glyph_map: Mapping[int, int]
    advances: Mapping[int, float]
    bearings: Mapping[int, float] = field(default_factory=dict)
    kerning_pairs: Mapping[Tuple[int, int], float] = field(default_factory=dict)

    def scale(self, size: float) -> float:
        """Return the factor converting font units to points at ``size``."""

        return size / self.units_per_em

    def has_glyph(self, char: str) -> bool:
        return ord(char) in self.glyph_map

    def glyph_id(self, char: str) -> int:
        """Return the glyph id for a single character.

        Raises:
            UnsupportedEncoding: The font has no glyph for ``char``.
        """

        try:
            return self.glyph_map[ord(char)]
        except KeyError:
            raise UnsupportedEncoding(self.font_name, char, char) from None

    def glyph_ids(self, text: str) -> List[int]:
        """Return glyph ids for ``text``, reporting every unsupported character."""

        missing = "".join(sorted({char for char in text if ord(char) not in self.glyph_map}))
        if missing:
            raise UnsupportedEncoding(self.font_name, text, missing)
        return [self.glyph_map[ord(char)] for char in text]

    def advance_width(self, glyph_id: int) -> float:
        return self.advances.get(glyph_id, 0.0)

    def kerning(self, left: int, right: int) -> float:
        return self.kerning_pairs.get((left, right), 0.0)

    def left_side_bearing(self, glyph_id: int) -> float:
        return self.bearings.get(glyph_id, 0.0)

    def glyph_offsets(self, text: str, size: float) -> List[float]:
        """Return the x offset of every glyph of ``text`` in points.

        Kerning between adjacent glyphs is applied to the offset of the right
        glyph. The first glyph always starts at 0.

        Args:
            text: Text to lay out.
            size: Font size in points.
        Returns:
            One offset per character.
        """

        ids = self.glyph_ids(text)
        scale = self.scale(size)
        offsets: List[float] = []
        cursor = 0.0
        for idx, glyph in enumerate(ids):
            if idx > 0:
                cursor += self.kerning(ids[idx - 1], glyph) * scale
            offsets.append(cursor)
            cursor += self.advance_width(glyph) * scale
        return offsets

    def str_width(self, text: str, size: float) -> float:
        """Return the advance width of ``text`` in points, kerning included."""

        ids = self.glyph_ids(text)
        total = sum(self.advance_width(glyph) for glyph in ids)
        total += sum(self.kerning(left, right) for left, right in zip(ids, ids[1:]))
        return total * self.scale(size)

    def line_metrics(self, *, size: float, line_spacing: float = 1.0) -> LineMetrics:
        """Return vertical metrics in points for a font size.

        Args:
            size: Font size in points.
            line_spacing: Factor applied to the natural line height.
        Returns:
            LineMetrics instance.
        """

        scale = self.scale(size)
        ascent = self.ascent * scale
        descent = self.descent * scale
        line_gap = self.line_gap * scale
        return LineMetrics(
            ascent=ascent,
            descent=descent,
            line_gap=line_gap,
            glyph_height=ascent + descent,
            line_height=(ascent + descent + line_gap) * line_spacing,
        )


@dataclass(slots=True)
class FontData:
    """Source of one font: raw font bytes, a built-in font or parsed metrics.

    Args:
        name: Font name used by the document writer.
        raw_data: TrueType/OpenType bytes to parse and embed.
        builtin: Whether ``name`` is one of the standard PDF fonts.
        metrics: Pre-parsed metrics; skips parsing when set.
    """

    name: str
    raw_data: bytes | None = None
    builtin: bool = False
    metrics: FontMetrics | None = None

    @classmethod
    def from_bytes(cls, name: str, data: bytes) -> FontData:
        return cls(name=name, raw_data=data)

    @classmethod
    def from_file(cls, path: Path | str, name: str | None = None) -> FontData:
        """Read font data from ``path``.

        Raises:
            FontLoadFailure: The file cannot be read.
        """

        font_path = Path(path)
        try:
            data = font_path.read_bytes()
        except OSError as exc:
            raise FontLoadFailure(name or font_path.stem, str(exc)) from exc
        return cls(name=name or font_path.stem, raw_data=data)

    @classmethod
    def standard(cls, name: str) -> FontData:
        return cls(name=name, builtin=True)

    def load_metrics(self) -> FontMetrics:
        """Parse and return the metrics of this font.

        Raises:
            FontLoadFailure: No data is available or the data is malformed.
        """

        if self.metrics is not None:
            return self.metrics
        if self.raw_data is not None:
            return _metrics_from_truetype(name=self.name, data=self.raw_data)
        if self.builtin:
            return _metrics_from_builtin(name=self.name)
        raise FontLoadFailure(self.name, "no font data available")


@dataclass(slots=True)
class FontFamily:
    """A named set of up to four font variants."""

    name: str
    regular: FontData | None = None
    bold: FontData | None = None
    italic: FontData | None = None
    bold_italic: FontData | None = None

    @classmethod
    def from_builtin(cls, builtin: Builtin, name: str | None = None) -> FontFamily:
        """Return a family backed by one of the standard PDF font families.

        Example:
            >>> FontFamily.from_builtin(Builtin.TIMES).bold.name
            'Times-Bold'
        """

        fonts = [FontData.standard(builtin.font_name(variant)) for variant in FontVariant]
        return cls(name or builtin.value[0], *fonts)

    def get(self, variant: FontVariant) -> FontData | None:
        return {
            FontVariant.REGULAR: self.regular,
            FontVariant.BOLD: self.bold,
            FontVariant.ITALIC: self.italic,
            FontVariant.BOLD_ITALIC: self.bold_italic,
        }[variant]


_FILE_SUFFIXES = {
    FontVariant.REGULAR: "Regular",
    FontVariant.BOLD: "Bold",
    FontVariant.ITALIC: "Italic",
    FontVariant.BOLD_ITALIC: "BoldItalic",
}


def from_files(directory: Path | str, name: str) -> FontFamily:
    """Load a family from ``{name}-Regular.ttf``, ``-Bold``, ``-Italic``, ``-BoldItalic``.

    Args:
        directory: Directory containing the font files.
        name: Base name of the font files, also used as family name.
    Returns:
        FontFamily with all four variants.
    Raises:
        FontLoadFailure: A variant file is missing or unreadable.
    """

    base = Path(directory)
    fonts = [
        FontData.from_file(base / f"{name}-{_FILE_SUFFIXES[variant]}.ttf")
        for variant in FontVariant
    ]
    return FontFamily(name, *fonts)


class FontCache:
    """Lazily populated cache of font metrics for one document.

    Families are registered by name; metrics are parsed on first request and
    the same ``FontMetrics`` instance is returned for later requests.
    """

    def __init__(self, default_family: FontFamily) -> None:
        self._families: Dict[str, FontFamily] = {}
        self._metrics: Dict[Tuple[str, FontVariant], FontMetrics] = {}
        self.default_family = default_family.name
        self.add_family(default_family)

    def add_family(self, family: FontFamily) -> str:
        """Register a family and return the name styles should reference.

        Registering a family under an existing name replaces it and drops the
        metrics cached for the old family.
        """

        self._families[family.name] = family
        self._metrics = {
            key: metrics for key, metrics in self._metrics.items() if key[0] != family.name
        }
        return family.name

    def has_family(self, name: str) -> bool:
        return name in self._families

    def family(self, name: str | None) -> FontFamily:
        """Return a registered family; ``None`` selects the default family.

        Raises:
            InvalidStyleReference: ``name`` was never registered.
        """

        key = name or self.default_family
        try:
            return self._families[key]
        except KeyError:
            raise InvalidStyleReference(key) from None

    def font_data_for(self, family: str | None, variant: FontVariant) -> FontData:
        """Return the font data of a family variant.

        Raises:
            InvalidStyleReference: The family was never registered.
            FontLoadFailure: The family does not provide ``variant``.
        """

        resolved = self.family(family)
        data = resolved.get(variant)
        if data is None:
            raise FontLoadFailure(resolved.name, f"missing {variant.value} variant")
        return data

    def metrics_for(self, family: str | None, variant: FontVariant) -> FontMetrics:
        """Return cached metrics for a family variant, loading them on first use."""

        key = (family or self.default_family, variant)
        cached = self._metrics.get(key)
        if cached is not None:
            return cached
        data = self.font_data_for(family, variant)
        metrics = data.load_metrics()
        get_logger().debug(f"Loaded metrics for {data.name} ({key[0]}, {variant.value})")
        self._metrics[key] = metrics
        return metrics

    def loaded_fonts(self) -> List[FontData]:
        """Return the font data of every variant whose metrics were loaded."""

        seen: Dict[str, FontData] = {}
        for family, variant in self._metrics:
            data = self.font_data_for(family, variant)
            seen.setdefault(data.name, data)
        return list(seen.values())


def _metrics_from_builtin(*, name: str) -> FontMetrics:
    """Return metrics for a standard PDF font using reportlab's font tables.

    Args:
        name: Standard font name such as ``Helvetica-Bold``.
    Returns:
        FontMetrics with WinAnsi code points mapped to single-byte glyph codes.
    """

    try:
        font = pdfmetrics.getFont(name)
    except KeyError as exc:
        raise FontLoadFailure(name, "unknown standard font") from exc
    glyph_map: Dict[int, int] = {}
    for code in range(32, 256):
        try:
            char = bytes([code]).decode(BUILTIN_ENCODING)
        except UnicodeDecodeError:
            continue
        glyph_map[ord(char)] = code
    advances = {code: float(width) for code, width in enumerate(font.widths)}
    return FontMetrics(
        font_name=name,
        units_per_em=1000.0,
        ascent=float(font.face.ascent),
        descent=float(-font.face.descent),
        line_gap=0.0,
        glyph_map=glyph_map,
        advances=advances,
    )


def _metrics_from_truetype(*, name: str, data: bytes) -> FontMetrics:
    """Return metrics parsed from TrueType/OpenType data with fontTools.

    Args:
        name: Font name for error reporting.
        data: Raw font file contents.
    Returns:
        FontMetrics in the font's own units.
    Raises:
        FontLoadFailure: The data cannot be parsed.
    """

    try:
        font = TTFont(io.BytesIO(data))
        units_per_em = float(font["head"].unitsPerEm)
        hhea = font["hhea"]
        cmap = font.getBestCmap() or {}
        hmtx = font["hmtx"].metrics
        glyph_map = {code: font.getGlyphID(glyph) for code, glyph in cmap.items()}
        advances = {font.getGlyphID(glyph): float(adv) for glyph, (adv, _) in hmtx.items()}
        bearings = {font.getGlyphID(glyph): float(lsb) for glyph, (_, lsb) in hmtx.items()}
        kerning = _kerning_pairs(font=font)
    except Exception as exc:
        raise FontLoadFailure(name, f"malformed font data: {exc}") from exc
    return FontMetrics(
        font_name=name,
        units_per_em=units_per_em,
        ascent=float(hhea.ascent),
        descent=float(-hhea.descent),
        line_gap=float(hhea.lineGap),
        glyph_map=glyph_map,
        advances=advances,
        bearings=bearings,
        kerning_pairs=kerning,
    )


def _kerning_pairs(*, font: TTFont) -> Dict[Tuple[int, int], float]:
    """Return kerning pairs from the legacy ``kern`` table, keyed by glyph ids.

    Args:
        font: Parsed fontTools font.
    Returns:
        Mapping of glyph id pairs to adjustments; empty without a kern table.
    """

    if "kern" not in font:
        return {}
    pairs: Dict[Tuple[int, int], float] = {}
    for table in font["kern"].kernTables:
        for (left, right), value in getattr(table, "kernTable", {}).items():
            pairs[(font.getGlyphID(left), font.getGlyphID(right))] = float(value)
    return pairs
