"""Text styles, styled strings and stroke styles."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Iterable, List, Tuple, Union

from reportlab.lib import colors

from .fonts import FontVariant, LineMetrics

if TYPE_CHECKING:
    from .fonts import FontCache, FontMetrics

DEFAULT_FONT_SIZE = 12.0
DEFAULT_LINE_SPACING = 1.0


class Effect(enum.Flag):
    """Text decorations drawn on top of the glyphs."""

    NONE = 0
    UNDERLINE = enum.auto()
    STRIKETHROUGH = enum.auto()


@dataclass(frozen=True, slots=True)
class Style:
    """Immutable font and color attributes applied to a text run.

    Unset attributes (``None``) are inherited from the surrounding style
    context when styles are merged.

    Example:
        >>> Style(font_size=10).merged(Style(bold=True)).font_size
        10
    """

    font_family: str | None = None
    font_size: float | None = None
    line_spacing: float | None = None
    bold: bool = False
    italic: bool = False
    color: colors.Color | None = None
    effects: Effect = Effect.NONE

    def merged(self, other: Style) -> Style:
        """Return this style overlaid with the set attributes of ``other``.

        Args:
            other: Style whose explicit attributes take precedence.
        Returns:
            Combined style.
        """

        return Style(
            font_family=other.font_family or self.font_family,
            font_size=other.font_size if other.font_size is not None else self.font_size,
            line_spacing=(
                other.line_spacing
                if other.line_spacing is not None
                else self.line_spacing
            ),
            bold=self.bold or other.bold,
            italic=self.italic or other.italic,
            color=other.color if other.color is not None else self.color,
            effects=self.effects | other.effects,
        )

    def with_font_family(self, family: str) -> Style:
        return replace(self, font_family=family)

    def with_font_size(self, size: float) -> Style:
        return replace(self, font_size=size)

    def with_line_spacing(self, spacing: float) -> Style:
        return replace(self, line_spacing=spacing)

    def with_color(self, color: colors.Color) -> Style:
        return replace(self, color=color)

    def with_effect(self, effect: Effect) -> Style:
        return replace(self, effects=self.effects | effect)

    def as_bold(self) -> Style:
        return replace(self, bold=True)

    def as_italic(self) -> Style:
        return replace(self, italic=True)

    @property
    def size(self) -> float:
        """Font size in points, falling back to the default size."""

        return self.font_size if self.font_size is not None else DEFAULT_FONT_SIZE

    @property
    def spacing(self) -> float:
        return self.line_spacing if self.line_spacing is not None else DEFAULT_LINE_SPACING

    @property
    def fill_color(self) -> colors.Color:
        return self.color if self.color is not None else colors.black

    @property
    def variant(self) -> FontVariant:
        """Return the font variant selected by the bold and italic flags."""

        return FontVariant.from_flags(bold=self.bold, italic=self.italic)

    def metrics(self, cache: FontCache) -> FontMetrics:
        """Return the cached font metrics for this style's family and variant."""

        return cache.metrics_for(self.font_family, self.variant)

    def font_name(self, cache: FontCache) -> str:
        """Return the writer-facing font name for this style."""

        return cache.font_data_for(self.font_family, self.variant).name

    def line_metrics(self, cache: FontCache) -> LineMetrics:
        """Return vertical metrics in points, including line spacing."""

        return self.metrics(cache).line_metrics(size=self.size, line_spacing=self.spacing)

    def str_width(self, cache: FontCache, text: str) -> float:
        """Return the advance width of ``text`` in points, kerning included."""

        return self.metrics(cache).str_width(text, self.size)

    def char_left_side_bearing(self, cache: FontCache, char: str) -> float:
        """Return the left-side bearing of ``char`` in points."""

        metrics = self.metrics(cache)
        return metrics.left_side_bearing(metrics.glyph_id(char)) * metrics.scale(self.size)


@dataclass(frozen=True, slots=True)
class StyledString:
    """A span of text together with the style that renders it."""

    text: str
    style: Style = field(default_factory=Style)

    def width(self, cache: FontCache) -> float:
        return self.style.str_width(cache, self.text)

    def restyled(self, style: Style) -> StyledString:
        """Return the run with ``style`` used as the inherited base style."""

        return StyledString(self.text, style.merged(self.style))


StyledLike = Union[StyledString, str, Tuple[str, Style]]


def as_styled(value: StyledLike) -> StyledString:
    """Coerce a string or ``(text, style)`` pair into a ``StyledString``."""

    if isinstance(value, StyledString):
        return value
    if isinstance(value, str):
        return StyledString(value)
    text, style = value
    return StyledString(text, style)


def as_styled_list(values: Iterable[StyledLike] | StyledLike) -> List[StyledString]:
    """Coerce one run or an iterable of runs into a list of ``StyledString``."""

    if isinstance(values, (StyledString, str)):
        return [as_styled(values)]
    if isinstance(values, tuple) and len(values) == 2 and isinstance(values[1], Style):
        return [as_styled(values)]
    return [as_styled(value) for value in values]


@dataclass(frozen=True, slots=True)
class LineStyle:
    """Stroke attributes for lines, borders and shapes.

    Args:
        thickness: Line width in points.
        color: Stroke color.
        dash: Dash pattern (on/off lengths in points); empty means solid.
    """

    thickness: float = 1.0
    color: colors.Color = colors.black
    dash: Tuple[float, ...] = ()

    def with_thickness(self, thickness: float) -> LineStyle:
        return replace(self, thickness=thickness)

    def with_color(self, color: colors.Color) -> LineStyle:
        return replace(self, color=color)

    def with_dash(self, *pattern: float) -> LineStyle:
        return replace(self, dash=tuple(pattern))
