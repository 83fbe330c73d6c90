import pytest

from pageflow.style import Style, StyledString
from pageflow.wrap import tokenize, wrap_lines, wrap_text

LOREM = (
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit, sed do eiusmod "
    "tempor incididunt ut labore et dolore magna aliqua. Ut enim ad minim veniam, "
    "quis nostrud exercitation ullamco laboris nisi ut aliquip ex ea commodo."
)


class FixedHyphenator:
    """Hyphenation strategy allowing breaks at fixed offsets."""

    def __init__(self, *offsets):
        self.offsets = offsets
        self.calls = []

    def break_offsets(self, word, locale):
        self.calls.append((word, locale))
        return [offset for offset in self.offsets if offset < len(word)]


class TestTokenize:
    def test_words_span_style_boundaries(self):
        bold = Style(bold=True)
        words = tokenize([StyledString("un"), StyledString("break", bold), StyledString("able x")])
        assert [word.text for word in words] == ["unbreakable", "x"]
        assert [piece.style for piece in words[0].pieces] == [Style(), bold, Style()]

    def test_newlines_end_words(self):
        words = tokenize([StyledString("a\n\nb")])
        assert [(word.text, word.newline) for word in words] == [
            ("a", True),
            ("", True),
            ("b", False),
        ]

    def test_leading_whitespace_is_dropped(self):
        words = tokenize([StyledString("   a  b ")])
        assert [word.text for word in words] == ["a", "b"]
        assert words[0].space[0].text == "  "

    def test_separator_whitespace_becomes_spaces(self):
        words = tokenize([StyledString("a\tb c")])
        assert [word.text for word in words] == ["a", "b", "c"]
        assert [word.space[0].text for word in words[:2]] == [" ", " "]


class TestWrapText:
    """Greedy line breaking with font metrics."""

    def test_demo_sentence_wraps_to_two_lines(self, font_cache):
        lines = wrap_text([StyledString("This is a demo document.")], cache=font_cache, width=100)
        assert [line.text for line in lines] == ["This is a demo", "document."]
        assert lines[0].width == pytest.approx(78.024)
        assert lines[1].width == pytest.approx(56.028)

    @pytest.mark.parametrize("width", [60, 100, 150, 230, 400])
    def test_lines_never_exceed_width(self, font_cache, width):
        lines = wrap_text([StyledString(LOREM)], cache=font_cache, width=width)
        for line in lines:
            assert line.overflow or line.width <= width + 1e-6
        assert " ".join(line.text for line in lines) == LOREM

    def test_trailing_whitespace_is_not_counted(self, font_cache):
        """A line that fits exactly is not pushed over by the following space."""
        exact = Style().str_width(font_cache, "This is a demo")
        runs = [StyledString("This is a demo document.")]
        lines = wrap_text(runs, cache=font_cache, width=exact)
        assert lines[0].text == "This is a demo"

    def test_overlong_word_is_placed_alone_and_flagged(self, font_cache):
        lines = wrap_text([StyledString("a WWWW b")], cache=font_cache, width=30)
        assert [line.text for line in lines] == ["a", "WWWW", "b"]
        assert [line.overflow for line in lines] == [False, True, False]
        assert lines[1].width == pytest.approx(45.312)

    def test_explicit_newline_forces_break(self, font_cache):
        lines = wrap_text([StyledString("a\nb c")], cache=font_cache, width=500)
        assert [line.text for line in lines] == ["a", "b c"]
        assert lines[0].forced and not lines[1].forced

    def test_mixed_style_line_height_is_maximum(self, font_cache):
        runs = [
            StyledString("small ", Style(font_size=10)),
            StyledString("large", Style(font_size=20)),
        ]
        (line,) = wrap_text(runs, cache=font_cache, width=500)
        pure = wrap_text([StyledString("large", Style(font_size=20))], cache=font_cache, width=500)
        assert line.metrics.line_height == pytest.approx(18.5)
        assert line.metrics.line_height >= pure[0].metrics.line_height

    def test_end_index_allows_resuming(self, font_cache):
        words = tokenize([StyledString(LOREM)])
        lines = list(wrap_lines(words, cache=font_cache, width=120))
        first = lines[0]
        resumed = list(wrap_lines(words[first.end_index:], cache=font_cache, width=120))
        assert [line.text for line in resumed] == [line.text for line in lines[1:]]


class TestHyphenation:
    def test_longest_fitting_prefix_is_used(self, font_cache):
        hyphenator = FixedHyphenator(2, 4)
        lines = wrap_text(
            [StyledString("WWWWWW")],
            cache=font_cache,
            width=50,
            hyphenator=hyphenator,
            locale="de_DE",
        )
        assert [line.text for line in lines] == ["WWWW-", "WW"]
        assert lines[0].width == pytest.approx(49.308)
        assert hyphenator.calls[0] == ("WWWWWW", "de_DE")

    def test_prefix_fills_remaining_space(self, font_cache):
        lines = wrap_text(
            [StyledString("a WWWWWW")],
            cache=font_cache,
            width=50,
            hyphenator=FixedHyphenator(2, 4),
        )
        assert [line.text for line in lines] == ["a WW-", "WWWW"]
        assert lines[0].carry is not None
        assert lines[0].carry.text == "WWWW"

    def test_hyphen_uses_prefix_style(self, font_cache):
        bold = Style(bold=True)
        lines = wrap_text(
            [StyledString("WW", bold), StyledString("WWWW")],
            cache=font_cache,
            width=40,
            hyphenator=FixedHyphenator(2),
        )
        prefix = lines[0].words[0]
        assert prefix.pieces[-1] == StyledString("WW-", bold)

    def test_no_break_point_moves_word(self, font_cache):
        lines = wrap_text(
            [StyledString("a WWWWWW")],
            cache=font_cache,
            width=50,
            hyphenator=FixedHyphenator(),
        )
        assert [line.text for line in lines] == ["a", "WWWWWW"]
        assert lines[1].overflow
