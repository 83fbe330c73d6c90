"""
Word tokenization and greedy line wrapping for styled text.

Styled runs are first split into ``Word`` tokens. A word is a maximal sequence
of non-whitespace characters, possibly spanning several styles, followed by
the whitespace that separates it from the next word. ``wrap_lines`` then packs
words into lines no wider than the requested width, hyphenating overflowing
words when a strategy is configured.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, List, Sequence, Tuple

from .constants import EPSILON, HYPHEN
from .fonts import LineMetrics
from .log import _debug, get_logger
from .style import Style, StyledString

if TYPE_CHECKING:
    from .fonts import FontCache
    from .text import Hyphenator


@dataclass(slots=True)
class Word:
    """A word with its trailing whitespace.

    Args:
        pieces: Non-whitespace text, one run per style change.
        space: Whitespace following the word.
        newline: Whether an explicit line break follows the word.
    """

    pieces: List[StyledString] = field(default_factory=list)
    space: List[StyledString] = field(default_factory=list)
    newline: bool = False

    @property
    def text(self) -> str:
        return "".join(piece.text for piece in self.pieces)

    def width(self, cache: FontCache) -> float:
        return sum(piece.width(cache) for piece in self.pieces)

    def space_width(self, cache: FontCache) -> float:
        return sum(run.width(cache) for run in self.space)

    def left_side_bearing(self, cache: FontCache) -> float:
        """Return the bearing of the first glyph, or 0 for an empty word."""

        for piece in self.pieces:
            if piece.text:
                return piece.style.char_left_side_bearing(cache, piece.text[0])
        return 0.0

    def split(self, offset: int) -> Tuple[Word, Word]:
        """Split the word after ``offset`` characters.

        The prefix gets no whitespace; the remainder keeps the word's
        whitespace and line break.

        Args:
            offset: Number of characters kept in the prefix.
        Returns:
            (prefix, remainder) words.
        """

        prefix: List[StyledString] = []
        rest: List[StyledString] = []
        seen = 0
        for piece in self.pieces:
            length = len(piece.text)
            if seen + length <= offset:
                prefix.append(piece)
            elif seen >= offset:
                rest.append(piece)
            else:
                cut = offset - seen
                prefix.append(StyledString(piece.text[:cut], piece.style))
                rest.append(StyledString(piece.text[cut:], piece.style))
            seen += length
        return Word(prefix), Word(rest, list(self.space), self.newline)

    def with_hyphen(self) -> Word:
        """Return a copy with a hyphen appended in the style of the last piece."""

        pieces = list(self.pieces)
        _append_char(target=pieces, char=HYPHEN, style=pieces[-1].style)
        return Word(pieces, list(self.space), self.newline)


@dataclass(slots=True)
class Line:
    """One wrapped line.

    Args:
        words: Words placed on the line; the last may be a hyphenated prefix.
        width: Advance width of the line without trailing whitespace.
        metrics: Maximum line metrics of all styles on the line.
        end_index: Index of the first input word not consumed by this line.
        carry: Remainder of a hyphenated word that starts the next line.
        overflow: The line holds a single word wider than the line width.
        forced: The line was ended by an explicit newline.
    """

    words: List[Word]
    width: float
    metrics: LineMetrics
    end_index: int
    carry: Word | None = None
    overflow: bool = False
    forced: bool = False

    @property
    def text(self) -> str:
        parts: List[str] = []
        for idx, word in enumerate(self.words):
            parts.append(word.text)
            if idx < len(self.words) - 1:
                parts.append("".join(run.text for run in word.space))
        return "".join(parts)

    @property
    def gap_count(self) -> int:
        return max(0, len(self.words) - 1)


def tokenize(runs: Sequence[StyledString]) -> List[Word]:
    """Split styled runs into words.

    Whitespace between words is normalized to spaces; whitespace before the
    first word of a line is dropped. An explicit ``\\n`` ends the current word
    with a line break; an empty line is represented by a word with a single
    empty piece so that it keeps the style's height.

    Args:
        runs: Styled runs in order.
    Returns:
        Words in order.

    Example:
        >>> [w.text for w in tokenize([StyledString("a b"), StyledString("c")])]
        ['a', 'bc']
    """

    words: List[Word] = []
    current: Word | None = None
    for run in runs:
        for char in run.text:
            if char == "\n":
                if current is None:
                    current = Word([StyledString("", run.style)])
                current.newline = True
                words.append(current)
                current = None
            elif char.isspace():
                if current is not None:
                    _append_char(target=current.space, char=" ", style=run.style)
            else:
                if current is not None and current.space:
                    words.append(current)
                    current = None
                if current is None:
                    current = Word()
                _append_char(target=current.pieces, char=char, style=run.style)
    if current is not None:
        words.append(current)
    return words


def wrap_lines(
    words: Sequence[Word],
    *,
    cache: FontCache,
    width: float,
    hyphenator: Hyphenator | None = None,
    locale: str = "en_US",
) -> Iterator[Line]:
    """Lazily pack words into lines no wider than ``width``.

    Args:
        words: Words to wrap.
        cache: Font cache used for measuring.
        width: Maximum line width in points.
        hyphenator: Optional hyphenation strategy for overflowing words.
        locale: Hyphenation locale.
    Returns:
        Iterator over lines; each records where the next line resumes.
    """

    index = 0
    pending: Word | None = None
    while pending is not None or index < len(words):
        builder = _LineBuilder(cache)
        while True:
            if pending is not None:
                word = pending
            elif index < len(words):
                word = words[index]
            else:
                break
            from_pending = word is pending

            if builder.fits(word, width):
                builder.add(word)
                if from_pending:
                    pending = None
                else:
                    index += 1
                if word.newline:
                    builder.forced = True
                    break
                continue

            split = None
            if hyphenator is not None:
                split = _hyphenate(
                    word=word,
                    builder=builder,
                    width=width,
                    hyphenator=hyphenator,
                    locale=locale,
                )
            if split is not None:
                prefix, pending = split
                builder.add(prefix)
                if not from_pending:
                    index += 1
                break

            if builder.is_empty:
                builder.add(word)
                builder.overflow = True
                get_logger().warning(
                    f"Word {word.text!r} is {builder.width:.2f}pt wide and overflows "
                    f"a {width:.2f}pt line"
                )
                if from_pending:
                    pending = None
                else:
                    index += 1
                builder.forced = word.newline
            break
        line = builder.finish(end_index=index, carry=pending)
        _debug(msg=f"Wrapped line {line.text!r} ({line.width:.2f}pt of {width:.2f}pt)")
        yield line


def wrap_text(
    runs: Sequence[StyledString],
    *,
    cache: FontCache,
    width: float,
    hyphenator: Hyphenator | None = None,
    locale: str = "en_US",
) -> List[Line]:
    """Wrap styled runs into a list of lines.

    Example:
        >>> lines = wrap_text([StyledString("This is a demo document.")],
        ...                   cache=cache, width=100)  # doctest: +SKIP
        >>> [line.text for line in lines]  # doctest: +SKIP
        ['This is a demo', 'document.']
    """

    return list(
        wrap_lines(
            tokenize(runs),
            cache=cache,
            width=width,
            hyphenator=hyphenator,
            locale=locale,
        )
    )


class _LineBuilder:
    """Accumulates words of one line and tracks its width and metrics."""

    def __init__(self, cache: FontCache) -> None:
        self.cache = cache
        self.words: List[Word] = []
        self.width = 0.0
        self.metrics = LineMetrics()
        self.overflow = False
        self.forced = False

    @property
    def is_empty(self) -> bool:
        return not self.words

    def candidate_width(self, word: Word) -> float:
        if not self.words:
            return word.width(self.cache) - word.left_side_bearing(self.cache)
        return self.width + self.words[-1].space_width(self.cache) + word.width(self.cache)

    def fits(self, word: Word, width: float) -> bool:
        return self.candidate_width(word) <= width + EPSILON

    def add(self, word: Word) -> None:
        self.width = self.candidate_width(word)
        if self.words:
            for run in self.words[-1].space:
                self.metrics = self.metrics.max(run.style.line_metrics(self.cache))
        for piece in word.pieces:
            self.metrics = self.metrics.max(piece.style.line_metrics(self.cache))
        self.words.append(word)

    def finish(self, *, end_index: int, carry: Word | None) -> Line:
        return Line(
            words=self.words,
            width=self.width,
            metrics=self.metrics,
            end_index=end_index,
            carry=carry,
            overflow=self.overflow,
            forced=self.forced,
        )


def _hyphenate(
    *,
    word: Word,
    builder: _LineBuilder,
    width: float,
    hyphenator: Hyphenator,
    locale: str,
) -> Tuple[Word, Word] | None:
    """Return the longest hyphenated prefix of ``word`` that fits the line.

    Args:
        word: Word that does not fit.
        builder: Line under construction.
        width: Maximum line width.
        hyphenator: Strategy providing break offsets.
        locale: Hyphenation locale.
    Returns:
        (prefix with hyphen, remainder) or None when no break fits.
    """

    text = word.text
    for offset in sorted(set(hyphenator.break_offsets(text, locale)), reverse=True):
        if offset <= 0 or offset >= len(text):
            continue
        prefix, rest = word.split(offset)
        candidate = prefix.with_hyphen()
        if builder.fits(candidate, width):
            return candidate, rest
    return None


def _append_char(*, target: List[StyledString], char: str, style: Style) -> None:
    """Append ``char`` to the last run when styles match, else start a run.

    Args:
        target: Runs to extend.
        char: Character to append.
        style: Style of the character.
    Returns:
        None.
    """

    if target and target[-1].style == style:
        target[-1] = StyledString(target[-1].text + char, style)
    else:
        target.append(StyledString(char, style))
