"""
Hyphenation strategies consulted by the line wrapper.
"""

from __future__ import annotations

import re
from typing import Dict, Protocol, Sequence

WORD_CORE_RE = re.compile(r"^(\W*)(.*?)(\W*)$", re.DOTALL)
MIN_HYPHENATED_LENGTH = 5


class Hyphenator(Protocol):
    """Maps a word to the interior offsets where it may be broken."""

    def break_offsets(self, word: str, locale: str) -> Sequence[int]:
        """Return ascending offsets ``i`` such that ``word[:i] + '-'`` is a legal prefix."""


class NoHyphenation:
    """Hyphenation strategy that never breaks words.

    Example:
        >>> NoHyphenation().break_offsets("everlasting", "en_US")
        ()
    """

    def break_offsets(self, word: str, locale: str) -> Sequence[int]:
        return ()


class PyphenHyphenator:
    """Hyphenation backed by pyphen's hunspell dictionaries.

    Leading and trailing punctuation is ignored when looking up break points,
    and words shorter than ``min_length`` letters are never broken.

    Example:
        >>> PyphenHyphenator().break_offsets("everlasting", "en_US")  # doctest: +SKIP
        [2, 4, 8]
    """

    def __init__(self, min_length: int = MIN_HYPHENATED_LENGTH) -> None:
        self.min_length = min_length
        self._dictionaries: Dict[str, object] = {}

    def _dictionary(self, locale: str):
        if locale not in self._dictionaries:
            from pyphen import Pyphen

            self._dictionaries[locale] = Pyphen(lang=locale)
        return self._dictionaries[locale]

    def break_offsets(self, word: str, locale: str) -> Sequence[int]:
        match = WORD_CORE_RE.match(word)
        lead, core = match.group(1), match.group(2)
        if len(core) < self.min_length or not core.isalpha():
            return []
        positions = self._dictionary(locale).positions(core)
        return [len(lead) + pos for pos in positions]
