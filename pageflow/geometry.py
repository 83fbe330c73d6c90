"""Geometric value types measured in points."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union


@dataclass(frozen=True, slots=True)
class Position:
    """A point relative to the top-left corner of a region, y growing downward.

    Example:
        >>> Position(1, 2) + Position(3, 4)
        Position(x=4, y=6)
    """

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Position) -> Position:
        return Position(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Position) -> Position:
        return Position(self.x - other.x, self.y - other.y)


@dataclass(frozen=True, slots=True)
class Size:
    """Width and height of a region."""

    width: float = 0.0
    height: float = 0.0

    def stack_vertical(self, other: Size) -> Size:
        """Return the size of ``other`` placed below this size.

        Args:
            other: Size stacked underneath.
        Returns:
            Combined size: the wider width and the summed height.

        Example:
            >>> Size(10, 5).stack_vertical(Size(20, 5))
            Size(width=20, height=10)
        """

        return Size(max(self.width, other.width), self.height + other.height)

    def max(self, other: Size) -> Size:
        """Return the component-wise maximum of two sizes."""

        return Size(max(self.width, other.width), max(self.height, other.height))


MarginsLike = Union["Margins", float, int, Tuple[float, float], Tuple[float, float, float, float]]


@dataclass(frozen=True, slots=True)
class Margins:
    """Spacing around a region, in CSS order (top, right, bottom, left)."""

    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0

    @classmethod
    def all(cls, value: float) -> Margins:
        """Return margins with the same value on every side."""

        return cls(value, value, value, value)

    @classmethod
    def trbl(cls, top: float, right: float, bottom: float, left: float) -> Margins:
        """Return margins from explicit top, right, bottom and left values."""

        return cls(top, right, bottom, left)

    @classmethod
    def vh(cls, vertical: float, horizontal: float) -> Margins:
        """Return margins with shared vertical and horizontal values."""

        return cls(vertical, horizontal, vertical, horizontal)

    @property
    def horizontal(self) -> float:
        return self.left + self.right

    @property
    def vertical(self) -> float:
        return self.top + self.bottom


def as_margins(value: MarginsLike) -> Margins:
    """Coerce a number, a pair or a 4-tuple into ``Margins``.

    Args:
        value: ``Margins`` instance, a single number, a (vertical, horizontal)
            pair or a (top, right, bottom, left) tuple.
    Returns:
        Margins instance.

    Example:
        >>> as_margins(5)
        Margins(top=5, right=5, bottom=5, left=5)
    """

    if isinstance(value, Margins):
        return value
    if isinstance(value, (int, float)):
        return Margins.all(value)
    if len(value) == 2:
        return Margins.vh(*value)
    return Margins.trbl(*value)
