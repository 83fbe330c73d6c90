"""
Layout math helpers for column widths and horizontal alignment.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import List, Sequence, Union


class Alignment(enum.Enum):
    """Horizontal placement of a line or block inside its area."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    JUSTIFY = "justify"


@dataclass(frozen=True, slots=True)
class Fixed:
    """A column with an absolute width in points."""

    width: float


ColumnSpec = Union[float, int, Fixed]


def column_widths(*, columns: Sequence[ColumnSpec], total_width: float) -> List[float]:
    """Return absolute column widths.

    Fixed columns keep their width; the remaining width is distributed across
    the other columns proportionally to their weights.

    Args:
        columns: Column weights or ``Fixed`` widths.
        total_width: Width to distribute.
    Returns:
        One width per column.

    Example:
        >>> column_widths(columns=[30, 70], total_width=200)
        [60.0, 140.0]
        >>> column_widths(columns=[Fixed(20), 1, 1], total_width=100)
        [20, 40.0, 40.0]
    """

    fixed_total = sum(col.width for col in columns if isinstance(col, Fixed))
    weight_total = sum(col for col in columns if not isinstance(col, Fixed))
    remaining = max(0.0, total_width - fixed_total)
    widths: List[float] = []
    for col in columns:
        if isinstance(col, Fixed):
            widths.append(col.width)
        elif weight_total > 0:
            widths.append(remaining * col / weight_total)
        else:
            widths.append(0.0)
    return widths


def alignment_offset(*, alignment: Alignment, width: float, available: float) -> float:
    """Return the x offset placing ``width`` inside ``available``.

    Args:
        alignment: Requested alignment; justified content starts at the left.
        width: Width of the content.
        available: Width of the surrounding area.
    Returns:
        Offset in points, never negative.
    """

    slack = max(0.0, available - width)
    if alignment is Alignment.CENTER:
        return slack / 2
    if alignment is Alignment.RIGHT:
        return slack
    return 0.0
