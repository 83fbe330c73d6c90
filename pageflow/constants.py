"""Shared constants for layout and text processing."""

from __future__ import annotations

import os

EPSILON = 1e-4
HYPHEN = "-"
DEFAULT_BULLET = "–"
DEFAULT_DPI = 300.0
POINTS_PER_INCH = 72.0
DEBUG_LAYOUT = os.getenv("PAGEFLOW_DEBUG_LAYOUT", "0") not in {
    "",
    "0",
    "false",
    "False",
}
