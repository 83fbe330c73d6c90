"""Inline HTML markup to styled strings."""

from __future__ import annotations

import re
from typing import List

from bs4 import BeautifulSoup, Comment, NavigableString, Tag
from reportlab.lib import colors

from .style import Effect, Style, StyledString

_WHITESPACE_RE = re.compile(r"\s+")

_TAG_STYLES = {
    "b": Style(bold=True),
    "strong": Style(bold=True),
    "i": Style(italic=True),
    "em": Style(italic=True),
    "u": Style(effects=Effect.UNDERLINE),
    "s": Style(effects=Effect.STRIKETHROUGH),
    "strike": Style(effects=Effect.STRIKETHROUGH),
    "del": Style(effects=Effect.STRIKETHROUGH),
}


def styled_strings_from_html(html: str, *, style: Style | None = None) -> List[StyledString]:
    """Return styled runs for an inline HTML fragment.

    Supported tags: ``b``/``strong``, ``i``/``em``, ``u``, ``s``/``strike``/``del``,
    ``font`` (``face``, ``size``, ``color`` attributes) and ``br``. Unknown tags
    contribute their text with the surrounding style. Whitespace runs collapse
    to a single space.

    Args:
        html: Markup to convert.
        style: Base style of the fragment.
    Returns:
        Styled runs in document order, adjacent runs with equal style merged.

    Example:
        >>> [run.text for run in styled_strings_from_html("a <b>bold</b> word")]
        ['a ', 'bold', ' word']
    """

    soup = BeautifulSoup(html, "html.parser")
    runs: List[StyledString] = []
    _collect_runs(node=soup, style=style or Style(), runs=runs)
    return _merge_adjacent(runs=runs)


def _collect_runs(*, node: Tag, style: Style, runs: List[StyledString]) -> None:
    """Append runs for the children of ``node``.

    Args:
        node: Parent node to walk.
        style: Style in effect for ``node``.
        runs: Output list.
    Returns:
        None.
    """

    for child in node.children:
        if isinstance(child, Comment):
            continue
        if isinstance(child, NavigableString):
            text = _WHITESPACE_RE.sub(" ", str(child))
            if text:
                runs.append(StyledString(text, style))
            continue
        if child.name == "br":
            runs.append(StyledString("\n", style))
            continue
        _collect_runs(node=child, style=style.merged(_tag_style(tag=child)), runs=runs)


def _tag_style(*, tag: Tag) -> Style:
    """Return the style contributed by a single tag.

    Args:
        tag: Markup element.
    Returns:
        Style overlay for the tag's content.
    """

    if tag.name != "font":
        return _TAG_STYLES.get(tag.name, Style())
    size = tag.get("size")
    color = tag.get("color")
    return Style(
        font_family=tag.get("face"),
        font_size=float(size) if size else None,
        color=colors.toColor(color) if color else None,
    )


def _merge_adjacent(*, runs: List[StyledString]) -> List[StyledString]:
    """Join neighbouring runs that share a style.

    Args:
        runs: Runs in order.
    Returns:
        Merged runs.
    """

    merged: List[StyledString] = []
    for run in runs:
        if merged and merged[-1].style == run.style:
            merged[-1] = StyledString(merged[-1].text + run.text, run.style)
        else:
            merged.append(run)
    return merged
