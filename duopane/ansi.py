"""Display-width measurement and column fitting for panel text.

Widths follow terminal cell rules: combining marks take no cells and East
Asian wide/fullwidth characters take two. Fitting pads or truncates a string
to an exact number of cells according to a justification mode.
"""

from __future__ import annotations

import re
import unicodedata
from enum import IntFlag

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
ELLIPSIS = "..."
FIT_MARK = "~"


class Justify(IntFlag):
    """Column justification; ``FIT`` truncates long text in the middle."""

    LEFT = 1
    RIGHT = 2
    CENTER = 4
    CENTER_LEFT = 8
    FIT = 16

    @property
    def base(self) -> Justify:
        return Justify(int(self) & ~int(Justify.FIT))

    @property
    def is_fit(self) -> bool:
        return bool(self & Justify.FIT)


def char_display_width(ch: str) -> int:
    """Return how many terminal cells ``ch`` occupies."""
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    return sum(char_display_width(ch) for ch in text)


def printable(text: str) -> str:
    """Replace control characters so they cannot move the terminal cursor."""
    return "".join("?" if (ord(ch) < 32 or ord(ch) == 127) else ch for ch in text)


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def take_columns(text: str, width: int) -> str:
    """Return the longest prefix of ``text`` that fits in ``width`` cells.

    Combining marks that follow the last kept character are kept with it.
    """
    if width <= 0:
        return ""
    used = 0
    for index, ch in enumerate(text):
        w = char_display_width(ch)
        if used + w > width:
            return text[:index]
        used += w
    return text


def take_tail_columns(text: str, width: int) -> str:
    """Return the longest suffix of ``text`` that fits in ``width`` cells."""
    if width <= 0:
        return ""
    used = 0
    start = len(text)
    for index in range(len(text) - 1, -1, -1):
        w = char_display_width(text[index])
        if used + w > width:
            break
        used += w
        start = index
    # never start a suffix on a dangling combining mark
    while start < len(text) and unicodedata.combining(text[start]):
        start += 1
    return text[start:]


def skip_columns(text: str, columns: int) -> str:
    """Drop leading characters covering ``columns`` cells."""
    if columns <= 0:
        return text
    used = 0
    for index, ch in enumerate(text):
        if used >= columns and not unicodedata.combining(ch):
            return text[index:]
        used += char_display_width(ch)
    return ""


def pad_to_width(text: str, width: int) -> str:
    missing = width - display_width(text)
    if missing <= 0:
        return text
    return text + " " * missing


def fit_to_width(text: str, width: int, justify: Justify = Justify.LEFT) -> str:
    """Return ``text`` padded or truncated to exactly ``width`` cells.

    Text that fits is aligned by the base justification (centered text puts
    the odd cell on the right). Text that does not fit is either cut in the
    middle with ``~`` (FIT modes) or windowed: left and center-left modes keep
    the head, right keeps the tail, and center keeps the middle.
    """
    if width <= 0:
        return ""
    text_width = display_width(text)
    base = justify.base
    if text_width <= width:
        spare = width - text_width
        if base == Justify.RIGHT:
            return " " * spare + text
        if base in (Justify.CENTER, Justify.CENTER_LEFT):
            left = spare // 2
            return " " * left + text + " " * (spare - left)
        return text + " " * spare

    if justify.is_fit:
        head = take_columns(text, width // 2)
        tail = take_tail_columns(text, width - display_width(head) - 1)
        return pad_to_width(head + FIT_MARK + tail, width)

    if base == Justify.RIGHT:
        offset = text_width - width
    elif base == Justify.CENTER:
        offset = (text_width - width) // 2
    else:
        offset = 0
    return pad_to_width(take_columns(skip_columns(text, offset), width), width)


def truncate_middle(text: str, width: int) -> str:
    """Shorten ``text`` to ``width`` cells by replacing its middle with ``~``."""
    if display_width(text) <= width:
        return text
    return fit_to_width(text, width, Justify.LEFT | Justify.FIT).rstrip(" ")


def truncate_with_ellipsis(text: str, width: int) -> str:
    """Cut ``text`` to ``width`` cells, ending it with ``...`` when cut."""
    if width <= 0:
        return ""
    if display_width(text) <= width:
        return text
    if width <= len(ELLIPSIS):
        return ELLIPSIS[:width]
    return take_columns(text, width - len(ELLIPSIS)) + ELLIPSIS


def trim_left(text: str, width: int) -> str:
    """Keep the tail of ``text`` in ``width`` cells, prefixed by ``...`` when cut."""
    if width <= 0:
        return ""
    if display_width(text) <= width:
        return text
    if width <= len(ELLIPSIS):
        return ELLIPSIS[:width]
    return ELLIPSIS + take_tail_columns(text, width - len(ELLIPSIS))


__all__ = [
    "ANSI_ESCAPE_RE",
    "Justify",
    "char_display_width",
    "display_width",
    "printable",
    "strip_ansi",
    "take_columns",
    "take_tail_columns",
    "skip_columns",
    "pad_to_width",
    "fit_to_width",
    "truncate_middle",
    "truncate_with_ellipsis",
    "trim_left",
]
