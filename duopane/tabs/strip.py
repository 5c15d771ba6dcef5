"""Tab titles and the tab-strip window.

Each tab is drawn as a cell ``" " + title + " " + "│"``. The window starts
on the current tab's cell and grows one character at a time, left first,
until it fills the strip or covers every cell.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from ..ansi import display_width, skip_columns, take_columns, truncate_with_ellipsis
from ..screen import VLINE
from .ring import Tab

MAX_TAB_TITLE = 30
HIGHLIGHT_MARK = "*"
PLAIN_MARK = " "
MISSING_PATH_TITLE = "Error"
TOP_TAB_ROWS = 3
BOTTOM_TAB_ROWS = 2


def title_budget(panel_cols: int, max_title: int = MAX_TAB_TITLE) -> int:
    """Characters available for a title; one column is kept for the mark."""
    limit = panel_cols - 5
    budget = max_title if 0 < max_title <= limit else limit
    return max(0, budget - 1)


def derive_title(tab: Tab, path: Path | None, budget: int) -> str | None:
    """Bare title: the tab name, else the last path segment, else ``/``.

    Returns ``None`` when an unnamed tab has no path to derive from.
    """
    if tab.name:
        return truncate_with_ellipsis(tab.name, budget)
    if path is None:
        return None
    parts = [part for part in Path(path).parts if part != Path(path).anchor]
    if not parts:
        return "/"
    return truncate_with_ellipsis(parts[-1], budget)


def tab_title(
    tab: Tab,
    *,
    is_current: bool,
    live_path: Path | None,
    panel_cols: int,
    highlight: bool,
) -> str:
    """Display title of ``tab`` with its mark column.

    The current tab shows ``live_path`` since its stored path is stale.
    ``highlight`` puts ``*`` in the mark column instead of a space.
    """
    path = live_path if is_current else tab.path
    title = derive_title(tab, path, title_budget(panel_cols))
    if title is None:
        return MISSING_PATH_TITLE
    return title + (HIGHLIGHT_MARK if highlight else PLAIN_MARK)


def cell_text(title: str) -> str:
    return f" {title} {VLINE}"


@dataclass(frozen=True)
class TabStripWindow:
    """Visible part of the tab strip.

    ``start``/``end`` are the ring indices of the first and last visible
    tab; ``start_cut``/``end_cut`` count the cells hidden on the left of the
    first cell and on the right of the last one.
    """

    start: int
    end: int
    start_cut: int = 0
    end_cut: int = 0
    scroll_left: bool = False
    scroll_right: bool = False


def layout_tab_strip(titles: Sequence[str], current: int, usable: int) -> TabStripWindow:
    """Compute the window over ``titles`` that keeps ``titles[current]`` in view."""
    if not titles:
        return TabStripWindow(0, 0)
    widths = [display_width(cell_text(title)) for title in titles]
    starts: list[int] = []
    offset = 0
    for width in widths:
        starts.append(offset)
        offset += width
    total = offset

    left = starts[current]
    right = left + widths[current]
    if right - left > usable:
        right = left + max(0, usable)
    else:
        grow_left = True
        while right - left < usable and (left > 0 or right < total):
            if grow_left and left > 0:
                left -= 1
            elif not grow_left and right < total:
                right += 1
            elif left > 0:
                left -= 1
            else:
                right += 1
            grow_left = not grow_left

    start = _cell_at(starts, left)
    end = _cell_at(starts, max(left, right - 1))
    return TabStripWindow(
        start=start,
        end=end,
        start_cut=left - starts[start],
        end_cut=starts[end] + widths[end] - right,
        scroll_left=left > 0,
        scroll_right=right < total,
    )


def _cell_at(starts: Sequence[int], position: int) -> int:
    index = 0
    for candidate, start in enumerate(starts):
        if start <= position:
            index = candidate
        else:
            break
    return index


@dataclass(frozen=True)
class StripSegment:
    """Visible slice of one tab cell; ``column`` is relative to the strip start."""

    index: int
    column: int
    body: str
    bar: str

    @property
    def width(self) -> int:
        return display_width(self.body) + display_width(self.bar)


def strip_segments(titles: Sequence[str], window: TabStripWindow) -> list[StripSegment]:
    """Split the visible window into per-tab slices for painting and clicks."""
    segments: list[StripSegment] = []
    column = 0
    for index in range(window.start, window.end + 1):
        text = cell_text(titles[index])
        width = display_width(text)
        cut_left = window.start_cut if index == window.start else 0
        cut_right = window.end_cut if index == window.end else 0
        visible = take_columns(skip_columns(text, cut_left), width - cut_left - cut_right)
        if not visible:
            continue
        if visible.endswith(VLINE):
            body, bar = visible[: -len(VLINE)], VLINE
        else:
            body, bar = visible, ""
        segment = StripSegment(index=index, column=column, body=body, bar=bar)
        segments.append(segment)
        column += segment.width
    return segments


def tab_at_column(titles: Sequence[str], window: TabStripWindow, column: int) -> int | None:
    for segment in strip_segments(titles, window):
        if segment.column <= column < segment.column + segment.width:
            return segment.index
    return None


def tabs_visible(
    ring_size: int,
    *,
    hide_tabs: bool,
    any_long_format: bool,
    is_focused: bool,
) -> bool:
    """Whether a panel shows its tab strip.

    Shown when there is more than one tab or hiding is off, and either no
    panel uses the long format or this panel has focus.
    """
    if ring_size <= 1 and hide_tabs:
        return False
    return not any_long_format or is_focused


def tab_rows(visible: bool, bar_position: str) -> int:
    if not visible:
        return 0
    return TOP_TAB_ROWS if bar_position == "top" else BOTTOM_TAB_ROWS


__all__ = [
    "MAX_TAB_TITLE",
    "TabStripWindow",
    "StripSegment",
    "title_budget",
    "derive_title",
    "tab_title",
    "cell_text",
    "layout_tab_strip",
    "strip_segments",
    "tab_at_column",
    "tabs_visible",
    "tab_rows",
]
