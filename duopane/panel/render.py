"""Panel painter: frame, tab strip, column header, list rows and mini-status.

Row layout from the top: frame, tab strip (top bar only), header, list rows,
mini-info separator and status line, tab strip (bottom bar only), frame.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from ..ansi import Justify, display_width, fit_to_width, trim_left, truncate_middle
from ..entries import FileEntry
from ..listing.fields import FormatContext, PanelField, size_trunc_len, size_trunc_sep
from ..listing.format import ListingMode
from ..listing.row import (
    SCROLL_LEFT_CHAR,
    SCROLL_RIGHT_CHAR,
    format_header,
    format_row,
    sort_sign,
)
from ..screen import HLINE, LEFT_TEE, RIGHT_TEE, VLINE, Canvas
from ..tabs.strip import TabStripWindow, strip_segments
from .panel import Panel
from .state import FRAME_ROWS

HIDDEN_SHOWN_CHAR = "."
HIDDEN_HIDDEN_CHAR = " "
HISTORY_PREV_CHAR = "<"
HISTORY_NEXT_CHAR = ">"
HISTORY_LIST_CHAR = "^"
READLINK_FAILED = "<readlink failed>"
PANELIZED_LABEL = "Panelize"


@dataclass(frozen=True)
class TabStripView:
    """What the painter needs to draw one panel's tab strip."""

    titles: list[str]
    window: TabStripWindow
    current: int
    bar_position: str = "top"


def display_path(path: Path, home: str | None = None) -> str:
    """Path as shown in the frame title, with the home directory as ``~``."""
    home = home if home is not None else os.path.expanduser("~")
    text = str(path)
    if home and home != "/" and (text == home or text.startswith(home.rstrip("/") + "/")):
        return "~" + text[len(home.rstrip("/")) :]
    return text


def marked_summary(marked: int, total: int, *, si: bool = False, size_only: bool = False) -> str:
    size = size_trunc_sep(total, si)
    if size_only:
        return size
    return f"{size} in {marked} file" + ("" if marked == 1 else "s")


def free_space_text(avail: int, total: int, *, si: bool = False) -> str:
    percent = 0 if total <= 0 else avail * 100 // total
    return (
        f" {size_trunc_len(avail, 5, units=1, si=si)}/"
        f"{size_trunc_len(total, 5, units=1, si=si)} ({percent}%) "
    )


def entry_color(entry: FileEntry) -> str:
    if entry.is_link:
        return "stale_link" if entry.stale_link else "link"
    if entry.is_dir:
        return "directory"
    if entry.is_device:
        return "device"
    if entry.is_executable:
        return "executable"
    if not entry.is_regular:
        return "special"
    return "normal"


def row_color(entry: FileEntry | None, *, selected: bool, focused: bool) -> str:
    if entry is None:
        return "normal"
    cursor = selected and focused
    if entry.marked:
        return "marked_selected" if cursor else "marked"
    if cursor:
        return "selected"
    return entry_color(entry)


def list_top(panel: Panel, strip: TabStripView | None) -> int:
    """Canvas row of the header (the first list row follows it)."""
    top_tabs = panel.state.tab_rows if strip is not None and strip.bar_position == "top" else 0
    return 1 + top_tabs


def list_column_geometry(panel: Panel) -> list[tuple[int, int]]:
    """``(offset, width)`` of every list column relative to the panel's inner left edge."""
    state = panel.state
    inner = state.cols - 2
    list_cols = max(1, state.list_cols)
    width = inner // list_cols
    geometry: list[tuple[int, int]] = []
    for nth in range(list_cols):
        offset = width * nth
        if nth + 1 >= list_cols:
            geometry.append((offset, inner - offset))
        else:
            # One cell goes to the separator between list columns.
            geometry.append((offset, width - 1))
    return geometry


def header_field_at(panel: Panel, column: int) -> PanelField | None:
    """Format field under panel-relative ``column`` on the header row."""
    inner = column - 1
    for offset, width in list_column_geometry(panel):
        if not offset <= inner < offset + width:
            continue
        used = offset
        for spec in panel.state.format.columns:
            if used <= inner < used + spec.width:
                return None if spec.is_separator else spec.field
            used += spec.width
    return None


def entry_index_at(panel: Panel, strip: TabStripView | None, row: int, column: int) -> int | None:
    """Listing index under panel-relative ``(row, column)``, ``None`` off the list."""
    state = panel.state
    first = list_top(panel, strip) + 1
    line = row - first
    if not 0 <= line < state.lines:
        return None
    inner = column - 1
    for nth, (offset, width) in enumerate(list_column_geometry(panel)):
        if offset <= inner < offset + width + 1:
            index = state.top + nth * state.lines + line
            return index if index < state.count else None
    return None


def paint_tab_strip(
    canvas: Canvas, panel: Panel, x: int, strip: TabStripView, *, focused: bool
) -> None:
    state = panel.state
    cols = state.cols
    usable = cols - 2
    if strip.bar_position == "top":
        separators = (1, 3)
        row = 2
    else:
        separators = (state.rows - 3,)
        row = state.rows - 2
    canvas.set_color("frame")
    for y in separators:
        canvas.hline(y, x + 1, usable)
        canvas.print_at(y, x, LEFT_TEE)
        canvas.print_at(y, x + cols - 1, RIGHT_TEE)

    used = 0
    for segment in strip_segments(strip.titles, strip.window):
        if used >= usable:
            break
        active = segment.index == strip.current and focused
        body = segment.body[: max(0, usable - used)]
        canvas.print_at(row, x + 1 + used, body, "tab_selected" if active else "tab_normal")
        used += display_width(body)
        if segment.bar and used < usable:
            canvas.print_at(row, x + 1 + used, segment.bar, "frame")
            used += 1
    if used < usable:
        canvas.print_at(row, x + 1 + used, " " * (usable - used), "normal")

    if strip.window.scroll_left:
        canvas.print_at(row, x + 1, HISTORY_PREV_CHAR, "normal")
    if strip.window.scroll_right:
        canvas.print_at(row, x + cols - 2, HISTORY_NEXT_CHAR, "normal")


def paint_frame(canvas: Canvas, panel: Panel, x: int, *, focused: bool, si: bool) -> None:
    state = panel.state
    cols, rows = state.cols, state.rows
    canvas.set_color("frame")
    canvas.box(0, x, rows, cols)

    canvas.print_at(0, x + 1, HISTORY_PREV_CHAR, "frame")
    hidden = HIDDEN_SHOWN_CHAR if panel.options.show_hidden else HIDDEN_HIDDEN_CHAR
    canvas.print_at(0, x + cols - 6, f"{hidden}[{HISTORY_LIST_CHAR}]{HISTORY_NEXT_CHAR}", "frame")

    column = x + 3
    if panel.is_panelized:
        label = f" {PANELIZED_LABEL} "
        canvas.print_at(0, column, label, "frame")
        column += len(label)
    title = trim_left(display_path(panel.cwd), max(0, cols - 12))
    canvas.print_at(0, column, f" {title} ", "reverse" if focused else "frame")

    if not panel.options.show_mini_info:
        if state.marked == 0:
            entry = state.selection
            if entry is not None and entry.is_regular:
                canvas.print_at(rows - 1, x + 4, f" {size_trunc_sep(entry.size, si)} ", "normal")
        else:
            summary = marked_summary(state.marked, state.total, si=si, size_only=True)
            text = truncate_middle(summary, cols - 4)
            canvas.print_at(rows - 1, x + 2, f" {text} ", "marked")

    space = panel.free_space_info()
    if space is not None and (space.avail or space.total):
        text = free_space_text(space.avail, space.total, si=si)
        canvas.print_at(rows - 1, x + cols - 2 - len(text), text, "normal")


def paint_header(canvas: Canvas, panel: Panel, x: int, y: int) -> None:
    state = panel.state
    long_mode = panel.listing_mode is ListingMode.LONG
    canvas.print_at(y, x + 1, " " * (state.cols - 2), "normal")
    geometry = list_column_geometry(panel)
    for nth, (offset, width) in enumerate(geometry):
        header = format_header(
            state.format.columns,
            width,
            sort_field=state.sort_field,
            reverse=state.reverse,
            show_sort_sign=long_mode,
            filter_text=state.filter,
        )
        column = x + 1 + offset
        for cell in header.cells:
            canvas.print_at(y, column, cell.text, "frame" if cell.is_separator else "header")
            column += display_width(cell.text)
        if nth + 1 < len(geometry):
            canvas.print_at(y, column, VLINE, "frame")
    if not long_mode:
        canvas.print_at(y, x + 1, sort_sign(state.reverse) + state.sort_field.hotkey, "header")


def paint_rows(
    canvas: Canvas, panel: Panel, x: int, y: int, ctx: FormatContext, *, focused: bool
) -> None:
    state = panel.state
    geometry = list_column_geometry(panel)
    overflow = 0
    for nth, (offset, width) in enumerate(geometry):
        last = nth + 1 >= len(geometry)
        for line in range(state.lines):
            index = state.top + nth * state.lines + line
            entry = state.entries[index] if index < state.count else None
            row = format_row(
                entry, state.format.columns, width, ctx, content_shift=state.content_shift
            )
            overflow = max(overflow, row.name_overflow)
            color = row_color(entry, selected=index == state.selected, focused=focused)
            column = x + 1 + offset
            for cell in row.cells:
                canvas.print_at(y + line, column, cell.text, "frame" if cell.is_separator else color)
                column += display_width(cell.text)
            if not last:
                canvas.print_at(y + line, x + 1 + offset + width, VLINE, "frame")
            if row.scroll_left:
                canvas.print_at(y + line, x + offset, SCROLL_LEFT_CHAR, "normal")
            if row.scroll_right:
                right = x + 1 + offset + width
                canvas.print_at(y + line, right, SCROLL_RIGHT_CHAR, "normal")
    state.max_shift = overflow if overflow > 0 else -1


def paint_mini_info(
    canvas: Canvas, panel: Panel, x: int, y: int, ctx: FormatContext, *, si: bool
) -> None:
    state = panel.state
    cols = state.cols
    canvas.set_color("frame")
    canvas.hline(y, x + 1, cols - 2, HLINE)
    canvas.print_at(y, x, LEFT_TEE)
    canvas.print_at(y, x + cols - 1, RIGHT_TEE)
    if state.marked > 0:
        text = truncate_middle(marked_summary(state.marked, state.total, si=si), cols - 4)
        canvas.print_at(y, x + (cols - display_width(text)) // 2 - 1, f" {text} ", "marked")

    status_row = y + 1
    canvas.print_at(status_row, x + 1, " " * (cols - 2), "normal")
    if state.searching:
        canvas.print_at(status_row, x + 1, "/", "input")
        canvas.print(fit_to_width(state.search_buffer, cols - 3, Justify.LEFT))
        return
    entry = state.selection
    if entry is None:
        return
    color = entry_color(entry)
    if entry.is_link:
        try:
            target = os.readlink(panel.cwd / entry.name)
        except OSError:
            canvas.print_at(status_row, x + 1, fit_to_width(READLINK_FAILED, cols - 2), color)
        else:
            shown = fit_to_width(target, cols - 5, Justify.LEFT | Justify.FIT)
            canvas.print_at(status_row, x + 1, "-> " + shown, color)
        return
    if entry.is_dotdot:
        canvas.print_at(status_row, x + 1, fit_to_width("UP--DIR", cols - 2), color)
        return
    row = format_row(entry, state.status_format.columns, cols - 2, ctx)
    column = x + 1
    for cell in row.cells:
        canvas.print_at(status_row, column, cell.text, "frame" if cell.is_separator else color)
        column += display_width(cell.text)


def paint_panel(
    canvas: Canvas,
    panel: Panel,
    x: int,
    *,
    focused: bool,
    strip: TabStripView | None = None,
    ctx: FormatContext | None = None,
) -> None:
    """Paint ``panel`` with its left edge at canvas column ``x``; clears the dirty flag."""
    state = panel.state
    if state.cols < 4 or state.rows < FRAME_ROWS:
        return
    si = panel.options.kilobyte_si
    ctx = ctx or FormatContext(kilobyte_si=si)

    paint_frame(canvas, panel, x, focused=focused, si=si)
    if strip is not None:
        paint_tab_strip(canvas, panel, x, strip, focused=focused)

    header_row = list_top(panel, strip)
    paint_header(canvas, panel, x, header_row)
    paint_rows(canvas, panel, x, header_row + 1, ctx, focused=focused)
    if panel.options.show_mini_info:
        paint_mini_info(canvas, panel, x, header_row + 1 + state.lines, ctx, si=si)
    state.dirty = False


__all__ = [
    "TabStripView",
    "display_path",
    "marked_summary",
    "free_space_text",
    "entry_color",
    "row_color",
    "list_column_geometry",
    "header_field_at",
    "entry_index_at",
    "paint_tab_strip",
    "paint_panel",
]
