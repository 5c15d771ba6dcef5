"""Row renderer: turn an entry plus solved columns into fitted cell text.

Every row fills exactly ``width`` display cells. Columns that start past the
available width are dropped and the last visible one is clipped.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from ..ansi import Justify, display_width, fit_to_width, skip_columns
from ..entries import FileEntry
from ..screen import VLINE
from ..sorting import SortField
from .fields import FormatContext, PanelField
from .format import ColumnSpec

SORT_UP_CHAR = "'"
SORT_DOWN_CHAR = "."
SCROLL_LEFT_CHAR = "<"
SCROLL_RIGHT_CHAR = ">"

NAME_FIELDS = frozenset(
    {PanelField.NAME, PanelField.UNSORTED, PanelField.VERSION, PanelField.EXTENSION}
)


@dataclass(frozen=True)
class RowCell:
    text: str
    column: ColumnSpec | None = None

    @property
    def is_separator(self) -> bool:
        return self.column is not None and self.column.is_separator

    @property
    def is_name(self) -> bool:
        return self.column is not None and self.column.field in NAME_FIELDS


@dataclass
class FormattedRow:
    cells: list[RowCell] = field(default_factory=list)
    scroll_left: bool = False
    scroll_right: bool = False
    # Cells of the longest name that did not fit its column (0 when all fit).
    name_overflow: int = 0

    @property
    def text(self) -> str:
        return "".join(cell.text for cell in self.cells)


def sort_sign(reverse: bool) -> str:
    return SORT_UP_CHAR if reverse else SORT_DOWN_CHAR


def _fit_name(
    value: str,
    column: ColumnSpec,
    width: int,
    content_shift: int,
    row: FormattedRow,
) -> str:
    overflow = display_width(value) - width
    if overflow > 0:
        row.name_overflow = max(row.name_overflow, overflow)
    if content_shift < 0 or overflow <= 0:
        return fit_to_width(value, width, column.justify)
    shift = min(content_shift, overflow)
    row.scroll_left = row.scroll_left or shift > 0
    row.scroll_right = row.scroll_right or shift < overflow
    return fit_to_width(skip_columns(value, shift), width, column.justify.base)


def format_row(
    entry: FileEntry | None,
    columns: Sequence[ColumnSpec],
    width: int,
    ctx: FormatContext,
    *,
    content_shift: int = -1,
) -> FormattedRow:
    """Render one listing row; ``entry=None`` yields an empty row with separators."""
    row = FormattedRow()
    used = 0
    for column in columns:
        if used >= width:
            break
        avail = min(max(1, column.width), width - used)
        if column.is_separator:
            text = fit_to_width(VLINE, avail, Justify.LEFT)
        elif entry is None:
            text = " " * avail
        else:
            value = column.field.format_value(entry, avail, ctx)
            if column.field in NAME_FIELDS:
                text = _fit_name(value, column, avail, content_shift, row)
            else:
                text = fit_to_width(value, avail, column.justify)
        row.cells.append(RowCell(text, column))
        used += avail
    if used < width:
        row.cells.append(RowCell(" " * (width - used)))
    return row


def format_header(
    columns: Sequence[ColumnSpec],
    width: int,
    *,
    sort_field: SortField | None = None,
    reverse: bool = False,
    show_sort_sign: bool = False,
    filter_text: str | None = None,
) -> FormattedRow:
    """Render the column-title row for one list column."""
    row = FormattedRow()
    used = 0
    for column in columns:
        if used >= width:
            break
        avail = min(max(1, column.width), width - used)
        if column.is_separator:
            text = fit_to_width(VLINE, avail, Justify.LEFT)
        else:
            title = column.title
            if show_sort_sign and sort_field is not None and column.field.sort_field is sort_field:
                title = sort_sign(reverse) + title
            if filter_text and column.field is PanelField.NAME:
                title = f"{title} [{filter_text}]"
            text = fit_to_width(title, avail, Justify.CENTER_LEFT)
        row.cells.append(RowCell(text, column))
        used += avail
    if used < width:
        row.cells.append(RowCell(" " * (width - used)))
    return row


__all__ = [
    "NAME_FIELDS",
    "RowCell",
    "FormattedRow",
    "SORT_UP_CHAR",
    "SORT_DOWN_CHAR",
    "SCROLL_LEFT_CHAR",
    "SCROLL_RIGHT_CHAR",
    "sort_sign",
    "format_row",
    "format_header",
]
