"""Format compiler: display-format strings to ordered column descriptors.

Grammar::

    format := [full|half]? [digit]? item*
    item   := [<=>]? field-id (':' digits '+'?)?

Items are separated by spaces, tabs or commas. Field ids are matched by
prefix in field-table order.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from ..ansi import Justify
from ..errors import FormatError
from .fields import PanelField, match_field

FRAME_FULL = "full"
FRAME_HALF = "half"
MAX_LIST_COLS = 9
DEFAULT_BRIEF_COLS = 2

FULL_FORMAT = "half type name | size | mtime"
LONG_FORMAT = "full perm space nlink space owner space group space size space mtime space name"
DEFAULT_USER_FORMAT = "half type name | size | perm"

_SEPARATORS = " \t,"
_JUSTIFY_CHARS = {
    "<": Justify.LEFT,
    "=": Justify.CENTER,
    ">": Justify.RIGHT,
}


class ListingMode(str, Enum):
    FULL = "full"
    BRIEF = "brief"
    LONG = "long"
    USER = "user"

    def next(self) -> ListingMode:
        members = list(ListingMode)
        return members[(members.index(self) + 1) % len(members)]

    @classmethod
    def from_id(cls, value: object) -> ListingMode | None:
        if isinstance(value, ListingMode):
            return value
        try:
            return cls(str(value))
        except ValueError:
            return None


@dataclass
class ColumnSpec:
    """One compiled format item; ``width`` is filled in by the layout solver."""

    field: PanelField
    requested_width: int
    justify: Justify
    expand: bool
    width: int = 0

    @property
    def field_id(self) -> str:
        return self.field.field_id

    @property
    def title(self) -> str:
        return self.field.title

    @property
    def is_separator(self) -> bool:
        return self.field.is_separator


@dataclass
class CompiledFormat:
    frame: str = FRAME_HALF
    list_cols: int = 1
    columns: list[ColumnSpec] = field(default_factory=list)

    @property
    def total_requested(self) -> int:
        return sum(column.requested_width for column in self.columns)

    @property
    def is_full_frame(self) -> bool:
        return self.frame == FRAME_FULL

    def column_for(self, panel_field: PanelField) -> ColumnSpec | None:
        for column in self.columns:
            if column.field is panel_field:
                return column
        return None


def _skip_separators(text: str, pos: int) -> int:
    while pos < len(text) and text[pos] in _SEPARATORS:
        pos += 1
    return pos


def compile_format(text: str, *, is_status: bool = False) -> CompiledFormat:
    """Compile ``text`` into a ``CompiledFormat``.

    Raises ``FormatError`` on the first token that is not a known field, and
    on a ``:`` not followed by a positive width. A column-count digit is
    consumed but ignored for status formats.
    """
    compiled = CompiledFormat()
    pos = _skip_separators(text, 0)

    if text.startswith(FRAME_FULL, pos):
        compiled.frame = FRAME_FULL
        pos += len(FRAME_FULL)
    elif text.startswith(FRAME_HALF, pos):
        pos += len(FRAME_HALF)
    pos = _skip_separators(text, pos)

    if pos < len(text) and text[pos].isdigit():
        if not is_status:
            compiled.list_cols = max(1, int(text[pos]))
        pos += 1

    pos = _skip_separators(text, pos)
    while pos < len(text):
        justify: Justify | None = None
        if text[pos] in _JUSTIFY_CHARS:
            justify = _JUSTIFY_CHARS[text[pos]]
            pos = _skip_separators(text, pos + 1)

        panel_field = match_field(text[pos:])
        if panel_field is None:
            raise FormatError(text[pos:])
        pos += len(panel_field.field_id)

        if justify is None:
            justify = panel_field.justify
        elif panel_field.justify.is_fit:
            justify = justify | Justify.FIT

        column = ColumnSpec(
            field=panel_field,
            requested_width=panel_field.min_size,
            justify=justify,
            expand=panel_field.expands,
        )

        pos = _skip_separators(text, pos)
        if pos < len(text) and text[pos] == ":":
            pos += 1
            start = pos
            while pos < len(text) and text[pos].isdigit():
                pos += 1
            width = int(text[start:pos]) if pos > start else 0
            if width <= 0:
                raise FormatError(
                    text[start:] or panel_field.field_id,
                    f"Missing field length on display format: {panel_field.field_id}",
                )
            column.requested_width = width
            column.expand = False
            if pos < len(text) and text[pos] == "+":
                column.expand = True
                pos += 1

        compiled.columns.append(column)
        pos = _skip_separators(text, pos)

    return compiled


def clamp_brief_cols(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return DEFAULT_BRIEF_COLS
    return max(1, min(MAX_LIST_COLS, value))


def brief_format(brief_cols: int) -> str:
    return f"half {clamp_brief_cols(brief_cols)} type name"


def list_format_text(
    mode: ListingMode,
    *,
    user_format: str = DEFAULT_USER_FORMAT,
    brief_cols: int = DEFAULT_BRIEF_COLS,
) -> str:
    """Return the format string shown in the main list for ``mode``."""
    if mode is ListingMode.BRIEF:
        return brief_format(brief_cols)
    if mode is ListingMode.LONG:
        return LONG_FORMAT
    if mode is ListingMode.USER:
        return user_format
    return FULL_FORMAT


def status_format_text(
    mode: ListingMode,
    *,
    user_format: str = DEFAULT_USER_FORMAT,
    user_mini_status: bool = False,
    user_status_formats: Mapping[ListingMode, str] | None = None,
) -> str:
    """Return the mini-status format for ``mode``.

    A user-defined mini-status per listing mode wins when ``user_mini_status``
    is set.
    """
    if user_mini_status and user_status_formats:
        custom = user_status_formats.get(mode)
        if custom:
            return custom
    if mode is ListingMode.LONG:
        return LONG_FORMAT
    if mode is ListingMode.BRIEF:
        return "half type name space bsize space perm space"
    if mode is ListingMode.USER:
        return user_format
    return "half type name"


__all__ = [
    "FRAME_FULL",
    "FRAME_HALF",
    "FULL_FORMAT",
    "LONG_FORMAT",
    "DEFAULT_USER_FORMAT",
    "DEFAULT_BRIEF_COLS",
    "ListingMode",
    "ColumnSpec",
    "CompiledFormat",
    "compile_format",
    "clamp_brief_cols",
    "brief_format",
    "list_format_text",
    "status_format_text",
]
