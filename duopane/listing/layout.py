"""Layout solver: fit compiled columns into the usable panel width."""

from __future__ import annotations

from collections.abc import Sequence

from .format import ColumnSpec, CompiledFormat

MAX_EXPANDABLE = 4
FRAME_COLUMNS = 2


def usable_columns(panel_cols: int, list_cols: int = 1, is_status: bool = False) -> int:
    """Width available to one list column inside the panel frame.

    Multi-column listings split the inner width evenly and reserve one cell
    per column for the vertical separator. Status lines are never split.
    """
    usable = panel_cols - FRAME_COLUMNS
    if not is_status and list_cols > 1:
        usable = usable // list_cols - 1
    return max(0, usable)


def solve_layout(columns: Sequence[ColumnSpec], usable: int) -> int:
    """Set ``width`` on every column and return the total width used.

    Columns start at their requested width. On overflow, columns wider than
    one cell shrink by one per round-robin pass until the deficit is gone or
    nothing can shrink. Leftover space is split evenly among the first four
    expandable columns, the remainder going to the first of them.
    """
    expandable: list[ColumnSpec] = []
    total = 0
    for column in columns:
        column.width = max(1, column.requested_width)
        total += column.width
        if column.expand and len(expandable) < MAX_EXPANDABLE:
            expandable.append(column)

    deficit = total - usable
    while deficit > 0:
        shrunk = False
        for column in columns:
            if deficit <= 0:
                break
            if column.width > 1:
                column.width -= 1
                deficit -= 1
                total -= 1
                shrunk = True
        if not shrunk:
            break

    if usable > total and expandable:
        surplus = usable - total
        share, remainder = divmod(surplus, len(expandable))
        for column in expandable:
            column.width += share
        expandable[0].width += remainder
        total = usable

    return total


def layout_format(compiled: CompiledFormat, panel_cols: int, *, is_status: bool = False) -> int:
    """Solve ``compiled`` for a panel ``panel_cols`` wide; return the usable width."""
    usable = usable_columns(panel_cols, compiled.list_cols, is_status)
    solve_layout(compiled.columns, usable)
    return usable


__all__ = ["MAX_EXPANDABLE", "usable_columns", "solve_layout", "layout_format"]
