"""Display-format engine: field table, format compiler, layout solver and row renderer."""

from .fields import FormatContext, PanelField, size_trunc_len
from .format import (
    ColumnSpec,
    CompiledFormat,
    ListingMode,
    compile_format,
    list_format_text,
    status_format_text,
)
from .layout import layout_format, solve_layout, usable_columns
from .row import FormattedRow, RowCell, format_header, format_row

__all__ = [
    "FormatContext",
    "PanelField",
    "size_trunc_len",
    "ColumnSpec",
    "CompiledFormat",
    "ListingMode",
    "compile_format",
    "list_format_text",
    "status_format_text",
    "layout_format",
    "solve_layout",
    "usable_columns",
    "FormattedRow",
    "RowCell",
    "format_header",
    "format_row",
]
