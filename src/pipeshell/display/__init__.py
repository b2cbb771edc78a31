"""Table layout, pagination and terminal rendering.

Public API: CellStyle, ColumnLayout, Page, TableSink, paginate,
    print_layout, resolve_term_width
Internal: columns, pages, render, table_sink
"""

from pipeshell.display.columns import CellStyle, ColumnLayout
from pipeshell.display.pages import Page, paginate
from pipeshell.display.render import print_layout
from pipeshell.display.table_sink import TableSink, resolve_term_width

__all__ = [
    "CellStyle",
    "ColumnLayout",
    "Page",
    "TableSink",
    "paginate",
    "print_layout",
    "resolve_term_width",
]
