"""Draw a ``ColumnLayout`` as a bordered grid on a Rich console."""

from __future__ import annotations

from typing import Final, Literal

from pipeshell.display.columns import ColumnLayout

try:
    from rich.box import Box
    from rich.console import Console
    from rich.table import Table
    from rich.text import Text
except ModuleNotFoundError as exc:
    missing_package = exc.name or "unknown package"
    raise SystemExit(
        f"Missing display dependency package `{missing_package}`. "
        "Install the project so `rich>=13.0` is available."
    ) from exc

TableMode = Literal["normal", "light"]

# Column rules and horizontal borders, no outer vertical edges.
GRID_BOX: Final[Box] = Box(
    " ─┬ \n"
    "  │ \n"
    " ─┼ \n"
    "  │ \n"
    " ─┼ \n"
    " ─┼ \n"
    "  │ \n"
    " ─┴ \n"
)

# Only a rule under the header row.
LIGHT_BOX: Final[Box] = Box(
    "    \n"
    "    \n"
    " ── \n"
    "    \n"
    "    \n"
    "    \n"
    "    \n"
    "    \n"
)

HEADER_STYLE: Final[str] = "bold green"


def build_table(layout: ColumnLayout, *, mode: TableMode = "normal") -> Table:
    """Convert a layout into a Rich ``Table`` without printing it."""
    table = Table(
        box=GRID_BOX if mode == "normal" else LIGHT_BOX,
        show_header=layout.show_header,
        show_edge=mode == "normal",
        header_style=HEADER_STYLE,
        padding=(0, 1),
        pad_edge=True,
        expand=False,
    )
    for header, width in zip(layout.headers, layout.widths, strict=True):
        table.add_column(header, justify="left", max_width=width, overflow="fold")
    for row in layout.entries:
        table.add_row(*(Text(text, style=cell.style, justify=cell.justify) for text, cell in row))
    return table


def print_layout(layout: ColumnLayout, console: Console, *, mode: TableMode = "normal") -> None:
    """Render ``layout`` to ``console``. Empty layouts print nothing."""
    if not layout.entries:
        return
    console.print(build_table(layout, mode=mode))
