"""Column-width allocation for heterogeneous record tables.

Given a batch of values and a terminal width budget, work out which columns
to show, how wide each may be, and wrap the cells of columns that do not fit.

The budget split is a deliberate two-pass approximation: columns narrower
than an even share keep their natural width, the rest split what remains,
and one refinement pass promotes columns that turn out to fit. It can leave
a little slack or overflow slightly for skewed width distributions; a full
fixed-point solver is not wanted here.

Dependencies: values
Wired in: display/table_sink.py → TableSink, display/render.py
"""

from __future__ import annotations

import textwrap
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from pipeshell.values import Record, Value

MIN_TERM_WIDTH = 20
"""Narrowest width budget the allocator accepts."""

INDEX_HEADER = "#"
ANONYMOUS_HEADER = ""
ELLIPSIS = "..."

_COLUMN_SEPARATOR_WIDTH = 3
_FIRST_COLUMN_EXTRA = 1
_MIN_COLUMN_BUDGET = 10

Justify = Literal["left", "center", "right"]


@dataclass(frozen=True)
class CellStyle:
    """Rendering hint attached to one cell: a rich style string and alignment."""

    style: str = ""
    justify: Justify = "left"


PLAIN = CellStyle()
INDEX_STYLE = CellStyle(style="bold green", justify="right")
ELLIPSIS_STYLE = CellStyle(justify="center")

Cell = tuple[str, CellStyle]


def merge_headers(values: Sequence[Value]) -> list[str]:
    """Union of record field names in first-seen order.

    Values without fields (scalars, lists, empty records) contribute a single
    anonymous column.
    """
    headers: list[str] = []
    for value in values:
        names = value.column_names()
        if not names:
            if ANONYMOUS_HEADER not in headers:
                headers.append(ANONYMOUS_HEADER)
            continue
        for name in names:
            if name not in headers:
                headers.append(name)
    return headers


def _cell_text(value: Value, header: str) -> str:
    if isinstance(value, Record):
        if header == ANONYMOUS_HEADER:
            return ""
        field = value.get(header)
        return "" if field is None else str(field)
    return str(value) if header == ANONYMOUS_HEADER else ""


def build_entries(values: Sequence[Value], headers: Sequence[str], starting_idx: int) -> list[list[Cell]]:
    """Cell matrix with a leading index cell per row."""
    entries: list[list[Cell]] = []
    for offset, value in enumerate(values):
        row: list[Cell] = [(str(starting_idx + offset), INDEX_STYLE)]
        row.extend((_cell_text(value, header), PLAIN) for header in headers)
        entries.append(row)
    return entries


def natural_widths(headers: Sequence[str], entries: Sequence[Sequence[Cell]]) -> list[int]:
    """Widest cell (or header) per column, in characters."""
    widths = [len(header) for header in headers]
    for row in entries:
        for i, (text, _style) in enumerate(row):
            widths[i] = max(widths[i], len(text))
    return widths


def truncate_columns(
    headers: list[str],
    entries: list[list[Cell]],
    widths: list[int],
    term_width: int,
) -> tuple[list[str], list[list[Cell]], list[int]]:
    """Drop columns past ``term_width // 10`` and append an ellipsis column.

    ``headers`` starts with the index column, which does not count towards the
    limit. Once over it, the cut keeps ``term_width // 10`` columns including
    the index. Dropped data is discarded, not deferred.
    """
    max_columns = term_width // _MIN_COLUMN_BUDGET
    if len(headers) - 1 <= max_columns:
        return headers, entries, widths
    headers = [*headers[:max_columns], ELLIPSIS]
    entries = [[*row[:max_columns], (ELLIPSIS, ELLIPSIS_STYLE)] for row in entries]
    widths = [*widths[:max_columns], len(ELLIPSIS)]
    return headers, entries, widths


def _reserved(index: int, count: int) -> int:
    """Separator space a column reserves besides its content."""
    extra = 0
    if index != count - 1:
        extra += _COLUMN_SEPARATOR_WIDTH
    if index == 0:
        extra += _FIRST_COLUMN_EXTRA
    return extra


@dataclass(frozen=True)
class ColumnSpace:
    """Running totals of one budget-partition pass."""

    num_overages: int
    underage_sum: int
    overage_separator_sum: int

    @classmethod
    def measure(cls, widths: Sequence[int], naive_width: int) -> ColumnSpace:
        """First pass: split columns around the naive even share."""
        count = len(widths)
        num_overages = underage_sum = overage_separator_sum = 0
        for i, width in enumerate(widths):
            if width > naive_width:
                num_overages += 1
                overage_separator_sum += _reserved(i, count)
            else:
                underage_sum += width + _reserved(i, count)
        return cls(num_overages, underage_sum, overage_separator_sum)

    def refine(self, widths: Sequence[int], naive_width: int, max_width: int | None) -> ColumnSpace:
        """Second pass: fold overage columns that fit ``max_width`` into the underage sum."""
        count = len(widths)
        num_overages = overage_separator_sum = 0
        underage_sum = self.underage_sum
        for i, width in enumerate(widths):
            if width <= naive_width:
                continue
            if max_width is None or width <= max_width:
                underage_sum += width + _reserved(i, count)
            else:
                num_overages += 1
                overage_separator_sum += _reserved(i, count)
        return ColumnSpace(num_overages, underage_sum, overage_separator_sum)

    def max_width(self, term_width: int) -> int | None:
        """Width each overage column may use; ``None`` when nothing is overage."""
        if self.num_overages == 0:
            return None
        remaining = term_width - 1 - self.underage_sum - self.overage_separator_sum
        return max(remaining // self.num_overages, 1)


def wrap_text(text: str, width: int) -> str:
    """Word-wrap at whitespace without ever splitting a word."""
    if not text:
        return text
    return textwrap.fill(text, width=width, break_long_words=False, break_on_hyphens=False)


@dataclass(frozen=True)
class ColumnLayout:
    """Headers, widths, and wrapped cells ready for rendering."""

    headers: list[str]
    natural_widths: list[int]
    widths: list[int | None]
    """Allocated width per column; ``None`` means the column is unbounded."""
    entries: list[list[Cell]]

    @property
    def show_header(self) -> bool:
        """False for a plain list of scalars."""
        return self.headers not in ([ANONYMOUS_HEADER], [INDEX_HEADER, ANONYMOUS_HEADER])

    @classmethod
    def from_values(
        cls,
        values: Sequence[Value],
        starting_idx: int = 0,
        *,
        term_width: int,
    ) -> ColumnLayout | None:
        """Lay out ``values`` for a ``term_width``-wide terminal.

        Returns ``None`` for an empty batch.
        """
        if not values:
            return None
        term_width = max(term_width, MIN_TERM_WIDTH)

        data_headers = merge_headers(values)
        entries = build_entries(values, data_headers, starting_idx)
        headers = [INDEX_HEADER, *data_headers]
        widths = natural_widths(headers, entries)

        headers, entries, widths = truncate_columns(headers, entries, widths, term_width)
        count = len(headers)

        naive_width = (term_width - _COLUMN_SEPARATOR_WIDTH * (count - 1)) // count
        first_pass = ColumnSpace.measure(widths, naive_width)
        first_max = first_pass.max_width(term_width)
        # Only the first pass's limit decides which columns get promoted.
        second_pass = first_pass.refine(widths, naive_width, first_max)
        final_max = second_pass.max_width(term_width)

        allocated: list[int | None] = []
        for i, width in enumerate(widths):
            still_overage = width > naive_width and first_max is not None and width > first_max
            if still_overage and final_max is not None:
                headers[i] = wrap_text(headers[i], final_max)
                for row in entries:
                    text, style = row[i]
                    row[i] = (wrap_text(text, final_max), style)
                allocated.append(final_max)
            else:
                allocated.append(width)

        return cls(headers=headers, natural_widths=widths, widths=allocated, entries=entries)
