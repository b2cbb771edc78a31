"""Terminal sink stage that renders its input as a sequence of tables.

Dependencies: display.columns, display.pages, display.render,
    pipeline.contracts, values
Wired in: pipeline/driver.py → build_chain()
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from rich.console import Console

from pipeshell.display.columns import MIN_TERM_WIDTH, ColumnLayout
from pipeshell.display.pages import (
    STREAM_PAGE_SIZE,
    STREAM_TIMEOUT_CHECK_INTERVAL,
    STREAM_TIMEOUT_SECONDS,
    paginate,
)
from pipeshell.display.render import TableMode, print_layout
from pipeshell.pipeline.contracts import Connector, Stage
from pipeshell.values import StageOutput

_log = logging.getLogger(__name__)

# Room left for borders and padding the allocator does not account for.
TERM_WIDTH_MARGIN = 7


def resolve_term_width(requested: int | None, console: Console) -> int:
    """Width budget for the allocator: explicit value or console width minus margin."""
    width = requested if requested is not None else console.width - TERM_WIDTH_MARGIN
    return max(width, MIN_TERM_WIDTH)


class TableSink(Stage):
    """Drain the upstream, rendering one table per page, then end the stream.

    Row numbers continue across pages. Pages already printed stay printed if
    a later pull fails.
    """

    def __init__(
        self,
        *,
        console: Console | None = None,
        term_width: int | None = None,
        page_cap: int = STREAM_PAGE_SIZE,
        page_timeout: float = STREAM_TIMEOUT_SECONDS,
        check_interval: int = STREAM_TIMEOUT_CHECK_INTERVAL,
        mode: TableMode = "normal",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._console = console or Console()
        self._term_width = resolve_term_width(term_width, self._console)
        self._page_cap = page_cap
        self._page_timeout = page_timeout
        self._check_interval = check_interval
        self._mode: TableMode = mode
        self._clock = clock
        self._upstream: Connector | None = None
        self.pages_rendered = 0
        self.rows_rendered = 0

    async def connect(self, upstream: Connector | None) -> None:
        self._upstream = upstream

    async def next(self) -> StageOutput | None:
        upstream, self._upstream = self._upstream, None
        if upstream is None:
            return None
        pages = paginate(
            upstream,
            page_cap=self._page_cap,
            page_timeout=self._page_timeout,
            check_interval=self._check_interval,
            clock=self._clock,
        )
        async for page in pages:
            layout = ColumnLayout.from_values(page.values, page.offset, term_width=self._term_width)
            if layout is None:
                continue
            print_layout(layout, self._console, mode=self._mode)
            self.pages_rendered += 1
            self.rows_rendered += len(page)
            _log.debug("Rendered page at offset %d with %d rows", page.offset, len(page))
        return None
