"""Split a value stream into column-homogeneous, size- and time-bounded pages.

Dependencies: pipeline.contracts, values
Wired in: display/table_sink.py → TableSink.next()
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass, field

from pipeshell.pipeline.contracts import Connector
from pipeshell.values import Value

_log = logging.getLogger(__name__)

STREAM_PAGE_SIZE = 1000
STREAM_TIMEOUT_SECONDS = 1.0
STREAM_TIMEOUT_CHECK_INTERVAL = 100


@dataclass
class Page:
    """One batch of values sharing a column signature."""

    offset: int
    """Row index of the first value across the whole stream."""

    values: list[Value] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.values)


async def paginate(
    upstream: Connector,
    *,
    page_cap: int = STREAM_PAGE_SIZE,
    page_timeout: float = STREAM_TIMEOUT_SECONDS,
    check_interval: int = STREAM_TIMEOUT_CHECK_INTERVAL,
    clock: Callable[[], float] = time.monotonic,
) -> AsyncIterator[Page]:
    """Yield pages pulled from ``upstream`` until it is exhausted.

    A page closes when it holds ``page_cap`` values, when ``page_timeout``
    seconds have passed (checked every ``check_interval`` pulls), or when the
    next value's column names differ from the page's. In the last case that
    value is held back and starts the following page. Empty pages are never
    yielded. Errors from ``upstream`` propagate and the partial page is lost.
    """
    if page_cap < 1:
        raise ValueError("page_cap must be >= 1")
    offset = 0
    held: Value | None = None
    finished = False
    while not finished:
        page = Page(offset=offset)
        started = clock()
        for idx in range(page_cap):
            if held is not None:
                page.values.append(held)
                held = None
                continue
            value = await upstream.next()
            if value is None:
                finished = True
                break
            if page.values and value.column_names() != page.values[0].column_names():
                held = value
                break
            page.values.append(value)
            if (idx + 1) % check_interval == 0 and clock() - started >= page_timeout:
                _log.debug("Page at offset %d flushed early after %d values", offset, len(page))
                break
        if page.values:
            yield page
        offset += len(page)
