"""Adapter that runs control signals and forwards only data downstream.

Dependencies: errors, pipeline.contracts, pipeline.shared, values
Wired in: pipeline/driver.py → build_chain()
"""

from __future__ import annotations

import logging

from rich.console import Console

from pipeshell.errors import PipelineCancelledError
from pipeshell.pipeline.contracts import Connector, Stage
from pipeshell.pipeline.shared import CancelSignal, SharedCounter
from pipeshell.values import ControlSignal, Value

_log = logging.getLogger(__name__)

ANNOUNCE_MESSAGE = "Hello world!"


class ActionRunner(Connector):
    """Expose a ``Stage`` as a ``Connector``.

    Each pull first checks the cancel signal, then pulls upstream until a
    value arrives, executing any control signals on the way. Side effects
    already performed are never undone.
    """

    def __init__(
        self,
        counter: SharedCounter,
        cancel: CancelSignal,
        *,
        console: Console | None = None,
    ) -> None:
        self._counter = counter
        self._cancel = cancel
        self._console = console or Console()
        self._upstream: Stage | None = None

    async def connect(self, upstream: Stage | None) -> None:
        self._upstream = upstream

    async def next(self) -> Value | None:
        if self._upstream is None:
            return None
        while True:
            if self._cancel.is_set():
                _log.warning("Cancellation observed, aborting pipeline")
                raise PipelineCancelledError()
            output = await self._upstream.next()
            if output is None:
                return None
            if output.value is not None:
                return output.value
            self._run(output.signal)

    def _run(self, signal: ControlSignal | None) -> None:
        if signal is ControlSignal.INCREMENT:
            self._counter.increment()
        elif signal is ControlSignal.ANNOUNCE:
            self._console.print(ANNOUNCE_MESSAGE, highlight=False)
