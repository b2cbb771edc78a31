"""Source stage that replays a fixed sequence of outputs."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from pipeshell.pipeline.contracts import Connector, Stage
from pipeshell.values import ControlSignal, StageOutput, Value


def _as_output(item: StageOutput | ControlSignal | Value) -> StageOutput:
    if isinstance(item, StageOutput):
        return item
    if isinstance(item, ControlSignal):
        return StageOutput.of_signal(item)
    return StageOutput.of_value(item)


class ReplaySource(Stage):
    """Emit the given values and control signals in order, lazily."""

    def __init__(self, items: Iterable[StageOutput | ControlSignal | Value]) -> None:
        self._items = items
        self._iter: Iterator[StageOutput | ControlSignal | Value] | None = None

    async def connect(self, upstream: Connector | None) -> None:
        self._iter = iter(self._items)

    async def next(self) -> StageOutput | None:
        if self._iter is None:
            return None
        item = next(self._iter, None)
        if item is None:
            self._iter = None
            return None
        return _as_output(item)
