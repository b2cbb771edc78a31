"""Shared test fixtures for pipeshell."""

from __future__ import annotations

import io
from collections.abc import Awaitable, Callable, Iterable

import pytest
from rich.console import Console

from pipeshell.pipeline.actions import ActionRunner
from pipeshell.pipeline.contracts import Connector
from pipeshell.pipeline.shared import CancelSignal, SharedCounter
from pipeshell.stages.replay import ReplaySource
from pipeshell.values import ControlSignal, StageOutput, Value

ReplayItem = StageOutput | ControlSignal | Value
ConnectorFactory = Callable[[Iterable[ReplayItem]], Awaitable[Connector]]


@pytest.fixture()
def counter() -> SharedCounter:
    return SharedCounter()


@pytest.fixture()
def cancel() -> CancelSignal:
    return CancelSignal()


@pytest.fixture()
def console() -> Console:
    """Wide, colourless console writing to an in-memory buffer."""
    return Console(file=io.StringIO(), width=160, color_system=None, force_terminal=False)


@pytest.fixture()
def read_output(console: Console) -> Callable[[], str]:
    """Return everything printed to the ``console`` fixture so far."""

    def _read() -> str:
        file = console.file
        assert isinstance(file, io.StringIO)
        return file.getvalue()

    return _read


@pytest.fixture()
def make_connector(
    counter: SharedCounter, cancel: CancelSignal, console: Console
) -> ConnectorFactory:
    """Build a connected ``ReplaySource -> ActionRunner`` pair."""

    async def _make(items: Iterable[ReplayItem]) -> Connector:
        source = ReplaySource(items)
        await source.connect(None)
        runner = ActionRunner(counter, cancel, console=console)
        await runner.connect(source)
        return runner

    return _make
