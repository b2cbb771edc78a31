"""Pull-based stage protocols.

Two shapes of the same async iterator protocol: a ``Stage`` may yield control
signals as well as data, a ``Connector`` yields data only. Chains alternate
between them, with ``ActionRunner`` converting a ``Stage`` into a
``Connector``.

Contract for both:

* ``connect()`` is called once, before any ``next()``.
* ``next()`` before ``connect()`` returns ``None`` instead of raising.
* ``None`` is end of stream and is permanent.
* Failures are raised, never returned.

Dependencies: values
Wired in: pipeline/actions.py, stages/*, display/table_sink.py
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from pipeshell.values import StageOutput, Value


@runtime_checkable
class Stage(Protocol):
    """Pipeline unit that may emit control signals or data."""

    async def connect(self, upstream: Connector | None) -> None:
        """Wire the upstream connector. ``None`` for sources."""
        ...

    async def next(self) -> StageOutput | None:
        """Pull one output, or ``None`` at end of stream."""
        ...


@runtime_checkable
class Connector(Protocol):
    """Pipeline unit that emits only data."""

    async def connect(self, upstream: Stage | None) -> None:
        """Wire the upstream stage."""
        ...

    async def next(self) -> Value | None:
        """Pull one value, or ``None`` at end of stream."""
        ...
