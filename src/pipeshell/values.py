"""Values flowing through a pipeline and the control signals that travel beside them.

``Value`` is the closed set of data shapes a stage can emit. ``ControlSignal``
is deliberately a separate type: a stage that wants a side effect performed
wraps a signal in a ``StageOutput``, and only ``ActionRunner`` ever unwraps it,
so signals cannot reach a value-only consumer.

Dependencies: (none, leaf module)
Wired in: every stage, display/columns.py, display/pages.py
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TypeAlias


@dataclass(frozen=True)
class Text:
    """A string value."""

    text: str

    def column_names(self) -> tuple[str, ...]:
        return ()

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class Bool:
    """A boolean value, displayed as ``true`` / ``false``."""

    flag: bool

    def column_names(self) -> tuple[str, ...]:
        return ()

    def __str__(self) -> str:
        return "true" if self.flag else "false"


@dataclass(frozen=True)
class Unit:
    """Absence of data. Displays as the empty string."""

    def column_names(self) -> tuple[str, ...]:
        return ()

    def __str__(self) -> str:
        return ""


@dataclass(frozen=True)
class Record:
    """Ordered field-name to value mapping.

    Key order is the display-column order, so it is preserved exactly as
    inserted. Keys are unique by construction (``dict``).
    """

    fields: dict[str, Value] = field(default_factory=dict)

    def column_names(self) -> tuple[str, ...]:
        return tuple(self.fields)

    def get(self, name: str) -> Value | None:
        return self.fields.get(name)

    def __str__(self) -> str:
        inner = ", ".join(f"{key}: {value}" for key, value in self.fields.items())
        return f"{{{inner}}}"


@dataclass(frozen=True)
class Sequence:
    """Ordered list of values."""

    items: tuple[Value, ...] = ()

    def column_names(self) -> tuple[str, ...]:
        return ()

    def __str__(self) -> str:
        return "[" + ", ".join(str(item) for item in self.items) + "]"


Value: TypeAlias = Text | Bool | Unit | Record | Sequence


class ControlSignal(Enum):
    """Side-effecting instructions a stage may emit instead of data."""

    INCREMENT = "increment"
    """Bump the pipeline's shared counter."""

    ANNOUNCE = "announce"
    """Print the fixed announcement message."""


@dataclass(frozen=True)
class StageOutput:
    """Exactly one of a control signal or a value, as yielded by a ``Stage``."""

    signal: ControlSignal | None = None
    value: Value | None = None

    def __post_init__(self) -> None:
        if (self.signal is None) == (self.value is None):
            raise ValueError("StageOutput must wrap exactly one of signal or value")

    @classmethod
    def of_signal(cls, signal: ControlSignal) -> StageOutput:
        return cls(signal=signal)

    @classmethod
    def of_value(cls, value: Value) -> StageOutput:
        return cls(value=value)
