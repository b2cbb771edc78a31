"""Row filter on a substring test against one text field."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pipeshell.pipeline.contracts import Connector, Stage
from pipeshell.values import Record, StageOutput, Text, Value

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldPredicate:
    """Substring test on a named text field.

    With ``invert`` the field must *not* contain ``substring``.
    """

    field: str = "name"
    substring: str = "thirdparty"
    invert: bool = True

    def matches(self, value: Value) -> bool:
        if not isinstance(value, Record):
            return False
        cell = value.get(self.field)
        if not isinstance(cell, Text):
            return False
        contains = self.substring in cell.text
        return not contains if self.invert else contains


class WhereFilter(Stage):
    """Pass through records accepted by a ``FieldPredicate``; drop the rest."""

    def __init__(self, predicate: FieldPredicate | None = None) -> None:
        self._predicate = predicate or FieldPredicate()
        self._upstream: Connector | None = None

    async def connect(self, upstream: Connector | None) -> None:
        self._upstream = upstream
        _log.debug("where connected with %r", self._predicate)

    async def next(self) -> StageOutput | None:
        if self._upstream is None:
            return None
        while (value := await self._upstream.next()) is not None:
            if self._predicate.matches(value):
                return StageOutput.of_value(value)
        return None
