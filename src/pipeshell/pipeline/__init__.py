"""Stage protocols, shared state and the action adapter.

Public API: ActionRunner, CancelSignal, Connector, SharedCounter, Stage
Internal: actions, contracts, driver, shared
"""

from pipeshell.pipeline.actions import ActionRunner
from pipeshell.pipeline.contracts import Connector, Stage
from pipeshell.pipeline.shared import CancelSignal, SharedCounter

__all__ = [
    "ActionRunner",
    "CancelSignal",
    "Connector",
    "SharedCounter",
    "Stage",
]
