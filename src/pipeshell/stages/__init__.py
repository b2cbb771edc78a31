"""Concrete pipeline stages.

Public API: FieldPredicate, LsSource, ReplaySource, WhereFilter, iter_paths
"""

from pipeshell.stages.ls import LsSource, iter_paths
from pipeshell.stages.replay import ReplaySource
from pipeshell.stages.where import FieldPredicate, WhereFilter

__all__ = [
    "FieldPredicate",
    "LsSource",
    "ReplaySource",
    "WhereFilter",
    "iter_paths",
]
