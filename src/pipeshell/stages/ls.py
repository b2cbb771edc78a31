"""Source stage emitting one record per filesystem entry under a root directory.

Paths are enumerated lazily, depth first, each directory's entries sorted by
name. Every blocking call (directory scan, stat) runs in a worker thread but
is awaited before the next one starts, so records come out in enumeration
order.

Dependencies: errors, pipeline.contracts, values
Wired in: pipeline/driver.py → build_chain()
"""

from __future__ import annotations

import asyncio
import logging
import os
import stat
from collections.abc import Iterator

from pipeshell.errors import SourceError
from pipeshell.pipeline.contracts import Connector, Stage
from pipeshell.values import Record, StageOutput, Text, Unit, Value

_log = logging.getLogger(__name__)


def iter_paths(root: str, *, include_hidden: bool = True, prefix: str = "") -> Iterator[str]:
    """Yield paths under ``root`` relative to it, pre-order, sorted per directory.

    Symlinked directories are listed but not descended into. ``OSError`` from
    scanning propagates to the caller at the point the generator is advanced.
    """
    with os.scandir(os.path.join(root, prefix) if prefix else root) as it:
        entries = sorted(it, key=lambda entry: entry.name)
    for entry in entries:
        if not include_hidden and entry.name.startswith("."):
            continue
        rel = os.path.join(prefix, entry.name) if prefix else entry.name
        yield rel
        if entry.is_dir(follow_symlinks=False):
            yield from iter_paths(root, include_hidden=include_hidden, prefix=rel)


def _file_type(st: os.stat_result) -> Value:
    if stat.S_ISDIR(st.st_mode):
        return Text("Dir")
    if stat.S_ISREG(st.st_mode):
        return Text("File")
    return Unit()


def _source_error(exc: OSError, path: str) -> SourceError:
    return SourceError(f"Failed to read {path}: {exc.strerror or exc}", path=path)


class LsSource(Stage):
    """Emit ``{name, type}`` records for every path under ``root``."""

    def __init__(self, root: str | os.PathLike[str] = ".", *, include_hidden: bool = True) -> None:
        self._root = os.fspath(root)
        self._include_hidden = include_hidden
        self._paths: Iterator[str] | None = None

    async def connect(self, upstream: Connector | None) -> None:
        # Sources ignore their upstream.
        try:
            st = await asyncio.to_thread(os.stat, self._root)
        except OSError as exc:
            raise _source_error(exc, self._root) from exc
        if not stat.S_ISDIR(st.st_mode):
            raise SourceError(f"Not a directory: {self._root}", path=self._root)
        self._paths = iter_paths(self._root, include_hidden=self._include_hidden)
        _log.debug("ls connected at %s", self._root)

    async def next(self) -> StageOutput | None:
        if self._paths is None:
            return None
        try:
            path = await asyncio.to_thread(next, self._paths, None)
        except OSError as exc:
            self._paths = None
            raise _source_error(exc, str(exc.filename or self._root)) from exc
        if path is None:
            self._paths = None
            _log.debug("ls exhausted at %s", self._root)
            return None
        try:
            st = await asyncio.to_thread(os.stat, os.path.join(self._root, path))
        except OSError as exc:
            self._paths = None
            raise _source_error(exc, path) from exc
        record = Record({"name": Text(path), "type": _file_type(st)})
        return StageOutput.of_value(record)
