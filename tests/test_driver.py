"""Tests for pipeline/driver.py: chain composition and end-to-end runs."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from rich.console import Console

from pipeshell.config import ShellConfig
from pipeshell.errors import PipelineCancelledError, SourceError, UpstreamError
from pipeshell.pipeline.driver import build_chain, compose, drain
from pipeshell.pipeline.shared import CancelSignal, SharedCounter
from pipeshell.stages.replay import ReplaySource
from pipeshell.stages.where import FieldPredicate, WhereFilter
from pipeshell.values import ControlSignal, Record, StageOutput, Text


class _Exploding:
    async def connect(self, upstream) -> None:
        return None

    async def next(self) -> StageOutput | None:
        raise ValueError("bad stage")


@pytest.mark.asyncio()
async def test_compose_runs_signals_between_stages(
    counter: SharedCounter, cancel: CancelSignal, console: Console
) -> None:
    source = ReplaySource(
        [
            ControlSignal.INCREMENT,
            Record({"name": Text("keep.rs")}),
            ControlSignal.INCREMENT,
            Record({"name": Text("thirdparty/drop.rs")}),
        ]
    )
    chain = await compose([source, WhereFilter()], counter, cancel, console=console)
    assert await drain(chain) == [Record({"name": Text("keep.rs")})]
    assert counter.value == 2


@pytest.mark.asyncio()
async def test_compose_needs_a_stage(counter: SharedCounter, cancel: CancelSignal) -> None:
    with pytest.raises(ValueError, match="at least one stage"):
        await compose([], counter, cancel)


@pytest.mark.asyncio()
async def test_drain_wraps_foreign_errors(
    counter: SharedCounter, cancel: CancelSignal, console: Console
) -> None:
    chain = await compose([_Exploding()], counter, cancel, console=console)
    with pytest.raises(UpstreamError) as excinfo:
        await drain(chain)
    assert isinstance(excinfo.value.__cause__, ValueError)


@pytest.mark.asyncio()
async def test_drain_passes_pipeline_errors_through(
    counter: SharedCounter, cancel: CancelSignal, console: Console
) -> None:
    chain = await compose([ReplaySource([Text("a")])], counter, cancel, console=console)
    cancel.set()
    with pytest.raises(PipelineCancelledError):
        await drain(chain)


@pytest.fixture()
def project(tmp_path: Path) -> Path:
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "foo.rs").write_text("fn main() {}")
    (tmp_path / "thirdparty").mkdir()
    (tmp_path / "thirdparty" / "bar.rs").write_text("")
    return tmp_path


@pytest.mark.asyncio()
async def test_ls_where_table_end_to_end(
    project: Path,
    counter: SharedCounter,
    cancel: CancelSignal,
    console: Console,
    read_output: Callable[[], str],
) -> None:
    config = ShellConfig(root=str(project), term_width=80)
    chain = await build_chain(config, counter, cancel, console=console)
    assert await drain(chain) == []

    out = read_output()
    assert "foo.rs" in out
    assert "Dir" in out and "File" in out
    assert "bar.rs" not in out
    assert "thirdparty" not in out


@pytest.mark.asyncio()
async def test_keep_matching_inverts_filter(
    project: Path,
    counter: SharedCounter,
    cancel: CancelSignal,
    console: Console,
    read_output: Callable[[], str],
) -> None:
    config = ShellConfig(root=str(project), term_width=80, filter_invert=False)
    await drain(await build_chain(config, counter, cancel, console=console))
    out = read_output()
    assert "bar.rs" in out
    assert "foo.rs" not in out


@pytest.mark.asyncio()
async def test_missing_root_fails_at_build(
    tmp_path: Path, counter: SharedCounter, cancel: CancelSignal, console: Console
) -> None:
    config = ShellConfig(root=str(tmp_path / "absent"))
    with pytest.raises(SourceError):
        await build_chain(config, counter, cancel, console=console)


def test_field_predicate_defaults_match_config() -> None:
    config = ShellConfig()
    predicate = FieldPredicate()
    assert (predicate.field, predicate.substring, predicate.invert) == (
        config.filter_field,
        config.filter_substring,
        config.filter_invert,
    )
