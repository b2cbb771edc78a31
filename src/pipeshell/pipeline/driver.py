"""Chain assembly and the outermost drain loop.

Dependencies: config, display.table_sink, errors, pipeline.actions,
    pipeline.contracts, pipeline.shared, stages
Wired in: cli.py → main()
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from rich.console import Console

from pipeshell.config import ShellConfig
from pipeshell.display.table_sink import TableSink
from pipeshell.errors import PipelineError, UpstreamError
from pipeshell.pipeline.actions import ActionRunner
from pipeshell.pipeline.contracts import Connector, Stage
from pipeshell.pipeline.shared import CancelSignal, SharedCounter
from pipeshell.stages.ls import LsSource
from pipeshell.stages.where import FieldPredicate, WhereFilter
from pipeshell.values import Value

_log = logging.getLogger(__name__)


async def compose(
    stages: Sequence[Stage],
    counter: SharedCounter,
    cancel: CancelSignal,
    *,
    console: Console | None = None,
) -> Connector:
    """Connect ``stages`` left to right with an ``ActionRunner`` after each one.

    The first stage is a source and receives no upstream. Returns the runner
    wrapping the last stage; pulling from it drives the whole chain.
    """
    if not stages:
        raise ValueError("compose() needs at least one stage")
    upstream: Connector | None = None
    for stage in stages:
        await stage.connect(upstream)
        runner = ActionRunner(counter, cancel, console=console)
        await runner.connect(stage)
        upstream = runner
    assert upstream is not None
    return upstream


async def build_chain(
    config: ShellConfig,
    counter: SharedCounter,
    cancel: CancelSignal,
    *,
    console: Console | None = None,
) -> Connector:
    """Assemble ``ls | where <field> [!]~ <substring> | table`` from config."""
    console = console or Console()
    source = LsSource(config.root, include_hidden=config.include_hidden)
    where = WhereFilter(
        FieldPredicate(
            field=config.filter_field,
            substring=config.filter_substring,
            invert=config.filter_invert,
        )
    )
    sink = TableSink(
        console=console,
        term_width=config.term_width,
        page_cap=config.page_cap,
        page_timeout=config.page_timeout_ms / 1000,
        mode=config.table_mode,
    )
    return await compose([source, where, sink], counter, cancel, console=console)


async def drain(chain: Connector) -> list[Value]:
    """Pull ``chain`` to exhaustion and return whatever values reach the end.

    ``PipelineError`` propagates unchanged; anything else a stage raises is
    wrapped in ``UpstreamError``.
    """
    collected: list[Value] = []
    try:
        while (value := await chain.next()) is not None:
            collected.append(value)
    except PipelineError:
        raise
    except Exception as exc:
        raise UpstreamError(f"Pipeline stage failed: {exc}") from exc
    _log.debug("Pipeline drained with %d trailing values", len(collected))
    return collected
