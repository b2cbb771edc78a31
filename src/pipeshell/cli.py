"""Command-line entrypoint: ``ls | where | table`` over a directory tree."""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
import tomllib
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from pipeshell.cli_options import config_overrides, parse_cli_args
from pipeshell.config import ShellConfig, load_config
from pipeshell.errors import PipelineCancelledError, PipelineError
from pipeshell.pipeline.driver import build_chain, drain
from pipeshell.pipeline.shared import CancelSignal, SharedCounter

_log = logging.getLogger(__name__)

EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def configure_logging(level: int) -> None:
    """Send log records to stderr through Rich."""
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    logging.basicConfig(level=level, format="%(message)s", handlers=[handler], force=True)


def _install_interrupt_handler(cancel: CancelSignal) -> None:
    """Route SIGINT to the cancel signal instead of raising KeyboardInterrupt."""
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, cancel.set)
    except (NotImplementedError, RuntimeError):
        # Event loops without signal support (e.g. Windows proactor).
        signal.signal(signal.SIGINT, lambda _signum, _frame: cancel.set())


def _remove_interrupt_handler() -> None:
    loop = asyncio.get_running_loop()
    try:
        loop.remove_signal_handler(signal.SIGINT)
    except (NotImplementedError, RuntimeError):
        signal.signal(signal.SIGINT, signal.default_int_handler)


async def run_pipeline(
    config: ShellConfig,
    counter: SharedCounter,
    cancel: CancelSignal,
    *,
    console: Console | None = None,
) -> int:
    """Build and drain the chain, returning a process exit code."""
    _install_interrupt_handler(cancel)
    try:
        chain = await build_chain(config, counter, cancel, console=console)
        await drain(chain)
    except PipelineCancelledError as exc:
        _log.warning("Pipeline cancelled: %s", exc.user_message)
        return EXIT_INTERRUPTED
    except PipelineError as exc:
        _log.error("Pipeline failed: %s", exc.user_message)
        return EXIT_FAILURE
    finally:
        _remove_interrupt_handler()
    _log.debug("Shared counter finished at %d", counter.value)
    return 0


def _load(args_config: str | None, overrides: dict[str, object]) -> ShellConfig:
    config_path = Path(args_config) if args_config else None
    try:
        return load_config(config_path, overrides=overrides)
    except ValidationError as exc:
        raise SystemExit(f"Invalid configuration:\n{exc}") from exc
    except (OSError, TypeError, tomllib.TOMLDecodeError) as exc:
        raise SystemExit(f"Failed to read config '{config_path}': {exc}") from exc


def main(argv: list[str] | None = None) -> None:
    """Load config, wire the pipeline, and run it to completion."""
    load_dotenv(dotenv_path=Path.cwd() / ".env")

    args = parse_cli_args(argv if argv is not None else sys.argv[1:])
    config = _load(args.config, config_overrides(args))
    configure_logging(config.numeric_log_level)

    counter = SharedCounter(config.counter_start)
    cancel = CancelSignal()
    code = asyncio.run(run_pipeline(config, counter, cancel))
    if code:
        raise SystemExit(code)


if __name__ == "__main__":
    main()
