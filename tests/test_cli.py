"""Tests for cli.py and cli_options.py."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from pipeshell import cli, cli_options
from pipeshell.cli_options import UNKNOWN_VERSION, config_overrides, parse_cli_args, project_version
from pipeshell.config import ShellConfig
from pipeshell.errors import PipelineCancelledError
from pipeshell.pipeline.shared import CancelSignal, SharedCounter


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    # setenv first so teardown also removes anything load_dotenv() adds.
    for name in [*(f"PIPESHELL_{field.upper()}" for field in ShellConfig.model_fields), "PIPESHELL_CONFIG"]:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    yield
    logging.getLogger().handlers.clear()


def test_project_version_reads_installed_metadata(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli_options.metadata, "version", lambda name: f"{name}-1.2.3")
    assert project_version() == "pipeshell-1.2.3"


def test_project_version_fallback() -> None:
    assert project_version("pipeshell-not-a-real-dist") == UNKNOWN_VERSION


def test_version_flag_prints_version(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(cli_options.metadata, "version", lambda _name: "4.5.6")
    with pytest.raises(SystemExit) as excinfo:
        parse_cli_args(["--version"])
    assert excinfo.value.code == 0
    assert capsys.readouterr().out.strip() == "4.5.6"


def test_unset_flags_produce_none_overrides() -> None:
    args = parse_cli_args([])
    assert all(value is None for value in config_overrides(args).values())


def test_flags_map_to_config_fields() -> None:
    args = parse_cli_args(
        [
            "--root",
            "/tmp",
            "--no-hidden",
            "--width",
            "90",
            "--field",
            "type",
            "--contains",
            "Dir",
            "--keep-matching",
            "--page-cap",
            "10",
            "--page-timeout-ms",
            "250",
            "--light",
            "--log-level",
            "info",
        ],
    )
    config = ShellConfig.model_validate(config_overrides(args))
    assert config.root == "/tmp"
    assert config.include_hidden is False
    assert config.term_width == 90
    assert (config.filter_field, config.filter_substring, config.filter_invert) == ("type", "Dir", False)
    assert (config.page_cap, config.page_timeout_ms) == (10, 250)
    assert config.table_mode == "light"
    assert config.log_level == "INFO"


def test_main_lists_directory(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / "kept.txt").write_text("k")
    (tmp_path / "thirdparty").mkdir()
    cli.main(["--width", "60"])
    out = capsys.readouterr().out
    assert "kept.txt" in out
    assert "thirdparty" not in out


def test_main_reads_dotenv(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / "vendor.txt").write_text("v")
    (tmp_path / "mine.txt").write_text("m")
    (tmp_path / ".env").write_text("PIPESHELL_FILTER_SUBSTRING=vendor\n")
    cli.main([])
    out = capsys.readouterr().out
    assert "mine.txt" in out
    assert "vendor.txt" not in out


def test_main_invalid_config_exits() -> None:
    with pytest.raises(SystemExit, match="Invalid configuration"):
        cli.main(["--page-cap", "0"])


def test_main_missing_root_exits_nonzero(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--root", str(tmp_path / "absent")])
    assert excinfo.value.code == cli.EXIT_FAILURE


@pytest.mark.asyncio()
async def test_run_pipeline_reports_cancellation(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    async def _cancelled(*_args, **_kwargs):
        raise PipelineCancelledError()

    monkeypatch.setattr(cli, "build_chain", _cancelled)
    config = ShellConfig(root=str(tmp_path))
    code = await cli.run_pipeline(config, SharedCounter(), CancelSignal())
    assert code == cli.EXIT_INTERRUPTED
