"""Shell configuration loading.

Settings come from, in increasing priority: model defaults, the
``[pipeshell]`` table of a TOML file, ``PIPESHELL_*`` environment variables,
then explicit overrides (CLI flags). Validation is done by the pydantic model,
so malformed values raise ``pydantic.ValidationError``.

Dependencies: (none, leaf module)
Wired in: cli.py → main(), pipeline/driver.py → build_chain()
"""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal, cast

from pydantic import BaseModel, ConfigDict, Field, field_validator

ENV_PREFIX = "PIPESHELL_"
CONFIG_ENV_VAR = "PIPESHELL_CONFIG"
TOML_TABLE = "pipeshell"

_LOG_LEVELS = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"})


class ShellConfig(BaseModel):
    """Immutable settings for one pipeline run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    term_width: int | None = Field(default=None, ge=1)
    """Column budget for tables. ``None`` uses the console width."""

    filter_field: str = Field(default="name", min_length=1)
    """Record field the ``where`` stage tests."""

    filter_substring: str = "thirdparty"

    filter_invert: bool = True
    """When true, rows whose field contains the substring are dropped."""

    page_cap: int = Field(default=1000, ge=1)
    """Maximum rows per rendered table."""

    page_timeout_ms: int = Field(default=1000, ge=0)
    """Flush a partial table after buffering this long."""

    root: str = "."
    """Directory the ``ls`` source enumerates."""

    include_hidden: bool = True

    table_mode: Literal["normal", "light"] = "normal"

    log_level: str = "WARNING"

    counter_start: int = 10
    """Initial value of the shared action counter."""

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            msg = f"invalid log level '{value}'. Must be one of {sorted(_LOG_LEVELS)}."
            raise ValueError(msg)
        return level

    @property
    def numeric_log_level(self) -> int:
        return logging.getLevelNamesMapping()[self.log_level]


def read_toml_settings(config_path: Path) -> dict[str, object]:
    """Return the ``[pipeshell]`` table of a TOML file, or ``{}`` if it has none."""
    with config_path.open("rb") as fh:
        data = tomllib.load(fh)
    raw = data.get(TOML_TABLE, {})
    if not isinstance(raw, dict):
        msg = f"'{TOML_TABLE}' in {config_path} must be a table."
        raise TypeError(msg)
    return cast(dict[str, object], raw)


def env_settings(environ: Mapping[str, str] | None = None) -> dict[str, object]:
    """Collect ``PIPESHELL_<FIELD>`` variables for known fields."""
    env = os.environ if environ is None else environ
    settings: dict[str, object] = {}
    for name in ShellConfig.model_fields:
        raw = env.get(f"{ENV_PREFIX}{name.upper()}")
        if raw is not None and raw != "":
            settings[name] = raw
    return settings


def load_config(
    config_path: Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> ShellConfig:
    """Merge all configuration sources into a validated ``ShellConfig``.

    ``None`` entries in *overrides* are ignored so unset CLI flags do not
    mask lower-priority sources.
    """
    env = os.environ if environ is None else environ
    if config_path is None and env.get(CONFIG_ENV_VAR):
        config_path = Path(env[CONFIG_ENV_VAR])

    merged: dict[str, object] = {}
    if config_path is not None:
        merged.update(read_toml_settings(config_path))
    merged.update(env_settings(env))
    if overrides:
        merged.update({key: value for key, value in overrides.items() if value is not None})
    return ShellConfig.model_validate(merged)
