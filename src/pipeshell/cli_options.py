"""CLI argument and version helpers for the pipeshell entrypoint."""

from __future__ import annotations

import argparse
from importlib import metadata
from typing import Any

DIST_NAME = "pipeshell"
UNKNOWN_VERSION = "0+unknown"


def project_version(dist_name: str = DIST_NAME) -> str:
    """Installed distribution version, or ``UNKNOWN_VERSION`` when not installed."""
    try:
        return metadata.version(dist_name)
    except metadata.PackageNotFoundError:
        return UNKNOWN_VERSION


def parse_cli_args(argv: list[str]) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        prog="pipeshell",
        description="List files under a directory, filter them, and print them as tables",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=project_version(),
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a TOML config with a [pipeshell] table (default: $PIPESHELL_CONFIG)",
    )
    parser.add_argument("--root", default=None, help="Directory to list (default: .)")
    parser.add_argument(
        "--no-hidden",
        dest="include_hidden",
        action="store_const",
        const=False,
        default=None,
        help="Skip entries whose name starts with '.'",
    )
    parser.add_argument(
        "--width", dest="term_width", type=int, default=None, help="Table width budget"
    )
    parser.add_argument("--field", dest="filter_field", default=None, help="Field to filter on")
    parser.add_argument(
        "--contains", dest="filter_substring", default=None, help="Substring to filter on"
    )
    parser.add_argument(
        "--keep-matching",
        dest="filter_invert",
        action="store_const",
        const=False,
        default=None,
        help="Keep rows containing the substring instead of dropping them",
    )
    parser.add_argument("--page-cap", type=int, default=None, help="Maximum rows per table")
    parser.add_argument(
        "--page-timeout-ms", type=int, default=None, help="Flush a partial table after this long"
    )
    parser.add_argument(
        "--light",
        dest="table_mode",
        action="store_const",
        const="light",
        default=None,
        help="Draw tables without column rules",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: WARNING)")
    return parser.parse_args(argv)


def config_overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Extract config-field overrides from parsed arguments."""
    fields = (
        "root",
        "include_hidden",
        "term_width",
        "filter_field",
        "filter_substring",
        "filter_invert",
        "page_cap",
        "page_timeout_ms",
        "table_mode",
        "log_level",
    )
    return {name: getattr(args, name) for name in fields}
