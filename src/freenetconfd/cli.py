"""Command-line interface for inspecting the daemon configuration."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from rich.console import Console
from rich.markup import escape

from .config import ConfigError, DaemonConfig, LoadResult, load_config

MASK = "********"


def _add_config_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--confdir",
        type=Path,
        help="Directory containing freenetconfd.toml (default: discovery order).",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        action="append",
        default=[],
        metavar="option=value",
        help="Override a configuration option (e.g. --set ssh_timeout_read=5).",
    )


def build_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Load and validate the freenetconfd startup configuration."
    )
    parser.add_argument(
        "--log-level",
        choices=["critical", "error", "warning", "info", "debug"],
        default="warning",
        help="Logging verbosity (default: warning).",
    )

    subparsers = parser.add_subparsers(dest="command")
    subparsers.required = True

    check_parser = subparsers.add_parser(
        "check",
        help="Load the configuration and report problems.",
    )
    _add_config_arguments(check_parser)

    print_config_parser = subparsers.add_parser(
        "print-config",
        help="Display the loaded configuration after applying overrides.",
    )
    _add_config_arguments(print_config_parser)

    return parser


def _configure_logging(log_level: str) -> None:
    """Initialise root logging configuration."""
    level = getattr(logging, log_level.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(message)s",
        datefmt="%H:%M:%S",
        force=True,
    )


def _redacted(config: DaemonConfig) -> dict[str, Any]:
    data = config.model_dump(mode="json")
    if data.get("password"):
        data["password"] = MASK
    return data


def _load(args: argparse.Namespace, console: Console) -> Optional[LoadResult]:
    try:
        return load_config(args.confdir, args.overrides)
    except ConfigError as exc:
        console.print(f"[bold red]Configuration error:[/bold red] {escape(str(exc))}", highlight=False)
        return None


def _run_check_command(args: argparse.Namespace) -> int:
    console = Console()
    result = _load(args, console)
    if result is None:
        return 1
    for problem in result.diagnostics:
        console.print(f"[yellow]warning:[/yellow] {escape(str(problem))}", highlight=False)
    config = result.config
    console.print(
        f"[bold green]Configuration OK[/bold green] "
        f"({len(config.host_keys)} host key(s), read timeout {config.ssh_timeout_read} ms)",
        highlight=False,
    )
    return 0


def _run_print_config_command(args: argparse.Namespace) -> int:
    console = Console()
    result = _load(args, console)
    if result is None:
        return 1
    console.print(
        json.dumps(_redacted(result.config), indent=2),
        highlight=False,
        markup=False,
        soft_wrap=True,
    )
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Execute the CLI entry point."""
    parser = build_parser()
    raw_args = list(argv if argv is not None else sys.argv[1:])
    if not raw_args:
        parser.print_help()
        return 0

    args = parser.parse_args(raw_args)
    _configure_logging(args.log_level)

    if args.command == "check":
        return _run_check_command(args)
    if args.command == "print-config":
        return _run_print_config_command(args)

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
