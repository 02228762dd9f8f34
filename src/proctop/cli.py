"""Command line entry point for proctop."""

import argparse
import logging
import sys
import time
from dataclasses import replace
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import TextIO

from rich.console import Console

from proctop.config import Config
from proctop.engine import Dashboard
from proctop.errors import TerminalSetupError
from proctop.monitor import PsutilSnapshotSource, collect_host_summary
from proctop.palettes import PALETTES
from proctop.render import snapshot_view

logger = logging.getLogger(__name__)

# Seconds between the two CPU samples taken for --once
ONCE_SAMPLE_INTERVAL = 0.5


def _version() -> str:
    try:
        return version("proctop")
    except PackageNotFoundError:
        return "unknown"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="proctop", description="Live, filterable table of the processes on this host"
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to config file")
    parser.add_argument("--refresh", type=float, default=None, help="Seconds between snapshots")
    parser.add_argument(
        "--palette", choices=[p.name for p in PALETTES], default=None, help="Starting palette"
    )
    parser.add_argument("--once", action="store_true", help="Print the table once and exit")
    parser.add_argument("--log-file", type=Path, default=None, help="Write logs to this file")
    parser.add_argument("--debug", action="store_true", help="Log at DEBUG level")
    parser.add_argument("--version", action="version", version=f"proctop {_version()}")
    return parser


def configure_logging(log_file: Path | None, debug: bool) -> None:
    """Log to a file when asked; the terminal itself belongs to the UI."""
    if log_file is None:
        logging.getLogger("proctop").addHandler(logging.NullHandler())
        return
    logging.basicConfig(
        filename=log_file,
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def ensure_terminal(stdin: TextIO, stdout: TextIO) -> None:
    """
    Check that an interactive session is possible.

    Raises:
        TerminalSetupError: stdin or stdout is not a terminal.
    """
    for name, stream in (("stdin", stdin), ("stdout", stdout)):
        try:
            interactive = stream.isatty()
        except (AttributeError, ValueError):
            interactive = False
        if not interactive:
            raise TerminalSetupError(f"{name} is not a terminal (try --once)")


def print_once(
    config: Config,
    console: Console | None = None,
    sample_interval: float = ONCE_SAMPLE_INTERVAL,
) -> None:
    """
    Print one snapshot of the table, like a non-interactive top.

    CPU usage is measured over sample_interval seconds before printing.
    """
    source = PsutilSnapshotSource()
    time.sleep(sample_interval)
    dashboard = Dashboard(
        source,
        host_probe=collect_host_summary,
        max_cell_width=config.max_cell_width,
        palette_index=config.palette_index,
    )
    console = console or Console()
    console.print(snapshot_view(dashboard.frame(len(dashboard.view()))))


def run_interactive(config: Config) -> int:
    """
    Run the Textual dashboard until the user quits.

    Raises:
        TerminalSetupError: The terminal could not be set up or restored.
    """
    ensure_terminal(sys.stdin, sys.stdout)

    from proctop.app import ProctopApp

    app = ProctopApp(config=config)
    try:
        app.run()
    except OSError as exc:
        raise TerminalSetupError(f"terminal failure: {exc}") from exc
    return app.return_code or 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the proctop command."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_file, args.debug)

    config = Config.load(args.config)
    if args.refresh is not None:
        config = replace(config, refresh_rate=args.refresh)
    if args.palette is not None:
        config = replace(config, palette=args.palette)
    config = config.normalized()

    if args.once:
        print_once(config)
        return 0

    try:
        return run_interactive(config)
    except TerminalSetupError as exc:
        logger.error("Terminal setup failed: %s", exc)
        print(f"proctop: error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
