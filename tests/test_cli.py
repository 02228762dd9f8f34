"""Tests for the command line entry point."""

import io

import pytest
from rich.console import Console

from proctop import cli
from proctop.config import Config
from proctop.errors import TerminalSetupError


class FakeStream(io.StringIO):
    def __init__(self, tty: bool) -> None:
        super().__init__()
        self._tty = tty

    def isatty(self) -> bool:
        return self._tty


def test_parser_defaults():
    args = cli.build_parser().parse_args([])

    assert args.config is None
    assert args.refresh is None
    assert args.once is False


def test_parser_rejects_unknown_palette():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["--palette", "neon"])


def test_ensure_terminal_accepts_ttys():
    cli.ensure_terminal(FakeStream(tty=True), FakeStream(tty=True))


@pytest.mark.parametrize("stdin_tty, stdout_tty", [(False, True), (True, False)])
def test_ensure_terminal_rejects_pipes(stdin_tty, stdout_tty):
    with pytest.raises(TerminalSetupError):
        cli.ensure_terminal(FakeStream(stdin_tty), FakeStream(stdout_tty))


def test_main_without_terminal_exits_nonzero(monkeypatch, capsys, tmp_path):
    """Test a terminal setup failure prints a diagnostic and returns 1."""
    monkeypatch.setattr(cli.sys, "stdin", FakeStream(tty=False))

    code = cli.main(["--config", str(tmp_path / "none.toml")])

    assert code == 1
    assert "proctop: error:" in capsys.readouterr().err


def test_main_applies_cli_overrides(monkeypatch, tmp_path):
    seen = []
    monkeypatch.setattr(cli, "run_interactive", lambda config: seen.append(config) or 0)

    code = cli.main(
        ["--config", str(tmp_path / "none.toml"), "--refresh", "0.01", "--palette", "mono"]
    )

    assert code == 0
    assert seen == [Config(refresh_rate=0.1, palette="mono")]


def test_main_once(monkeypatch, tmp_path):
    seen = []
    monkeypatch.setattr(cli, "print_once", lambda config: seen.append(config))

    assert cli.main(["--once", "--config", str(tmp_path / "none.toml")]) == 0
    assert seen == [Config()]


def test_print_once_renders_real_processes():
    console = Console(record=True, width=200, color_system=None)

    cli.print_once(Config(), console=console)

    text = console.export_text()
    assert "Running Processes" in text
    assert "PID" in text


def test_print_once_samples_cpu_before_printing(monkeypatch):
    """Test --once waits between the priming sample and the printed snapshot."""
    order = []

    class RecordingSource:
        def __init__(self):
            order.append("prime")

        def get_snapshot(self):
            order.append("snapshot")
            return []

    monkeypatch.setattr(cli, "PsutilSnapshotSource", RecordingSource)
    monkeypatch.setattr(cli.time, "sleep", lambda seconds: order.append(("sleep", seconds)))
    console = Console(record=True, width=120, color_system=None)

    cli.print_once(Config(), console=console)

    assert order == ["prime", ("sleep", cli.ONCE_SAMPLE_INTERVAL), "snapshot"]
    assert "Running Processes (0)" in console.export_text()
