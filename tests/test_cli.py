"""Tests for the root pansync CLI."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from pansync import __version__
from pansync.cli import _global_flags, cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "pansync" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


@pytest.mark.parametrize(
    "flags",
    [
        ["--json"],
        ["-q"],
        ["-v"],
        ["--log-json"],
        ["--no-interact"],
        ["-c", "/tmp/pansync-test.toml"],
        ["--root", "/tmp"],
        ["--uri", "staging"],
        ["--db-url", "sqlite:///x.db"],
    ],
)
def test_global_flags_accepted(cli_runner: CliRunner, flags: list[str]) -> None:
    result = cli_runner.invoke(cli, [*flags, "--version"])
    assert result.exit_code == 0


@pytest.mark.parametrize("name", ["pantheon-sync", "psync", "sql-query", "sql-drop"])
def test_commands_registered(name: str) -> None:
    assert name in cli.commands


def test_global_flag_map() -> None:
    flags = _global_flags(cli)
    assert flags["json_output"] == "--json"
    assert flags["config_path"] == "--config"
    assert flags["verbose"] == "--verbose"
    assert flags["db_url"] == "--db-url"
    assert "version" not in flags


def test_unknown_uri_is_a_usage_error(cli_runner: CliRunner, tmp_path: Path) -> None:
    result = cli_runner.invoke(cli, ["--root", str(tmp_path), "--uri", "nope", "sql-drop"])
    assert result.exit_code == 1
    assert "Invalid configuration" in result.stderr
