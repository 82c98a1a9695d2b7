"""Tests for the sql-query and sql-drop CLI commands."""

from __future__ import annotations

import gzip
import json
from pathlib import Path

from click.testing import CliRunner

from pansync.cli import cli


def _db_args(root: Path) -> list[str]:
    return ["--root", str(root), "--db-url", "sqlite:///site.db"]


class TestSqlQuery:
    def test_query(self, cli_runner: CliRunner, project_root: Path) -> None:
        result = cli_runner.invoke(cli, [*_db_args(project_root), "--json", "sql-query", "SELECT 2"])
        assert result.exit_code == 0, result.stderr
        data = json.loads(result.stdout)
        assert data["data"]["rows"] == [[2]]
        assert data["data"]["database"] == "site"

    def test_file_delete(
        self, cli_runner: CliRunner, project_root: Path, tmp_path: Path, snapshot_sql: str
    ) -> None:
        dump = tmp_path / "example.live-20240101T000000.sql.gz"
        dump.write_bytes(gzip.compress(snapshot_sql.encode("utf-8")))

        result = cli_runner.invoke(
            cli, [*_db_args(project_root), "sql-query", "--file", str(dump), "--file-delete"]
        )

        assert result.exit_code == 0, result.stderr
        assert result.stdout.startswith("OK: sql_query")
        assert not dump.exists()
        check = cli_runner.invoke(
            cli, [*_db_args(project_root), "--json", "sql-query", "SELECT COUNT(*) FROM users"]
        )
        assert json.loads(check.stdout)["data"]["rows"] == [[2]]

    def test_no_input(self, cli_runner: CliRunner, project_root: Path) -> None:
        result = cli_runner.invoke(cli, [*_db_args(project_root), "sql-query"])
        assert result.exit_code == 1
        assert "SQL_NO_INPUT" in result.stderr

    def test_examples(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["sql-query", "--examples"])
        assert result.exit_code == 0
        assert "--file-delete" in result.output


class TestSqlDrop:
    def test_confirmed(self, cli_runner: CliRunner, project_root: Path) -> None:
        cli_runner.invoke(cli, [*_db_args(project_root), "sql-query", "CREATE TABLE t (x INT)"])
        result = cli_runner.invoke(
            cli, [*_db_args(project_root), "--json", "sql-drop"], input="y\n"
        )
        assert result.exit_code == 0, result.stderr
        assert json.loads(result.stdout)["data"]["action"] == "dropped"

    def test_declined(self, cli_runner: CliRunner, project_root: Path) -> None:
        cli_runner.invoke(cli, [*_db_args(project_root), "sql-query", "CREATE TABLE t (x INT)"])
        result = cli_runner.invoke(cli, [*_db_args(project_root), "sql-drop"], input="n\n")
        assert result.exit_code == 0
        assert "Aborted" in result.stderr
        check = cli_runner.invoke(
            cli,
            [
                *_db_args(project_root),
                "--json",
                "sql-query",
                "SELECT name FROM sqlite_master WHERE type = 'table'",
            ],
        )
        assert json.loads(check.stdout)["data"]["rows"] == [["t"]]
