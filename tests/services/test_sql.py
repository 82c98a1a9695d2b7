"""Tests for SqlService — query, script files, drop-or-create."""

from __future__ import annotations

import gzip
from pathlib import Path

from sqlalchemy import inspect

from pansync.infrastructure.database import LocalDatabase
from pansync.infrastructure.project import Project
from pansync.services.sql import SqlService


class TestQuery:
    def test_requires_input(self, project: Project) -> None:
        result = SqlService(project).query()
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "SQL_NO_INPUT"

    def test_select_returns_rows(self, project: Project) -> None:
        result = SqlService(project).query("SELECT 1, 'two'")
        assert result.ok
        assert result.data["rows"] == [[1, "two"]]
        assert result.data["row_count"] == 1
        assert result.data["database"] == "local"

    def test_statement_without_rows(self, project: Project) -> None:
        result = SqlService(project).query("CREATE TABLE t (id INTEGER)")
        assert result.ok
        assert result.data["rows"] == []

    def test_bad_sql(self, project: Project) -> None:
        result = SqlService(project).query("SELEC nonsense")
        assert result.error is not None
        assert result.error.code == "SQL_QUERY_FAILED"


class TestQueryFile:
    def test_plain_file(
        self, project: Project, tmp_path: Path, local_db: LocalDatabase, snapshot_sql: str
    ) -> None:
        script = tmp_path / "dump.sql"
        script.write_text(snapshot_sql, encoding="utf-8")

        result = SqlService(project).query(file=script)

        assert result.ok, result.error
        assert result.data["file_deleted"] is False
        assert script.exists()
        assert local_db.query("SELECT COUNT(*) FROM users") == [[2]]

    def test_gzip_file_with_delete(
        self, project: Project, tmp_path: Path, local_db: LocalDatabase, snapshot_sql: str
    ) -> None:
        script = tmp_path / "dump.sql.gz"
        script.write_bytes(gzip.compress(snapshot_sql.encode("utf-8")))

        result = SqlService(project).query(file=script, file_delete=True)

        assert result.ok, result.error
        assert result.data["file_deleted"] is True
        assert not script.exists()
        assert local_db.query("SELECT name FROM users WHERE id = 2") == [["bob"]]

    def test_missing_file(self, project: Project, tmp_path: Path) -> None:
        result = SqlService(project).query(file=tmp_path / "nope.sql")
        assert result.error is not None
        assert result.error.code == "SQL_FILE_NOT_FOUND"

    def test_failed_script_is_still_deleted(self, project: Project, tmp_path: Path) -> None:
        script = tmp_path / "broken.sql"
        script.write_text("CREATE TABL oops;", encoding="utf-8")

        result = SqlService(project).query(file=script, file_delete=True)

        assert result.error is not None
        assert result.error.code == "SQL_QUERY_FAILED"
        assert "broken.sql" in result.error.message
        assert not script.exists()

    def test_truncated_gzip(self, project: Project, tmp_path: Path, snapshot_sql: str) -> None:
        script = tmp_path / "cut.sql.gz"
        script.write_bytes(gzip.compress(snapshot_sql.encode("utf-8"))[:20])
        result = SqlService(project).query(file=script)
        assert result.error is not None
        assert result.error.code == "SQL_QUERY_FAILED"


class TestDrop:
    def test_creates_when_absent(self, project: Project, project_root: Path) -> None:
        result = SqlService(project).drop()
        assert result.ok
        assert result.data["action"] == "created"
        assert (project_root / "local.db").is_file()

    def test_drops_existing_tables(self, project: Project, local_db: LocalDatabase) -> None:
        local_db.query("CREATE TABLE old (id INTEGER)")
        local_db.dispose()

        result = SqlService(project).drop()

        assert result.ok
        assert result.data["action"] == "dropped"
        assert inspect(local_db.engine).get_table_names() == []
