"""Shared pytest fixtures and test doubles for pansync tests."""

from __future__ import annotations

import gzip
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from pansync.config.settings import PansyncSettings
from pansync.infrastructure.database import LocalDatabase
from pansync.infrastructure.dispatch import DispatchResult
from pansync.infrastructure.project import Project

SNAPSHOT_SQL = """\
CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT NOT NULL);
INSERT INTO users (id, name) VALUES (1, 'alice');
INSERT INTO users (id, name) VALUES (2, 'bob');
"""


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's PANSYNC_* environment out of tests."""
    for name in ("PANSYNC_CONFIG", "PANSYNC_URI", "PANSYNC_DB_URL", "PANSYNC_ROOT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Undo configure_logging() so handlers never outlive a CliRunner stream."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("pansync").setLevel(logging.NOTSET)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Empty project directory; the local SQLite database lives here."""
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def scratch_dir(tmp_path: Path) -> Path:
    """Temp directory downloaded artifacts land in."""
    path = tmp_path / "scratch"
    path.mkdir()
    return path


@pytest.fixture
def settings(project_root: Path, scratch_dir: Path) -> PansyncSettings:
    return PansyncSettings.from_cli(
        root=project_root,
        sync={"temp_dir": str(scratch_dir)},
    )


# ---------------------------------------------------------------------------
# Test doubles for the external collaborators
# ---------------------------------------------------------------------------


class FakeTerminus:
    """Records terminus calls; each check's outcome is configurable."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []
        self.installed = True
        self.accessible = True
        self.backup_ok = True
        self.url: str | None = "https://backups.example.test/example_live_db.sql.gz"

    def version(self) -> bool:
        self.calls.append(("version",))
        return self.installed

    def site_info(self, site: str) -> bool:
        self.calls.append(("site_info", site))
        return self.accessible

    def create_backup(self, site_env: str, *, keep_for: int = 1) -> bool:
        self.calls.append(("create_backup", site_env, keep_for))
        return self.backup_ok

    def backup_url(self, site_env: str) -> str | None:
        self.calls.append(("backup_url", site_env))
        return self.url

    @property
    def names(self) -> list[str]:
        return [call[0] for call in self.calls]


class FakeDownloader:
    """Writes a gzipped snapshot to the destination (or nothing at all)."""

    def __init__(self) -> None:
        self.fetched: list[tuple[str, Path]] = []
        self.payload: bytes | None = gzip.compress(SNAPSHOT_SQL.encode("utf-8"))
        self.error: Exception | None = None

    def fetch(self, url: str, dest: Path) -> Path:
        self.fetched.append((url, dest))
        if self.error is not None:
            raise self.error
        if self.payload is not None:
            dest.write_bytes(self.payload)
        return dest


class FakeDispatcher:
    """Records sub-invocations.

    When ``project`` is set, ``sql-query`` runs in-process through the
    real SqlService, so the import actually lands in the database.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.project: Project | None = None
        self.fail = False

    def dispatch(self, command: str, options: dict[str, Any]) -> DispatchResult:
        self.calls.append((command, dict(options)))
        if self.fail:
            return DispatchResult(returncode=1)
        if self.project is None:
            Path(options["file"]).unlink(missing_ok=True)
            return DispatchResult(returncode=0, payload={"ok": True, "op": "sql_query"})

        from pansync.services.sql import SqlService

        result = SqlService(self.project).query(
            file=Path(options["file"]),
            file_delete=bool(options.get("file_delete")),
        )
        return DispatchResult(
            returncode=0 if result.ok else 1,
            payload=result.model_dump(mode="json"),
        )


@pytest.fixture
def fake_terminus() -> FakeTerminus:
    return FakeTerminus()


@pytest.fixture
def fake_downloader() -> FakeDownloader:
    return FakeDownloader()


@pytest.fixture
def fake_dispatcher() -> FakeDispatcher:
    return FakeDispatcher()


@pytest.fixture
def local_db(project_root: Path) -> Iterator[LocalDatabase]:
    """The project's SQLite database (``<root>/local.db``)."""
    db = LocalDatabase("sqlite:///local.db", root=project_root)
    try:
        yield db
    finally:
        db.dispose()


@pytest.fixture
def project(
    settings: PansyncSettings,
    fake_terminus: FakeTerminus,
    fake_downloader: FakeDownloader,
    fake_dispatcher: FakeDispatcher,
) -> Iterator[Project]:
    """Project wired to fakes, with a real SQLite database and in-process import."""
    p = Project(
        settings,
        ambient_options={"verbose": True},
        terminus=fake_terminus,  # type: ignore[arg-type]
        downloader=fake_downloader,  # type: ignore[arg-type]
        dispatcher=fake_dispatcher,  # type: ignore[arg-type]
    )
    fake_dispatcher.project = p
    try:
        yield p
    finally:
        p.close()


@pytest.fixture
def snapshot_sql() -> str:
    """SQL text of the snapshot FakeDownloader serves."""
    return SNAPSHOT_SQL
