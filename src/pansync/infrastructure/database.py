"""The local database snapshots are restored into.

SQLAlchemy Core handles connection specs, drop/create and ad-hoc queries.
SQL script files go through the backend's own client (``mysql``, ``psql``)
on stdin, the way a dump is normally restored; SQLite scripts run through
the DBAPI connection's ``executescript``.
"""

from __future__ import annotations

import gzip
import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import IO, TYPE_CHECKING, Any, cast

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, make_url

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


class DatabaseError(Exception):
    """A local database operation failed."""


def open_sql_file(path: Path) -> IO[bytes]:
    """Open a SQL script for reading, decompressing ``.gz`` transparently."""
    if path.suffix == ".gz":
        return gzip.open(path, "rb")
    return path.open("rb")


class LocalDatabase:
    """Connection details plus the destructive operations a restore needs.

    Relative SQLite paths resolve against *root* so that every process
    started in the project directory agrees on the file.
    """

    def __init__(
        self,
        url: str | URL,
        *,
        root: Path | None = None,
        mysql_binary: str = "mysql",
        psql_binary: str = "psql",
    ) -> None:
        parsed = make_url(url)
        if parsed.get_backend_name() == "sqlite" and parsed.database:
            db_path = Path(parsed.database)
            if parsed.database != ":memory:" and not db_path.is_absolute():
                db_path = (root or Path.cwd()) / db_path
                parsed = parsed.set(database=str(db_path))
        self.url = parsed
        self._mysql_binary = mysql_binary
        self._psql_binary = psql_binary
        self._engine: Engine | None = None

    @property
    def backend(self) -> str:
        return self.url.get_backend_name()

    @property
    def name(self) -> str:
        """Database name (the file stem for SQLite)."""
        if self.backend == "sqlite":
            return Path(self.url.database or ":memory:").stem
        return self.url.database or ""

    @property
    def engine(self) -> Engine:
        """Engine bound to the target database (created lazily)."""
        if self._engine is None:
            self._engine = create_engine(self.url)
        return self._engine

    def describe(self) -> dict[str, Any]:
        """Connection details without the password, for display."""
        return {
            "name": self.name,
            "backend": self.backend,
            "url": self.url.render_as_string(hide_password=True),
        }

    def dispose(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None

    # ------------------------------------------------------------------
    # Drop / create
    # ------------------------------------------------------------------

    def drop_or_create(self) -> str:
        """Leave an empty database behind. Returns ``"dropped"`` or ``"created"``."""
        if self.backend == "sqlite":
            return self._reset_sqlite()
        return self._reset_server()

    def _reset_sqlite(self) -> str:
        db_file = Path(self.url.database or "")
        self.dispose()
        existed = db_file.is_file()
        for suffix in ("", "-wal", "-shm", "-journal"):
            Path(f"{db_file}{suffix}").unlink(missing_ok=True)
        db_file.parent.mkdir(parents=True, exist_ok=True)
        # Connecting creates the file.
        with self.engine.connect():
            pass
        return "dropped" if existed else "created"

    def _server_url(self) -> URL:
        if self.backend == "postgresql":
            return self.url.set(database="postgres")
        return self.url.set(database=None)

    def _reset_server(self) -> str:
        name = self.name
        if not name:
            raise DatabaseError(f"No database name in {self.describe()['url']}")
        self.dispose()
        server = create_engine(self._server_url(), isolation_level="AUTOCOMMIT")
        try:
            quoted = server.dialect.identifier_preparer.quote(name)
            with server.connect() as conn:
                if self.backend == "postgresql":
                    exists_sql = "SELECT 1 FROM pg_database WHERE datname = :name"
                else:
                    exists_sql = (
                        "SELECT 1 FROM information_schema.SCHEMATA WHERE SCHEMA_NAME = :name"
                    )
                existed = conn.execute(text(exists_sql), {"name": name}).first() is not None
                if existed:
                    conn.execute(text(f"DROP DATABASE {quoted}"))
                conn.execute(text(f"CREATE DATABASE {quoted}"))
        finally:
            server.dispose()
        return "dropped" if existed else "created"

    # ------------------------------------------------------------------
    # SQL execution
    # ------------------------------------------------------------------

    def query(self, sql: str) -> list[list[Any]]:
        """Run a single statement, returning rows if it produces any."""
        with self.engine.begin() as conn:
            result = conn.execute(text(sql))
            if not result.returns_rows:
                return []
            return [list(row) for row in result]

    def run_file(self, path: Path) -> None:
        """Execute every statement in the SQL script at *path*.

        Raises:
            DatabaseError: the script or the client failed.
        """
        with open_sql_file(path) as fh:
            if self.backend == "sqlite":
                self._executescript(fh.read().decode("utf-8"))
            else:
                self._pipe_to_client(fh)

    def _executescript(self, script: str) -> None:
        raw = self.engine.raw_connection()
        try:
            raw.driver_connection.executescript(script)
            raw.commit()
        except self.engine.dialect.loaded_dbapi.Error as exc:
            raise DatabaseError(str(exc)) from exc
        finally:
            raw.close()

    def client_command(self) -> tuple[list[str], dict[str, str]]:
        """Client argv and extra environment for a server backend.

        The password travels in the environment, never on the command line.
        """
        url = self.url
        env: dict[str, str] = {}
        if self.backend == "postgresql":
            argv = [self._psql_binary, "--quiet", "--no-psqlrc", "--set", "ON_ERROR_STOP=1"]
            if url.host:
                argv.append(f"--host={url.host}")
            if url.port:
                argv.append(f"--port={url.port}")
            if url.username:
                argv.append(f"--username={url.username}")
            argv.append(f"--dbname={self.name}")
            if url.password:
                env["PGPASSWORD"] = str(url.password)
        elif self.backend in {"mysql", "mariadb"}:
            argv = [self._mysql_binary]
            if url.host:
                argv.append(f"--host={url.host}")
            if url.port:
                argv.append(f"--port={url.port}")
            if url.username:
                argv.append(f"--user={url.username}")
            argv.append(f"--database={self.name}")
            if url.password:
                env["MYSQL_PWD"] = str(url.password)
        else:
            raise DatabaseError(f"No SQL client known for backend '{self.backend}'")
        return argv, env

    def _pipe_to_client(self, source: IO[bytes]) -> None:
        """Stream *source* into the client; its stderr goes straight to ours."""
        argv, extra_env = self.client_command()
        logger.debug("Piping SQL script to %s", argv[0])
        try:
            proc = subprocess.Popen(
                argv,
                stdin=subprocess.PIPE,
                stdout=subprocess.DEVNULL,
                env={**os.environ, **extra_env},
            )
        except OSError as exc:
            raise DatabaseError(f"Could not start {argv[0]}: {exc}") from exc

        stdin = cast(IO[bytes], proc.stdin)
        try:
            shutil.copyfileobj(source, stdin)
        except BrokenPipeError:
            # Client exited early; the exit status below reports it.
            pass
        finally:
            try:
                stdin.close()
            except BrokenPipeError:
                pass
        returncode = proc.wait()
        if returncode != 0:
            raise DatabaseError(f"{argv[0]} exited with status {returncode}")
