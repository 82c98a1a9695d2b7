"""SqlService — run SQL against, or reset, the local database.

``query`` is also the import step of ``pantheon-sync``: the sync service
dispatches ``sql-query --file <artifact> --file-delete`` as a child process.
"""

from __future__ import annotations

import logging
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError

from pansync.domain.codes import SqlError
from pansync.infrastructure.database import DatabaseError
from pansync.services.base import BaseService
from pansync.services.result import ServiceResult, failure

logger = logging.getLogger(__name__)


class SqlService(BaseService):
    """Local database operations."""

    def query(
        self,
        sql: str | None = None,
        *,
        file: Path | None = None,
        file_delete: bool = False,
    ) -> ServiceResult:
        """Run *sql*, or the script in *file*.

        With *file_delete*, *file* is removed afterwards whether or not the
        script succeeded.
        """
        op = "sql_query"
        db = self._project.database

        if file is None:
            if not sql:
                return failure(op, SqlError.NO_INPUT, "Pass a query or --file.")
            try:
                rows = db.query(sql)
            except SQLAlchemyError as exc:
                return failure(op, SqlError.QUERY_FAILED, f"Query failed: {exc}")
            return ServiceResult(
                ok=True,
                op=op,
                data={"database": db.name, "row_count": len(rows), "rows": rows},
            )

        if not file.is_file():
            return failure(
                op,
                SqlError.FILE_NOT_FOUND,
                f"SQL file not found: {file}",
                file=str(file),
            )

        logger.debug("Running %s against %s", file, db.name)
        try:
            db.run_file(file)
        except (DatabaseError, SQLAlchemyError, OSError, EOFError, UnicodeDecodeError) as exc:
            return failure(
                op,
                SqlError.QUERY_FAILED,
                f"Running {file.name} against '{db.name}' failed: {exc}",
                file=str(file),
            )
        finally:
            db.dispose()
            if file_delete:
                file.unlink(missing_ok=True)

        return ServiceResult(
            ok=True,
            op=op,
            data={"database": db.name, "file": str(file), "file_deleted": file_delete},
        )

    def drop(self) -> ServiceResult:
        """Drop the local database, or create it if absent, leaving it empty."""
        op = "sql_drop"
        db = self._project.database
        try:
            action = db.drop_or_create()
        except (DatabaseError, SQLAlchemyError, OSError) as exc:
            return failure(
                op,
                SqlError.DROP_FAILED,
                f"Could not drop or create '{db.name}': {exc}",
            )
        finally:
            db.dispose()
        return ServiceResult(ok=True, op=op, data={"database": db.name, "action": action})
