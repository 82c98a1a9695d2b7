"""Commands: run SQL against, or reset, the local database."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from pansync.commands._base import PansyncCommand

if TYPE_CHECKING:
    from pansync.commands._context import AppContext


@click.command(
    "sql-query",
    cls=PansyncCommand,
    examples="""\
  pansync sql-query "SELECT COUNT(*) FROM users"
  pansync sql-query --file dump.sql
  pansync sql-query --file /tmp/mysite.live.sql.gz --file-delete""",
)
@click.argument("query", required=False)
@click.option(
    "--file",
    "file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Run the SQL script in this file (.gz is decompressed).",
)
@click.option("--file-delete", is_flag=True, help="Delete --file afterwards.")
@click.pass_obj
def sql_query(app: AppContext, query: str | None, file: Path | None, file_delete: bool) -> None:
    """Run QUERY, or a SQL file, against the local database."""
    from pansync.services.sql import SqlService

    app.emit(SqlService(app.project).query(query, file=file, file_delete=file_delete))


@click.command(
    "sql-drop",
    cls=PansyncCommand,
    examples="""\
  pansync sql-drop
  pansync --uri staging sql-drop""",
)
@click.pass_obj
def sql_drop(app: AppContext) -> None:
    """Drop every table of the local database (creating it if absent)."""
    from pansync.services.result import declined
    from pansync.services.sql import SqlService

    project = app.project
    name = project.database.name
    if not app.confirm(f"Drop local database '{name}'?"):
        app.emit(declined("sql_drop", database=name))
        return
    app.emit(SqlService(project).drop())
