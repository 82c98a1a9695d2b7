"""Command: pull a Pantheon database backup into the local database."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pansync.commands._base import PansyncCommand

if TYPE_CHECKING:
    from pansync.commands._context import AppContext


@click.command(
    "pantheon-sync",
    cls=PansyncCommand,
    examples="""\
  pansync pantheon-sync mysite live
  pansync psync mysite dev
  pansync --db-url mysql+pymysql://root@localhost/mysite psync mysite test
  pansync --json -v pantheon-sync mysite live""",
)
@click.argument("site")
@click.argument("env")
@click.pass_obj
def pantheon_sync(app: AppContext, site: str, env: str) -> None:
    """Replace the local database with a fresh backup of SITE's ENV (dev, test, live).

    Always asks for confirmation before anything is changed.
    """
    from pansync.services.sync import SyncService

    app.emit(SyncService(app.project).sync(site, env, confirm=app.confirm))
