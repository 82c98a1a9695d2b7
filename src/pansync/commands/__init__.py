"""Subcommand modules for pansync.

Provides register_commands() which uses deferred imports to keep
``pansync --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all commands on the root CLI group."""
    from pansync.commands.pantheon_sync import pantheon_sync
    from pansync.commands.sql import sql_drop, sql_query

    cli.add_command(pantheon_sync)
    cli.add_command(pantheon_sync, name="psync")
    cli.add_command(sql_query)
    cli.add_command(sql_drop)
