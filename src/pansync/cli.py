"""Root CLI group for pansync with global flags and command registration."""

from __future__ import annotations

from pathlib import Path

import click
from pydantic import ValidationError

from pansync import __version__
from pansync.commands import register_commands
from pansync.commands._context import AppContext
from pansync.config.settings import PansyncSettings


def _global_flags(command: click.Command) -> dict[str, str]:
    """Map each root option's parameter name to its long flag."""
    flags: dict[str, str] = {}
    for param in command.params:
        if isinstance(param, click.Option) and param.expose_value and param.name:
            flags[param.name] = max(param.opts, key=len)
    return flags


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="pansync")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("--no-interact", is_flag=True, help="Non-interactive mode (prompts answer no).")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Project root (default: directory of pansync.toml, or CWD).",
)
@click.option("--uri", default=None, help="Use the [databases.<URI>] target.")
@click.option("--db-url", default=None, help="Override the local database URL.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    no_interact: bool,
    config_path: str | None,
    root: Path | None,
    uri: str | None,
    db_url: str | None,
) -> None:
    """pansync — pull Pantheon database snapshots into a local database."""
    try:
        settings = PansyncSettings.from_cli(
            config_path=config_path,
            root=root,
            json_output=json_output,
            quiet=quiet,
            verbose=verbose,
            log_json=log_json,
            no_interact=no_interact,
            uri=uri,
            db_url=db_url,
        )
    except ValidationError as exc:
        raise click.ClickException(f"Invalid configuration: {exc}") from exc

    ambient = {key: value for key, value in ctx.params.items() if value not in (None, False)}
    app = AppContext(settings, ambient_options=ambient, global_flags=_global_flags(ctx.command))
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
