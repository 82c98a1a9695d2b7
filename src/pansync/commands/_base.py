"""Click command class shared by every pansync command."""

from __future__ import annotations

from typing import Any

import click


class PansyncCommand(click.Command):
    """A command whose ``--examples`` flag prints *examples* and exits.

    Keeps ``--help`` short; the examples are one flag away.
    """

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._print_examples,
                    help="Show usage examples and exit.",
                )
            )

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if value:
            click.echo(f"{ctx.command_path}:\n\n{self.examples}")
            ctx.exit()
