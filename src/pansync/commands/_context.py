"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy Project initialization, the
confirmation prompt, and centralized result emission (stdout/stderr
routing + exit codes).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import click

from pansync.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from pansync.config.settings import PansyncSettings
    from pansync.infrastructure.project import Project
    from pansync.services.result import ServiceResult

logger = logging.getLogger(__name__)


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``.  The project is lazily
    initialized on first use so ``--help`` and ``--version`` never
    touch the database or terminus.

    Args:
        settings: Resolved settings.
        ambient_options: Root-group options as invoked (unset ones omitted).
        global_flags: Root-group parameter name to its long flag.
    """

    def __init__(
        self,
        settings: PansyncSettings,
        *,
        ambient_options: Mapping[str, Any] | None = None,
        global_flags: Mapping[str, str] | None = None,
    ) -> None:
        self.settings = settings
        self.ambient_options = dict(ambient_options or {})
        self.global_flags = dict(global_flags or {})
        self._project: Project | None = None

        from pansync.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            quiet=settings.quiet,
            log_json=settings.log_json,
        )

    @property
    def project(self) -> Project:
        """The project instance (created lazily on first access)."""
        if self._project is None:
            from pansync.infrastructure.project import Project

            self._project = Project(
                self.settings,
                ambient_options=self.ambient_options,
                global_flags=self.global_flags,
            )
        return self._project

    def confirm(self, question: str) -> bool:
        """Ask a yes/no question on stderr. Defaults to no.

        With ``--no-interact`` nobody can answer, so the answer is no.
        """
        if self.settings.no_interact:
            logger.warning("Confirmation required but --no-interact is set: %s", question)
            return False
        return click.confirm(question, default=False, err=True)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def close(self) -> None:
        if self._project is not None:
            self._project.close()
