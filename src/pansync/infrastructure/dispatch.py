"""Process-style sub-invocation of another pansync command.

The child runs ``python -m pansync --json [global flags] COMMAND [options]``
in the project root, with the target pinned through its environment. Its
stderr is inherited: whatever the child reports reaches the user directly
and the parent only looks at the structured JSON on stdout.
"""

from __future__ import annotations

import json
import logging
import os
import subprocess
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchResult:
    """Exit status plus the parsed JSON result of a sub-invocation."""

    returncode: int
    payload: dict[str, Any] | None = None

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and bool(self.payload and self.payload.get("ok"))


class CommandDispatcher:
    """Runs a pansync command as a child process.

    Args:
        cwd: Working directory of the child (the project root).
        global_flags: Option key to flag for options that belong to the
            root group (``{"verbose": "--verbose", ...}``). Any other key
            is passed after the command name as ``--key-name``.
        env: Extra environment for the child (e.g. ``PANSYNC_URI``).
        program: Command prefix; defaults to this interpreter's ``-m pansync``.
    """

    def __init__(
        self,
        *,
        cwd: Path,
        global_flags: Mapping[str, str] | None = None,
        env: Mapping[str, str] | None = None,
        program: Sequence[str] | None = None,
    ) -> None:
        self._cwd = cwd
        self._global_flags = dict(global_flags or {})
        self._env = dict(env or {})
        self._program = list(program or [sys.executable, "-m", "pansync"])

    def build_argv(self, command: str, options: Mapping[str, Any]) -> list[str]:
        """Translate *options* into argv around *command*.

        ``True`` becomes a bare flag; ``False`` and ``None`` are omitted.
        ``json_output`` is always forced on, so it is never taken from
        *options*.
        """
        leading: list[str] = []
        trailing: list[str] = []
        for key, value in options.items():
            if key == "json_output" or value is None or value is False:
                continue
            flag = self._global_flags.get(key)
            bucket = leading if flag else trailing
            flag = flag or "--" + key.replace("_", "-")
            if value is True:
                bucket.append(flag)
            else:
                bucket.extend([flag, str(value)])
        return [*self._program, "--json", *leading, command, *trailing]

    def dispatch(self, command: str, options: Mapping[str, Any]) -> DispatchResult:
        """Run *command* and wait for it."""
        argv = self.build_argv(command, options)
        logger.debug("Dispatching %s", " ".join(argv))
        try:
            proc = subprocess.run(
                argv,
                cwd=self._cwd,
                stdout=subprocess.PIPE,
                text=True,
                check=False,
                env={**os.environ, **self._env},
            )
        except OSError as exc:
            logger.error("Could not start %s: %s", argv[0], exc)
            return DispatchResult(returncode=127)

        payload: dict[str, Any] | None = None
        if proc.stdout.strip():
            try:
                payload = json.loads(proc.stdout)
            except json.JSONDecodeError:
                logger.debug("Unparseable output from %s: %r", command, proc.stdout[:200])
        return DispatchResult(returncode=proc.returncode, payload=payload)
