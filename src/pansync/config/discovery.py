"""Locating the project an invocation targets.

A target is an absolute project root plus the ``pansync.toml`` in effect.
Sources, first match wins:

  1. ``--root`` / ``--config`` flags
  2. ``PANSYNC_ROOT`` / ``PANSYNC_CONFIG`` (how a sub-invocation is pinned
     to its parent's target)
  3. walk-up from the root (or CWD) looking for ``pansync.toml``
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

CONFIG_FILENAME = "pansync.toml"
CONFIG_ENV_VAR = "PANSYNC_CONFIG"
ROOT_ENV_VAR = "PANSYNC_ROOT"


@dataclass(frozen=True)
class Target:
    """Resolved project root and config file. Both paths are absolute."""

    root: Path
    config: Path | None = None

    def as_env(self) -> dict[str, str]:
        """Environment that pins a child process to this target."""
        env = {ROOT_ENV_VAR: str(self.root)}
        if self.config is not None:
            env[CONFIG_ENV_VAR] = str(self.config)
        return env


def find_config(start: Path) -> Path | None:
    """Nearest ``pansync.toml`` in *start* or one of its parents."""
    start = start.resolve()
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def _from_env(name: str) -> Path | None:
    value = os.environ.get(name)
    return Path(value) if value else None


def resolve_target(config_path: str | Path | None = None, root: Path | None = None) -> Target:
    """Resolve the target of this invocation.

    A config named by flag or environment that does not exist means
    "no config"; it is never replaced by walk-up discovery. Without a
    root, the config's directory is the root, else the CWD.
    """
    if root is None:
        root = _from_env(ROOT_ENV_VAR)
    if root is not None:
        root = root.resolve()

    named = Path(config_path) if config_path else _from_env(CONFIG_ENV_VAR)
    if named is not None:
        config = named.resolve() if named.is_file() else None
    else:
        config = find_config(root or Path.cwd())

    if root is None:
        root = config.parent if config else Path.cwd().resolve()
    return Target(root=root, config=config)
