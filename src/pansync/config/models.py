"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, pansync.toml only contains overrides.
A fresh project usually needs nothing but ``[database] url``.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

# --- pansync.toml sections ---


class DatabaseConfig(BaseModel):
    """[database] section — the local database snapshots are restored into."""

    model_config = {"frozen": True}

    url: str = "sqlite:///local.db"
    mysql_binary: str = "mysql"
    psql_binary: str = "psql"


class TerminusConfig(BaseModel):
    """[terminus] section."""

    model_config = {"frozen": True}

    binary: str = "terminus"
    timeout: float | None = None


class SyncConfig(BaseModel):
    """[sync] section."""

    model_config = {"frozen": True}

    keep_for: int = Field(default=1, ge=1)
    temp_dir: Path | None = None
    download_timeout: float = 600.0


class ForwardingPolicy(BaseModel):
    """[forwarding] section — which ambient options reach a sub-invocation.

    ``root``, ``config_path`` and ``uri`` select the invocation target. A
    sub-invocation is pinned to its parent's resolved target through the
    environment instead, so these flags are never passed along.
    """

    model_config = {"frozen": True}

    deny: frozenset[str] = frozenset({"root", "config_path", "uri"})

    def filter(self, options: Mapping[str, Any]) -> dict[str, Any]:
        """Return a copy of *options* without the denied keys."""
        return {key: value for key, value in options.items() if key not in self.deny}
