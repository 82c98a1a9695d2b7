"""Project — the invocation target every service is handed.

Bundles the resolved settings with lazily built collaborators: the
terminus client, the HTTP downloader, the local database and the
sub-invocation dispatcher. Tests pass fakes through the constructor.
"""

from __future__ import annotations

import logging
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pansync.infrastructure.database import LocalDatabase
from pansync.infrastructure.dispatch import CommandDispatcher
from pansync.infrastructure.download import Downloader
from pansync.infrastructure.terminus import TerminusClient

if TYPE_CHECKING:
    from pansync.config.settings import PansyncSettings

logger = logging.getLogger(__name__)


class Project:
    """Local project a snapshot is restored into.

    Args:
        settings: Resolved settings for this invocation.
        ambient_options: Options the outer command was invoked with,
            keyed by parameter name.
        global_flags: Parameter name to CLI flag for root-group options.
    """

    def __init__(
        self,
        settings: PansyncSettings,
        *,
        ambient_options: Mapping[str, Any] | None = None,
        global_flags: Mapping[str, str] | None = None,
        terminus: TerminusClient | None = None,
        downloader: Downloader | None = None,
        database: LocalDatabase | None = None,
        dispatcher: CommandDispatcher | None = None,
    ) -> None:
        self.settings = settings
        self.ambient_options = dict(ambient_options or {})
        self._global_flags = dict(global_flags or {})
        self._terminus = terminus
        self._downloader = downloader
        self._database = database
        self._dispatcher = dispatcher

    @property
    def root(self) -> Path:
        return self.settings.root

    @property
    def terminus(self) -> TerminusClient:
        if self._terminus is None:
            cfg = self.settings.terminus
            self._terminus = TerminusClient(cfg.binary, timeout=cfg.timeout)
        return self._terminus

    @property
    def downloader(self) -> Downloader:
        if self._downloader is None:
            self._downloader = Downloader(timeout=self.settings.sync.download_timeout)
        return self._downloader

    @property
    def database(self) -> LocalDatabase:
        """The local database of the current target (``--uri`` aware)."""
        if self._database is None:
            cfg = self.settings.target_database()
            self._database = LocalDatabase(
                cfg.url,
                root=self.root,
                mysql_binary=cfg.mysql_binary,
                psql_binary=cfg.psql_binary,
            )
        return self._database

    @property
    def dispatcher(self) -> CommandDispatcher:
        """Runs sibling commands pinned to this project's root, config and uri."""
        if self._dispatcher is None:
            env = self.settings.target.as_env()
            if self.settings.uri:
                env["PANSYNC_URI"] = self.settings.uri
            self._dispatcher = CommandDispatcher(
                cwd=self.root,
                global_flags=self._global_flags,
                env=env,
            )
        return self._dispatcher

    def temp_dir(self) -> Path:
        """Writable scratch directory for downloaded artifacts."""
        configured = self.settings.sync.temp_dir
        if configured is None:
            return Path(tempfile.gettempdir())
        path = configured if configured.is_absolute() else self.root / configured
        path.mkdir(parents=True, exist_ok=True)
        return path

    def close(self) -> None:
        """Release database connections."""
        if self._database is not None:
            self._database.dispose()
