"""Thin subprocess wrapper around the Pantheon ``terminus`` client.

Every call is an explicit argv list (no shell) and a single attempt.
Authentication is whatever state terminus already holds; pansync never
touches credentials.
"""

from __future__ import annotations

import logging
import subprocess

logger = logging.getLogger(__name__)


class TerminusClient:
    """Runs terminus subcommands and reports success as booleans.

    Failures (missing binary, non-zero exit, timeout) are logged at
    DEBUG and mapped to ``False``/``None``; the caller decides which
    error code that means.
    """

    def __init__(self, binary: str = "terminus", *, timeout: float | None = None) -> None:
        self._binary = binary
        self._timeout = timeout

    def _run(self, *args: str) -> subprocess.CompletedProcess[str]:
        """Run a terminus command. Raises on failure."""
        return subprocess.run(
            [self._binary, *args],
            capture_output=True,
            text=True,
            check=True,
            timeout=self._timeout,
        )

    def _succeeds(self, *args: str) -> bool:
        try:
            self._run(*args)
        except (OSError, subprocess.SubprocessError) as exc:
            logger.debug("terminus %s failed: %s", args[0], exc)
            return False
        return True

    def version(self) -> bool:
        """True if the terminus binary is installed and runs."""
        return self._succeeds("--version")

    def site_info(self, site: str) -> bool:
        """True if *site* is visible to the authenticated terminus user."""
        return self._succeeds("site:info", site)

    def create_backup(self, site_env: str, *, keep_for: int = 1) -> bool:
        """Request a fresh database-only backup of *site_env*."""
        return self._succeeds(
            "backup:create",
            site_env,
            "--element=db",
            f"--keep-for={keep_for}",
            "--yes",
        )

    def backup_url(self, site_env: str) -> str | None:
        """Signed download URL of the latest database backup, or None."""
        try:
            result = self._run("backup:get", site_env, "--element=db")
        except (OSError, subprocess.SubprocessError) as exc:
            logger.debug("terminus backup:get failed: %s", exc)
            return None
        url = result.stdout.strip()
        return url or None
