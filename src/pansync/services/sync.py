"""SyncService — pull a Pantheon database backup into the local database.

Pipeline: VALIDATE → CONFIRM → BACKUP → DOWNLOAD → IMPORT

Each phase only runs if the previous one succeeded. The first failure ends
the run with a specific error code; nothing is retried and nothing is
rolled back. If the import fails after the drop, the local database stays
empty.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
from sqlalchemy.exc import SQLAlchemyError

from pansync.domain.codes import SyncError
from pansync.domain.site import (
    ALLOWED_ENVIRONMENTS,
    Environment,
    SiteReference,
    SnapshotArtifact,
    artifact_path,
    is_allowed_environment,
)
from pansync.infrastructure.database import DatabaseError
from pansync.services._helpers import now_compact
from pansync.services.base import BaseService
from pansync.services.result import ServiceResult, declined, failure

logger = logging.getLogger(__name__)

OP = "pantheon_sync"
IMPORT_COMMAND = "sql-query"

Confirm = Callable[[str], bool]


class SyncService(BaseService):
    """Orchestrates a single snapshot pull. Holds no state between runs."""

    # ------------------------------------------------------------------
    # Validate
    # ------------------------------------------------------------------

    def validate(self, site: str, env: str) -> ServiceResult:
        """Check the environment, terminus, and site access, in that order.

        The environment check is local, so an invalid name fails before
        any process is started.
        """
        if not is_allowed_environment(env):
            return failure(
                OP,
                SyncError.INVALID_ENV,
                f"Invalid environment '{env}'. Valid environments: "
                f"{', '.join(ALLOWED_ENVIRONMENTS)}.",
                env=env,
            )

        terminus = self._project.terminus
        if not terminus.version():
            return failure(
                OP,
                SyncError.TERMINUS_NOT_FOUND,
                "Terminus is not installed or not on PATH.",
                binary=self._settings.terminus.binary,
            )

        if not terminus.site_info(site):
            return failure(
                OP,
                SyncError.SITE_NOT_ACCESSIBLE,
                f"Site '{site}' is not accessible. Check that it exists and "
                "that terminus is logged in.",
                site=site,
            )

        ref = SiteReference(site=site, env=Environment(env))
        return ServiceResult(
            ok=True,
            op="validate",
            data={"site": ref.site, "env": ref.env.value, "remote_id": ref.composite},
        )

    # ------------------------------------------------------------------
    # Fetch
    # ------------------------------------------------------------------

    def fetch(self, ref: SiteReference, dest: Path) -> ServiceResult:
        """Create a fresh database backup and download it to *dest*.

        The file check after the download is authoritative: a download
        that reports success without leaving a non-empty file is a failure.
        """
        terminus = self._project.terminus
        keep_for = self._settings.sync.keep_for

        logger.info("Creating database backup of %s", ref.composite)
        if not terminus.create_backup(ref.composite, keep_for=keep_for):
            return failure(
                OP,
                SyncError.BACKUP_FAILED,
                f"Could not create a database backup of {ref.composite}.",
                remote_id=ref.composite,
            )

        logger.info("Downloading backup of %s to %s", ref.composite, dest)
        url = terminus.backup_url(ref.composite)
        if url is None:
            return failure(
                OP,
                SyncError.DOWNLOAD_FAILED,
                f"Could not get a download URL for the {ref.composite} backup.",
                remote_id=ref.composite,
            )

        try:
            self._project.downloader.fetch(url, dest)
        except (httpx.HTTPError, OSError) as exc:
            dest.unlink(missing_ok=True)
            return failure(
                OP,
                SyncError.DOWNLOAD_FAILED,
                f"Downloading the {ref.composite} backup failed: {exc}",
                remote_id=ref.composite,
                path=str(dest),
            )

        artifact = SnapshotArtifact(remote_id=ref.composite, path=dest)
        if not artifact.exists:
            dest.unlink(missing_ok=True)
            return failure(
                OP,
                SyncError.DOWNLOAD_FAILED,
                f"Download of {ref.composite} reported success but {dest} "
                "is missing or empty.",
                remote_id=ref.composite,
                path=str(dest),
            )

        return ServiceResult(
            ok=True,
            op="fetch",
            data={"remote_id": ref.composite, "path": str(dest)},
        )

    # ------------------------------------------------------------------
    # Import
    # ------------------------------------------------------------------

    def import_options(self, artifact: SnapshotArtifact) -> dict[str, Any]:
        """Ambient options minus denied target selectors, plus the artifact."""
        options = self._settings.forwarding.filter(self._project.ambient_options)
        options["file"] = str(artifact.path)
        options["file_delete"] = True
        return options

    def import_snapshot(self, artifact: SnapshotArtifact) -> ServiceResult:
        """Drop (or create) the local database and load *artifact* into it.

        The load runs as a ``sql-query --file-delete`` sub-invocation,
        which reports its own errors and removes the artifact.
        """
        db = self._project.database

        logger.info("Dropping local database %s", db.name)
        try:
            action = db.drop_or_create()
        except (DatabaseError, SQLAlchemyError, OSError) as exc:
            # The import never starts, so nothing else removes the artifact.
            artifact.path.unlink(missing_ok=True)
            return failure(
                OP,
                SyncError.IMPORT_FAILED,
                f"Could not drop or create local database '{db.name}': {exc}",
                database=db.name,
            )
        finally:
            db.dispose()

        logger.info("Importing %s into %s", artifact.path.name, db.name)
        outcome = self._project.dispatcher.dispatch(
            IMPORT_COMMAND, self.import_options(artifact)
        )
        if not outcome.ok:
            return failure(
                OP,
                SyncError.IMPORT_FAILED,
                f"Importing {artifact.remote_id} into '{db.name}' failed.",
                database=db.name,
                returncode=outcome.returncode,
            )

        return ServiceResult(
            ok=True,
            op="import",
            data={"database": db.name, "database_action": action},
        )

    # ------------------------------------------------------------------
    # Full pipeline
    # ------------------------------------------------------------------

    def sync(self, site: str, env: str, *, confirm: Confirm) -> ServiceResult:
        """VALIDATE → CONFIRM → BACKUP → DOWNLOAD → IMPORT.

        *confirm* receives the prompt text and returns the user's answer.
        A declined prompt is not an error: the result is ``ok`` with
        ``aborted`` set and nothing has been touched.
        """
        checked = self.validate(site, env)
        if not checked.ok:
            return checked

        ref = SiteReference(site=site, env=Environment(env))
        dest = artifact_path(self._project.temp_dir(), ref, now_compact())
        db_name = self._project.database.name

        question = (
            f"Replace local database '{db_name}' with a fresh backup of "
            f"{ref.composite}, downloaded to {dest}?"
        )
        if not confirm(question):
            logger.info("Aborted by user")
            return declined(OP, remote_id=ref.composite, database=db_name)

        fetched = self.fetch(ref, dest)
        if not fetched.ok:
            return fetched

        artifact = SnapshotArtifact(remote_id=ref.composite, path=dest)
        imported = self.import_snapshot(artifact)
        if not imported.ok:
            return imported

        logger.info("Local database %s now matches %s", db_name, ref.composite)
        return ServiceResult(
            ok=True,
            op=OP,
            data={
                "aborted": False,
                "site": ref.site,
                "env": ref.env.value,
                "remote_id": ref.composite,
                "database": db_name,
                "database_action": imported.data["database_action"],
                "path": str(dest),
            },
        )
