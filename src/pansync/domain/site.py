"""Site references and snapshot artifacts for a single sync invocation.

INVARIANT: A SiteReference can only exist for an allow-listed environment.
Nothing in the sync pipeline runs before that is established.
"""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel


class Environment(StrEnum):
    """Pantheon environments a snapshot may be pulled from."""

    DEV = "dev"
    TEST = "test"
    LIVE = "live"


ALLOWED_ENVIRONMENTS: tuple[str, ...] = tuple(e.value for e in Environment)


def is_allowed_environment(name: str) -> bool:
    """True if *name* is one of ``dev``, ``test`` or ``live``."""
    return name in ALLOWED_ENVIRONMENTS


class SiteReference(BaseModel):
    """A Pantheon site plus one of its environments."""

    model_config = {"frozen": True}

    site: str
    env: Environment

    @property
    def composite(self) -> str:
        """The ``site.env`` identifier terminus expects."""
        return f"{self.site}.{self.env.value}"


class SnapshotArtifact(BaseModel):
    """A database backup downloaded (or about to be) to local disk."""

    model_config = {"frozen": True}

    remote_id: str
    path: Path

    @property
    def exists(self) -> bool:
        """Present on disk and non-empty."""
        return self.path.is_file() and self.path.stat().st_size > 0


def artifact_path(temp_dir: Path, ref: SiteReference, stamp: str) -> Path:
    """Build the download destination for *ref*.

    ``{temp_dir}/{site}.{env}-{stamp}.sql.gz`` keeps repeated pulls of the
    same environment from colliding.
    """
    return temp_dir / f"{ref.composite}-{stamp}.sql.gz"
