"""Stable, machine-readable error codes reported by pansync operations."""

from __future__ import annotations

from enum import StrEnum


class SyncError(StrEnum):
    """Failure codes of the ``pantheon-sync`` pipeline."""

    TERMINUS_NOT_FOUND = "PANTHEON_TERMINUS_NOT_FOUND"
    SITE_NOT_ACCESSIBLE = "PANTHEON_SITE_NOT_ACCESSIBLE"
    INVALID_ENV = "PANTHEON_INVALID_ENV"
    BACKUP_FAILED = "PANTHEON_BACKUP_FAILED"
    DOWNLOAD_FAILED = "PANTHEON_DOWNLOAD_FAILED"
    IMPORT_FAILED = "PANTHEON_IMPORT_FAILED"


class SqlError(StrEnum):
    """Failure codes of the local ``sql-*`` commands."""

    NO_INPUT = "SQL_NO_INPUT"
    FILE_NOT_FOUND = "SQL_FILE_NOT_FOUND"
    QUERY_FAILED = "SQL_QUERY_FAILED"
    DROP_FAILED = "SQL_DROP_FAILED"
