"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import UTC, datetime


def now_compact() -> str:
    """Current UTC time as compact ISO (YYYYMMDDTHHmmss, for artifact filenames)."""
    return datetime.now(UTC).strftime("%Y%m%dT%H%M%S")
