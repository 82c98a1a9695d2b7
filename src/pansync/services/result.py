"""ServiceResult: what every service operation returns.

The CLI renders it, and ``--json`` serializes it, which is also how a
parent process reads the outcome of a ``sql-query`` sub-invocation.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Stable ``code``, human ``message``, and machine-readable ``detail``."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one operation.

    ``error`` is set exactly when ``ok`` is False. ``warnings`` are
    non-fatal notes shown on stderr in human output.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None


def failure(op: str, code: str, message: str, **detail: Any) -> ServiceResult:
    """A failed result; *detail* keyword arguments land in ``error.detail``."""
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code=str(code), message=message, detail=detail),
    )


def declined(op: str, **data: Any) -> ServiceResult:
    """The user answered no to a confirmation: nothing was changed."""
    return ServiceResult(
        ok=True,
        op=op,
        data={"aborted": True, **data},
        warnings=["Aborted: local database left unchanged"],
    )
