"""BaseService — abstract foundation for all pansync services.

Every service receives a :class:`Project` at construction time. The Project
provides the settings and the external collaborators (terminus, HTTP,
local database, sub-invocations), so services never reach for global state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pansync.config.settings import PansyncSettings
    from pansync.infrastructure.project import Project


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class SqlService(BaseService):
            def drop(self) -> ServiceResult:
                db = self._project.database
                ...
    """

    def __init__(self, project: Project) -> None:
        self._project = project

    @property
    def _settings(self) -> PansyncSettings:
        return self._project.settings
