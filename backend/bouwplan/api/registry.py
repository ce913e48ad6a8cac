"""In-memory project registry for the HTTP layer."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING

from bouwplan.exceptions import UnknownEntity
from bouwplan.factory import create_project_service

if TYPE_CHECKING:
    from collections.abc import Iterator

    from bouwplan.config import Settings
    from bouwplan.models.configuration import BuildConfiguration
    from bouwplan.service import ProjectService

logger = logging.getLogger(__name__)


class ProjectRegistry:
    """Holds the live projects, one lock per project id.

    The engines themselves are single-owner; every command issued through
    the API runs inside ``locked(project_id)`` so that concurrent requests
    for the same project are serialised.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings
        self._services: dict[str, ProjectService] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def create(
        self,
        name: str = "Nieuw project",
        configuration: BuildConfiguration | None = None,
    ) -> ProjectService:
        service = create_project_service(settings=self._settings, name=name)
        if configuration is not None:
            service.set_configuration(configuration)
        return self.add(service)

    def add(self, service: ProjectService) -> ProjectService:
        with self._guard:
            self._services[service.project_id] = service
            self._locks[service.project_id] = threading.Lock()
        logger.info("Project %s (%s) registered", service.project_id, service.state.name)
        return service

    def get(self, project_id: str) -> ProjectService:
        with self._guard:
            service = self._services.get(project_id)
        if service is None:
            raise UnknownEntity("project", project_id)
        return service

    @contextmanager
    def locked(self, project_id: str) -> Iterator[ProjectService]:
        service = self.get(project_id)
        with self._locks[project_id]:
            yield service

    def __len__(self) -> int:
        return len(self._services)

    def __contains__(self, project_id: object) -> bool:
        return project_id in self._services
