from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, cast
from urllib.parse import urlparse

import structlog
from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from taskhub.config import Config

if TYPE_CHECKING:
    from taskhub.core.modules.access.service import AccessService
    from taskhub.core.modules.comment.service import CommentService
    from taskhub.core.modules.progress.service import ProgressService
    from taskhub.core.modules.project.service import ProjectService
    from taskhub.core.modules.requirement.service import RequirementService
    from taskhub.core.modules.session.service import SessionService
    from taskhub.core.modules.task.service import TaskService
    from taskhub.core.modules.user.service import UserService
    from taskhub.core.modules.workspace.service import WorkspaceService

logger = structlog.get_logger(__name__)

# (attribute, "module:Class"); started in this order, stopped in reverse.
# Users and workspaces are cached in memory and must load before anything checks membership.
SERVICE_REGISTRY: tuple[tuple[str, str], ...] = (
    ("user", "taskhub.core.modules.user.service:UserService"),
    ("workspace", "taskhub.core.modules.workspace.service:WorkspaceService"),
    ("session", "taskhub.core.modules.session.service:SessionService"),
    ("access", "taskhub.core.modules.access.service:AccessService"),
    ("project", "taskhub.core.modules.project.service:ProjectService"),
    ("task", "taskhub.core.modules.task.service:TaskService"),
    ("requirement", "taskhub.core.modules.requirement.service:RequirementService"),
    ("progress", "taskhub.core.modules.progress.service:ProgressService"),
    ("comment", "taskhub.core.modules.comment.service:CommentService"),
)


class Service:
    """A unit of domain logic with its own collections and lifecycle hooks."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self.database = database
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Create indexes, warm caches."""

    async def on_stop(self) -> None:
        pass

    @property
    def core(self) -> Core:
        """Sibling services and config; available once the Core is built."""
        if self._core is None:
            raise RuntimeError(f"{type(self).__name__} is not attached to a Core")
        return self._core

    def set_core(self, core: Core) -> None:
        self._core = core


def _load_service_class(target: str) -> type[Service]:
    module_path, class_name = target.split(":")
    return cast(type[Service], getattr(importlib.import_module(module_path), class_name))


class Services:
    """Instances of every registered service, reachable as attributes."""

    user: UserService
    workspace: WorkspaceService
    session: SessionService
    access: AccessService
    project: ProjectService
    task: TaskService
    requirement: RequirementService
    progress: ProgressService
    comment: CommentService

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self._ordered: list[Service] = []
        for name, target in SERVICE_REGISTRY:
            service = _load_service_class(target)(database)
            setattr(self, name, service)
            self._ordered.append(service)

    def set_core(self, core: Core) -> None:
        for service in self._ordered:
            service.set_core(core)

    async def start_all(self) -> None:
        for service in self._ordered:
            await service.on_start()

    async def stop_all(self) -> None:
        for service in reversed(self._ordered):
            await service.on_stop()


class Core:
    """Owns the MongoDB client and the service registry.

    The database name is taken from the path of `database_url`.
    """

    config: Config
    mongo_client: AsyncMongoClient[dict[str, Any]]
    database: AsyncDatabase[dict[str, Any]]
    services: Services

    def __init__(self, config: Config) -> None:
        self.config = config
        self.mongo_client = AsyncMongoClient(config.database_url, uuidRepresentation="standard", tz_aware=True)
        self.database = self.mongo_client.get_database(urlparse(config.database_url).path.lstrip("/"))
        self.services = Services(self.database)
        self.services.set_core(self)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        await self.services.start_all()
        logger.info("core_started", database=self.database.name)
        try:
            yield
        finally:
            await self.services.stop_all()
            await self.mongo_client.aclose()
            logger.info("core_stopped")
