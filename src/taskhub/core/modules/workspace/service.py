from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from taskhub.core.core import Service
from taskhub.core.modules.workspace.models import Workspace, WorkspaceMember
from taskhub.errors import ConflictError, NotFoundError, ValidationError

logger = structlog.get_logger(__name__)

TITLE_MAX_LENGTH = 100


class WorkspaceService(Service):
    """Service for managing workspaces with in-memory caching."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("workspaces")
        self._workspaces: dict[UUID, Workspace] = {}

    async def on_start(self) -> None:
        await self._collection.create_index([("members.user_id", 1)])
        await self.update_all_workspaces_cache()
        logger.debug("workspace_service_started", workspace_count=len(self._workspaces))

    async def update_all_workspaces_cache(self) -> None:
        """Reload all workspaces cache from database."""
        workspaces = await Workspace.list_cursor(self._collection.find())
        self._workspaces = {workspace.id: workspace for workspace in workspaces}

    async def update_workspace_cache(self, workspace_id: UUID) -> Workspace:
        """Reload a specific workspace cache from database."""
        workspace = await Workspace.find_one(self._collection, {"_id": workspace_id})
        if workspace is None:
            raise NotFoundError(f"Workspace '{workspace_id}' not found")
        self._workspaces[workspace_id] = workspace
        return workspace

    def get_workspace(self, workspace_id: UUID) -> Workspace:
        if workspace_id not in self._workspaces:
            raise NotFoundError(f"Workspace '{workspace_id}' not found")
        return self._workspaces[workspace_id]

    def get_workspaces_by_member(self, user_id: UUID) -> list[Workspace]:
        """Get all workspaces where the user is a member, most recently joined first."""
        workspaces = [ws for ws in self._workspaces.values() if ws.has_member(user_id)]
        return sorted(workspaces, key=lambda ws: ws.get_member(user_id).joined_at, reverse=True)  # type: ignore[union-attr]

    async def create_workspace(self, title: str, description: str | None, owner_id: UUID) -> Workspace:
        """Create a workspace with the creator as owner and admin."""
        title = title.strip()
        if not title or len(title) > TITLE_MAX_LENGTH:
            raise ValidationError(f"Workspace title must be 1 to {TITLE_MAX_LENGTH} characters")
        if not self.core.services.user.has_user(owner_id):
            raise ValidationError(f"User '{owner_id}' does not exist")

        workspace = Workspace(
            title=title,
            description=description,
            created_by=owner_id,
            members=[WorkspaceMember(user_id=owner_id, is_owner=True, is_admin=True)],
        )
        res = await self._collection.insert_one(workspace.to_mongo())
        logger.info("workspace_created", workspace_id=str(workspace.id), owner_id=str(owner_id))
        return await self.update_workspace_cache(res.inserted_id)

    async def add_member(self, workspace_id: UUID, user_id: UUID) -> Workspace:
        """Add a regular member to a workspace."""
        workspace = self.get_workspace(workspace_id)
        if not self.core.services.user.has_user(user_id):
            raise NotFoundError(f"User '{user_id}' not found")
        if workspace.has_member(user_id):
            raise ConflictError("User is already a member of this workspace")

        member = WorkspaceMember(user_id=user_id)
        await self._collection.update_one({"_id": workspace_id}, {"$push": {"members": member.model_dump()}})
        return await self.update_workspace_cache(workspace_id)
