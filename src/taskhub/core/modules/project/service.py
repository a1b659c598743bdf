from datetime import datetime
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from taskhub.core.core import Service
from taskhub.core.modules.project.models import Project, ProjectMember
from taskhub.errors import ConflictError, NotFoundError, ValidationError

logger = structlog.get_logger(__name__)

TITLE_MAX_LENGTH = 100


class ProjectService(Service):
    """Manages projects and their member lists."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("projects")

    async def on_start(self) -> None:
        await self._collection.create_index([("workspace_id", 1)])
        await self._collection.create_index([("members.user_id", 1)])

    async def get_project(self, project_id: UUID) -> Project:
        project = await Project.find_one(self._collection, {"_id": project_id})
        if project is None:
            raise NotFoundError(f"Project '{project_id}' not found")
        return project

    async def list_workspace_projects(self, workspace_id: UUID) -> list[Project]:
        """List projects in a workspace, newest first."""
        cursor = self._collection.find({"workspace_id": workspace_id}).sort("created_at", -1)
        return await Project.list_cursor(cursor)

    async def create_project(
        self,
        workspace_id: UUID,
        title: str,
        description: str | None,
        start_date: datetime | None,
        end_date: datetime | None,
        creator_id: UUID,
    ) -> Project:
        """Create a project with the creator as its manager."""
        title = title.strip()
        if not title or len(title) > TITLE_MAX_LENGTH:
            raise ValidationError(f"Project title must be 1 to {TITLE_MAX_LENGTH} characters")
        if start_date and end_date and end_date < start_date:
            raise ValidationError("Project end date must not be before its start date")

        project = Project(
            workspace_id=workspace_id,
            title=title,
            description=description,
            start_date=start_date,
            end_date=end_date,
            created_by=creator_id,
            members=[ProjectMember(user_id=creator_id, is_manager=True)],
        )
        await self._collection.insert_one(project.to_mongo())
        logger.info("project_created", project_id=str(project.id), workspace_id=str(workspace_id))
        return project

    async def add_member(self, project_id: UUID, user_id: UUID) -> Project:
        """Add a workspace member to a project."""
        project = await self.get_project(project_id)
        workspace = self.core.services.workspace.get_workspace(project.workspace_id)
        if not workspace.has_member(user_id):
            raise ValidationError("User must be a member of the project's workspace")
        if project.has_member(user_id):
            raise ConflictError("User is already a member of this project")

        member = ProjectMember(user_id=user_id)
        await self._collection.update_one({"_id": project_id}, {"$push": {"members": member.model_dump()}})
        return await self.get_project(project_id)
