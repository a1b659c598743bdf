from datetime import datetime
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from taskhub.core.core import Service
from taskhub.core.modules.project.models import Project
from taskhub.core.modules.task.models import Task, TaskPriority, TaskStatus, is_transition_allowed
from taskhub.errors import NotFoundError, ValidationError
from taskhub.utils import now

logger = structlog.get_logger(__name__)

TITLE_MAX_LENGTH = 200


class TaskService(Service):
    """Manages tasks and their status workflow."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("tasks")

    async def on_start(self) -> None:
        await self._collection.create_index([("project_id", 1)])
        await self._collection.create_index([("created_at", 1)])

    async def get_task(self, task_id: UUID) -> Task:
        task = await Task.find_one(self._collection, {"_id": task_id})
        if task is None:
            raise NotFoundError(f"Task '{task_id}' not found")
        return task

    async def list_project_tasks(self, project_id: UUID) -> list[Task]:
        """List tasks of a project, newest first."""
        cursor = self._collection.find({"project_id": project_id}).sort("created_at", -1)
        return await Task.list_cursor(cursor)

    async def create_task(
        self,
        project: Project,
        creator_id: UUID,
        title: str,
        description: str | None,
        priority: TaskPriority,
        due_date: datetime | None,
        assignee_ids: list[UUID],
    ) -> Task:
        """Create a task; assignees must be members of the project."""
        title = title.strip()
        if not title or len(title) > TITLE_MAX_LENGTH:
            raise ValidationError(f"Task title must be 1 to {TITLE_MAX_LENGTH} characters")
        for assignee_id in assignee_ids:
            if not project.has_member(assignee_id):
                raise ValidationError(f"Assignee '{assignee_id}' is not a member of this project")

        task = Task(
            project_id=project.id,
            workspace_id=project.workspace_id,
            title=title,
            description=description,
            priority=priority,
            due_date=due_date,
            created_by=creator_id,
            assignee_ids=list(dict.fromkeys(assignee_ids)),
        )
        await self._collection.insert_one(task.to_mongo())
        logger.info("task_created", task_id=str(task.id), project_id=str(project.id))
        return task

    async def update_status(self, task_id: UUID, status: TaskStatus) -> Task:
        """Move a task to a new status following the allowed transitions."""
        task = await self.get_task(task_id)
        if not is_transition_allowed(task.status, status):
            raise ValidationError(f"Cannot change task status from '{task.status.label}' to '{status.label}'")

        await self._collection.update_one({"_id": task_id}, {"$set": {"status": int(status), "updated_at": now()}})
        logger.debug("task_status_changed", task_id=str(task_id), status=int(status))
        return await self.get_task(task_id)
