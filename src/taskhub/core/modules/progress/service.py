from datetime import datetime
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from taskhub.core.core import Service
from taskhub.core.modules.progress.models import TaskProgress
from taskhub.errors import ValidationError

logger = structlog.get_logger(__name__)


class ProgressService(Service):
    """Stores progress updates for tasks."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("task_progress")

    async def on_start(self) -> None:
        await self._collection.create_index([("task_id", 1), ("created_at", -1)])

    async def list_progress(self, task_id: UUID) -> list[TaskProgress]:
        """List progress updates of a task, newest first."""
        cursor = self._collection.find({"task_id": task_id}).sort("created_at", -1)
        return await TaskProgress.list_cursor(cursor)

    async def add_progress(
        self, task_id: UUID, user_id: UUID, progress: int, description: str | None, end_time: datetime
    ) -> TaskProgress:
        if not 0 <= progress <= 100:
            raise ValidationError("Progress must be between 0 and 100")

        entry = TaskProgress(task_id=task_id, user_id=user_id, progress=progress, description=description, end_time=end_time)
        await self._collection.insert_one(entry.to_mongo())
        logger.debug("task_progress_added", task_id=str(task_id), progress=progress)
        return entry
