from typing import Any
from uuid import UUID

from pymongo.asynchronous.database import AsyncDatabase

from taskhub.core.core import Service
from taskhub.core.modules.requirement.models import TaskRequirement
from taskhub.errors import NotFoundError, ValidationError


class RequirementService(Service):
    """Manages task requirement checklists."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("task_requirements")

    async def on_start(self) -> None:
        await self._collection.create_index([("task_id", 1), ("order", 1)])

    async def list_requirements(self, task_id: UUID) -> list[TaskRequirement]:
        cursor = self._collection.find({"task_id": task_id}).sort("order", 1)
        return await TaskRequirement.list_cursor(cursor)

    async def create_requirement(
        self, task_id: UUID, creator_id: UUID, body: str, order: int | None = None, is_done: bool = False
    ) -> TaskRequirement:
        """Append a requirement; order defaults to the next position."""
        if not body.strip():
            raise ValidationError("Requirement body is required")
        if order is None:
            last = await self._collection.find_one({"task_id": task_id}, sort=[("order", -1)])
            order = 0 if last is None else last["order"] + 1

        requirement = TaskRequirement(task_id=task_id, body=body.strip(), order=order, is_done=is_done, created_by=creator_id)
        await self._collection.insert_one(requirement.to_mongo())
        return requirement

    async def set_done(self, task_id: UUID, requirement_id: UUID, is_done: bool) -> TaskRequirement:
        result = await self._collection.update_one({"_id": requirement_id, "task_id": task_id}, {"$set": {"is_done": is_done}})
        if result.matched_count == 0:
            raise NotFoundError(f"Requirement '{requirement_id}' not found")
        requirement = await TaskRequirement.find_one(self._collection, {"_id": requirement_id})
        if requirement is None:
            raise NotFoundError(f"Requirement '{requirement_id}' not found")
        return requirement
