from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from taskhub.core.core import Service
from taskhub.core.modules.comment.models import Comment
from taskhub.core.pagination import PaginationResult
from taskhub.errors import ValidationError

logger = structlog.get_logger(__name__)


class CommentService(Service):
    """Manages comments on tasks."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("comments")

    async def on_start(self) -> None:
        await self._collection.create_index([("task_id", 1), ("created_at", 1)])

    async def create_comment(self, task_id: UUID, user_id: UUID, body: str) -> Comment:
        if not body.strip():
            raise ValidationError("Comment body is required")

        comment = Comment(task_id=task_id, user_id=user_id, body=body)
        await self._collection.insert_one(comment.to_mongo())
        logger.debug("comment_created", task_id=str(task_id), comment_id=str(comment.id))
        return comment

    async def get_task_comments(self, task_id: UUID, limit: int = 50, offset: int = 0) -> PaginationResult[Comment]:
        """Get paginated comments for a task, oldest first."""
        query = {"task_id": task_id}
        total = await self._collection.count_documents(query)
        cursor = self._collection.find(query).sort("created_at", 1).skip(offset).limit(limit)
        items = await Comment.list_cursor(cursor)

        return PaginationResult(items=items, total=total, limit=limit, offset=offset)
