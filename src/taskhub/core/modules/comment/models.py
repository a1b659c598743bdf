from datetime import datetime
from uuid import UUID

from pydantic import Field

from taskhub.core.db import MongoModel
from taskhub.utils import now


class Comment(MongoModel):
    """Comment on a task."""

    task_id: UUID
    user_id: UUID
    body: str
    created_at: datetime = Field(default_factory=now)
