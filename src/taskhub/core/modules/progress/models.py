from datetime import datetime
from uuid import UUID

from pydantic import Field

from taskhub.core.db import MongoModel
from taskhub.utils import now


class TaskProgress(MongoModel):
    """Progress update posted by a task participant."""

    task_id: UUID
    user_id: UUID
    progress: int = Field(..., ge=0, le=100)
    description: str | None = None
    end_time: datetime
    created_at: datetime = Field(default_factory=now)
