from datetime import datetime
from uuid import UUID

from pydantic import Field

from taskhub.core.db import MongoModel
from taskhub.utils import now


class TaskRequirement(MongoModel):
    """Checklist item of a task.

    Indexed on (task_id, order).
    """

    task_id: UUID
    body: str
    order: int = Field(0, ge=0)
    is_done: bool = False
    created_by: UUID
    created_at: datetime = Field(default_factory=now)


def progress_percentage(requirements: list[TaskRequirement]) -> int:
    """Percentage of done requirements, 0 when there are none."""
    if not requirements:
        return 0
    done = sum(1 for requirement in requirements if requirement.is_done)
    return round(done / len(requirements) * 100)
