"""Task models with status workflow and priority levels."""

from datetime import datetime
from enum import IntEnum
from uuid import UUID

from pydantic import Field

from taskhub.core.db import MongoModel
from taskhub.utils import now


class TaskStatus(IntEnum):
    TODO = 0
    IN_PROGRESS = 1
    DONE = 2
    REJECTED = 3
    COMPLETED = 4

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]


class TaskPriority(IntEnum):
    LOW = 0
    MEDIUM = 1
    HIGH = 2
    URGENT = 3


STATUS_LABELS: dict[TaskStatus, str] = {
    TaskStatus.TODO: "To Do",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.DONE: "Done",
    TaskStatus.REJECTED: "Rejected",
    TaskStatus.COMPLETED: "Completed",
}

# Allowed status transitions: from -> {to}
STATUS_TRANSITIONS: dict[TaskStatus, frozenset[TaskStatus]] = {
    TaskStatus.TODO: frozenset({TaskStatus.IN_PROGRESS, TaskStatus.REJECTED}),
    TaskStatus.IN_PROGRESS: frozenset({TaskStatus.TODO, TaskStatus.DONE, TaskStatus.REJECTED}),
    TaskStatus.DONE: frozenset({TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED}),
    TaskStatus.REJECTED: frozenset({TaskStatus.TODO}),
    TaskStatus.COMPLETED: frozenset({TaskStatus.IN_PROGRESS}),
}


def allowed_transitions(current: TaskStatus) -> list[TaskStatus]:
    return sorted(STATUS_TRANSITIONS[current])


def is_transition_allowed(current: TaskStatus, target: TaskStatus) -> bool:
    return target in STATUS_TRANSITIONS[current]


class Task(MongoModel):
    """Unit of work inside a project.

    Indexed on project_id.
    """

    project_id: UUID
    workspace_id: UUID
    title: str
    description: str | None = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: datetime | None = None
    created_by: UUID
    assignee_ids: list[UUID] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)

    def is_overdue(self, at: datetime) -> bool:
        return self.due_date is not None and at > self.due_date


class TaskDetail(Task):
    """Task with computed requirement progress (API representation)."""

    progress: int = Field(0, ge=0, le=100, description="Percentage of requirements done")
