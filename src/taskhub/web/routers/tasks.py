from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel

from taskhub.core.modules.task.models import Task, TaskDetail, TaskStatus
from taskhub.web.deps import AppDep, IdentityDep
from taskhub.web.openapi import ErrorResponse

router = APIRouter(tags=["tasks"])


class UpdateTaskStatusRequest(BaseModel):
    status: TaskStatus


@router.get(
    "/tasks/{task_id}",
    summary="Get task",
    description="Get a task with the percentage of its requirements that are done.",
    operation_id="getTask",
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Not a member of the task's project"},
        404: {"model": ErrorResponse, "description": "Task not found"},
    },
)
async def get_task(task_id: UUID, app: AppDep, identity: IdentityDep) -> TaskDetail:
    return await app.get_task(identity, task_id)


@router.patch(
    "/tasks/{task_id}/status",
    summary="Change task status",
    operation_id="updateTaskStatus",
    responses={
        400: {"model": ErrorResponse, "description": "Transition not allowed"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Not a member of the task's project"},
        404: {"model": ErrorResponse, "description": "Task not found"},
    },
)
async def update_task_status(task_id: UUID, data: UpdateTaskStatusRequest, app: AppDep, identity: IdentityDep) -> Task:
    return await app.update_task_status(identity, task_id, data.status)
