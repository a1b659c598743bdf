from datetime import datetime
from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, Field

from taskhub.core.modules.progress.models import TaskProgress
from taskhub.web.deps import AppDep, IdentityDep
from taskhub.web.openapi import ErrorResponse

router = APIRouter(tags=["progress"])


class CreateProgressRequest(BaseModel):
    progress: int = Field(..., ge=0, le=100, description="Completion percentage")
    description: str | None = None
    end_time: datetime = Field(..., description="When the reported work ended")


@router.get(
    "/tasks/{task_id}/progress",
    summary="List progress updates",
    operation_id="listProgress",
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Not a member of the task's project"},
        404: {"model": ErrorResponse, "description": "Task not found"},
    },
)
async def list_progress(task_id: UUID, app: AppDep, identity: IdentityDep) -> list[TaskProgress]:
    return await app.get_task_progress(identity, task_id)


@router.post(
    "/tasks/{task_id}/progress",
    summary="Post progress update",
    operation_id="createProgress",
    status_code=201,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Not a member of the task's project"},
        404: {"model": ErrorResponse, "description": "Task not found"},
    },
)
async def create_progress(task_id: UUID, data: CreateProgressRequest, app: AppDep, identity: IdentityDep) -> TaskProgress:
    return await app.add_task_progress(identity, task_id, data.progress, data.description, data.end_time)
