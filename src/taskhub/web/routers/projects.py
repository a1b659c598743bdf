from datetime import datetime
from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, Field

from taskhub.core.modules.project.models import Project
from taskhub.core.modules.task.models import Task, TaskPriority
from taskhub.web.deps import AppDep, IdentityDep
from taskhub.web.openapi import ErrorResponse

router = APIRouter(tags=["projects"])


class CreateProjectRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=100, description="Project title")
    description: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None


class AddProjectMemberRequest(BaseModel):
    email: str = Field(..., min_length=1, description="Email of a workspace member")


class CreateTaskRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200, description="Task title")
    description: str | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: datetime | None = None
    assignee_ids: list[UUID] = Field(default_factory=list, description="Project members to assign")


@router.post(
    "/projects/{project_id}/members",
    summary="Add project member",
    operation_id="addProjectMember",
    status_code=201,
    responses={
        400: {"model": ErrorResponse, "description": "User is not a workspace member"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Not a member of this project"},
        404: {"model": ErrorResponse, "description": "Project or user not found"},
        409: {"model": ErrorResponse, "description": "Already a member"},
    },
)
async def add_project_member(
    project_id: UUID, data: AddProjectMemberRequest, app: AppDep, identity: IdentityDep
) -> Project:
    return await app.add_project_member(identity, project_id, data.email)


@router.get(
    "/projects/{project_id}/tasks",
    summary="List project tasks",
    operation_id="listTasks",
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Not a member of this project"},
        404: {"model": ErrorResponse, "description": "Project not found"},
    },
)
async def list_tasks(project_id: UUID, app: AppDep, identity: IdentityDep) -> list[Task]:
    return await app.get_project_tasks(identity, project_id)


@router.post(
    "/projects/{project_id}/tasks",
    summary="Create task",
    operation_id="createTask",
    status_code=201,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Not a member of this project"},
        404: {"model": ErrorResponse, "description": "Project not found"},
    },
)
async def create_task(project_id: UUID, data: CreateTaskRequest, app: AppDep, identity: IdentityDep) -> Task:
    return await app.create_task(
        identity, project_id, data.title, data.description, data.priority, data.due_date, data.assignee_ids
    )
