from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, Field

from taskhub.core.modules.project.models import Project
from taskhub.core.modules.workspace.models import Workspace, WorkspaceMemberView
from taskhub.web.deps import AppDep, IdentityDep
from taskhub.web.openapi import ErrorResponse
from taskhub.web.routers.projects import CreateProjectRequest

router = APIRouter(tags=["workspaces"])


class CreateWorkspaceRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=100, description="Workspace title")
    description: str | None = Field(None, description="Optional description")


class AddMemberRequest(BaseModel):
    email: str = Field(..., min_length=1, description="Email of a registered user")


@router.get(
    "/workspaces",
    summary="List my workspaces",
    operation_id="listWorkspaces",
    responses={401: {"model": ErrorResponse, "description": "Not authenticated"}},
)
async def list_workspaces(app: AppDep, identity: IdentityDep) -> list[Workspace]:
    return await app.get_workspaces(identity)


@router.post(
    "/workspaces",
    summary="Create workspace",
    description="Create a workspace; the current user becomes its owner and admin.",
    operation_id="createWorkspace",
    status_code=201,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def create_workspace(data: CreateWorkspaceRequest, app: AppDep, identity: IdentityDep) -> Workspace:
    return await app.create_workspace(identity, data.title, data.description)


@router.get(
    "/workspaces/{workspace_id}/users",
    summary="List workspace members",
    operation_id="listWorkspaceUsers",
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Not a member of this workspace"},
        404: {"model": ErrorResponse, "description": "Workspace not found"},
    },
)
async def list_workspace_users(workspace_id: UUID, app: AppDep, identity: IdentityDep) -> list[WorkspaceMemberView]:
    return await app.get_workspace_members(identity, workspace_id)


@router.post(
    "/workspaces/{workspace_id}/users",
    summary="Add workspace member",
    operation_id="addWorkspaceUser",
    status_code=201,
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Not a member of this workspace"},
        404: {"model": ErrorResponse, "description": "Workspace or user not found"},
        409: {"model": ErrorResponse, "description": "Already a member"},
    },
)
async def add_workspace_user(workspace_id: UUID, data: AddMemberRequest, app: AppDep, identity: IdentityDep) -> Workspace:
    return await app.add_workspace_member(identity, workspace_id, data.email)


@router.get(
    "/workspaces/{workspace_id}/projects",
    summary="List workspace projects",
    operation_id="listProjects",
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Not a member of this workspace"},
        404: {"model": ErrorResponse, "description": "Workspace not found"},
    },
)
async def list_projects(workspace_id: UUID, app: AppDep, identity: IdentityDep) -> list[Project]:
    return await app.get_workspace_projects(identity, workspace_id)


@router.post(
    "/workspaces/{workspace_id}/projects",
    summary="Create project",
    description="Create a project in the workspace; the current user becomes its manager.",
    operation_id="createProject",
    status_code=201,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Not a member of this workspace"},
        404: {"model": ErrorResponse, "description": "Workspace not found"},
    },
)
async def create_project(
    workspace_id: UUID, data: CreateProjectRequest, app: AppDep, identity: IdentityDep
) -> Project:
    return await app.create_project(identity, workspace_id, data.title, data.description, data.start_date, data.end_date)
