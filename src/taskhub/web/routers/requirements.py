from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, Field

from taskhub.core.modules.requirement.models import TaskRequirement
from taskhub.web.deps import AppDep, IdentityDep
from taskhub.web.openapi import ErrorResponse

router = APIRouter(tags=["requirements"])

ACCESS_RESPONSES: dict[int | str, dict[str, object]] = {
    401: {"model": ErrorResponse, "description": "Not authenticated"},
    403: {"model": ErrorResponse, "description": "Not a member of the task's project"},
    404: {"model": ErrorResponse, "description": "Task not found"},
}


class CreateRequirementRequest(BaseModel):
    body: str = Field(..., min_length=1, description="Requirement text")
    order: int | None = Field(None, ge=0, description="Position; defaults to after the last requirement")
    is_done: bool = False


class UpdateRequirementRequest(BaseModel):
    is_done: bool


@router.get("/tasks/{task_id}/requirements", summary="List requirements", operation_id="listRequirements", responses=ACCESS_RESPONSES)
async def list_requirements(task_id: UUID, app: AppDep, identity: IdentityDep) -> list[TaskRequirement]:
    return await app.get_task_requirements(identity, task_id)


@router.post(
    "/tasks/{task_id}/requirements",
    summary="Add requirement",
    operation_id="createRequirement",
    status_code=201,
    responses=ACCESS_RESPONSES,
)
async def create_requirement(
    task_id: UUID, data: CreateRequirementRequest, app: AppDep, identity: IdentityDep
) -> TaskRequirement:
    return await app.create_task_requirement(identity, task_id, data.body, data.order, data.is_done)


@router.patch(
    "/tasks/{task_id}/requirements/{requirement_id}",
    summary="Mark requirement done or not done",
    operation_id="updateRequirement",
    responses=ACCESS_RESPONSES,
)
async def update_requirement(
    task_id: UUID, requirement_id: UUID, data: UpdateRequirementRequest, app: AppDep, identity: IdentityDep
) -> TaskRequirement:
    return await app.set_task_requirement_done(identity, task_id, requirement_id, data.is_done)
