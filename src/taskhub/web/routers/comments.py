"""Comment-related API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from taskhub.core.modules.comment.models import Comment
from taskhub.core.pagination import PaginationResult
from taskhub.web.deps import AppDep, IdentityDep
from taskhub.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["comments"])


class CreateCommentRequest(BaseModel):
    """Request to create a new comment."""

    body: str = Field(..., description="The comment text", min_length=1)


@router.get(
    "/tasks/{task_id}/comments",
    summary="List task comments",
    description="Get paginated comments for a task, oldest first. Only project members can view comments.",
    operation_id="listComments",
    responses={
        200: {"description": "Paginated list of comments"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Not a member of the task's project"},
        404: {"model": ErrorResponse, "description": "Task not found"},
    },
)
async def list_comments(
    task_id: UUID,
    app: AppDep,
    identity: IdentityDep,
    limit: Annotated[int, Query(ge=1, description="Maximum items to return")] = 50,
    offset: Annotated[int, Query(ge=0, description="Number of items to skip")] = 0,
) -> PaginationResult[Comment]:
    return await app.get_task_comments(identity, task_id, limit, offset)


@router.post(
    "/tasks/{task_id}/comments",
    summary="Create comment",
    description="Add a comment to a task. Only project members can comment.",
    operation_id="createComment",
    status_code=201,
    responses={
        201: {"description": "Comment created successfully"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Not a member of the task's project"},
        404: {"model": ErrorResponse, "description": "Task not found"},
    },
)
async def create_comment(task_id: UUID, request: CreateCommentRequest, app: AppDep, identity: IdentityDep) -> Comment:
    return await app.create_comment(identity, task_id, request.body)
