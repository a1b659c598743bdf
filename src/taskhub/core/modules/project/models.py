from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from taskhub.core.db import MongoModel
from taskhub.utils import now


class ProjectMember(BaseModel):
    user_id: UUID
    is_manager: bool = False
    joined_at: datetime = Field(default_factory=now)


class Project(MongoModel):
    """Project inside a workspace; tasks belong to projects.

    Indexed on workspace_id.
    """

    workspace_id: UUID
    title: str
    description: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    created_by: UUID
    members: list[ProjectMember] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)

    def has_member(self, user_id: UUID) -> bool:
        return any(member.user_id == user_id for member in self.members)
