"""Workspace models: the tenant boundary that owns projects."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from taskhub.core.db import MongoModel
from taskhub.utils import now


class WorkspaceMember(BaseModel):
    """Membership of a user in a workspace."""

    user_id: UUID
    is_owner: bool = False
    is_admin: bool = False
    joined_at: datetime = Field(default_factory=now)


class Workspace(MongoModel):
    """Container for projects shared by its members."""

    title: str
    description: str | None = None
    created_by: UUID
    members: list[WorkspaceMember] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)

    def get_member(self, user_id: UUID) -> WorkspaceMember | None:
        for member in self.members:
            if member.user_id == user_id:
                return member
        return None

    def has_member(self, user_id: UUID) -> bool:
        return self.get_member(user_id) is not None


class WorkspaceMemberView(BaseModel):
    """Workspace member with user details (API representation)."""

    user_id: UUID
    email: str
    name: str | None = None
    is_owner: bool
    is_admin: bool
    joined_at: datetime
