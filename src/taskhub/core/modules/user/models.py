from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from taskhub.core.db import MongoModel
from taskhub.utils import now


class User(MongoModel):
    """User domain model with credentials.

    Indexed on email - unique, stored lower-case.
    """

    email: str
    name: str | None = None
    password_hash: str  # bcrypt hash
    created_at: datetime = Field(default_factory=now)


class UserView(BaseModel):
    """User account information (API representation)."""

    id: UUID = Field(..., description="User ID")
    email: str = Field(..., description="Email address")
    name: str | None = Field(None, description="Display name")
    created_at: datetime = Field(..., serialization_alias="createdAt", description="Registration time")

    @classmethod
    def from_domain(cls, user: User) -> "UserView":
        """Create view model from domain model."""
        return cls(id=user.id, email=user.email, name=user.name, created_at=user.created_at)


class UserSummary(BaseModel):
    """Compact user reference embedded in other resources."""

    id: UUID
    email: str
    name: str | None = None

    @classmethod
    def from_domain(cls, user: User) -> "UserSummary":
        return cls(id=user.id, email=user.email, name=user.name)
