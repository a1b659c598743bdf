"""Session token claim models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

TOKEN_TTL_SECONDS = 24 * 60 * 60
TOKEN_ALGORITHM = "HS256"


class SessionClaims(BaseModel):
    """Identity claims carried by a session token.

    Wire keys are `userId`, `email` and optional `name`.
    """

    user_id: str = Field(..., alias="userId", min_length=1)
    email: str
    name: str | None = None

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class TokenPayload(SessionClaims):
    """Full decoded payload: claims plus issuance and expiry timestamps (epoch seconds)."""

    iat: int | None = None
    exp: int

    def to_claims(self) -> SessionClaims:
        return SessionClaims(user_id=self.user_id, email=self.email, name=self.name)


class VerifiedIdentity(BaseModel):
    """Trusted identity derived from a successfully verified token."""

    id: str
    email: str
    name: str | None = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_claims(cls, claims: SessionClaims) -> "VerifiedIdentity":
        return cls(id=claims.user_id, email=claims.email, name=claims.name)
