from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from taskhub.core.core import Service
from taskhub.core.modules.session.extractor import SessionExtractor
from taskhub.core.modules.session.models import AuthToken
from taskhub.core.modules.token.codec import TokenCodec, TokenRuntime, create_token_codec
from taskhub.core.modules.token.models import SessionClaims, VerifiedIdentity
from taskhub.core.modules.user.models import User
from taskhub.errors import AuthenticationError

logger = structlog.get_logger(__name__)


class SessionService(Service):
    """Issues session tokens and resolves identities back to users.

    Sessions are stateless: nothing is stored, tokens expire on their own.
    """

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._codec: TokenCodec = create_token_codec(TokenRuntime.SERVER)
        self._extractor: SessionExtractor | None = None

    @property
    def extractor(self) -> SessionExtractor:
        if self._extractor is None:
            self._extractor = SessionExtractor(self._codec, self.core.config.jwt_secret)
        return self._extractor

    def create_session(self, user: User) -> AuthToken:
        """Issue a signed session token for the user."""
        claims = SessionClaims(user_id=str(user.id), email=user.email, name=user.name)
        token = AuthToken(self._codec.issue(claims, self.core.config.jwt_secret))
        logger.info("session_issued", user_id=claims.user_id)
        return token

    def get_authenticated_user(self, identity: VerifiedIdentity) -> User:
        """Re-query the user behind a verified identity.

        A token whose user no longer exists is treated as unauthenticated.
        """
        try:
            user_id = UUID(identity.id)
        except ValueError as exc:
            raise AuthenticationError("Invalid or expired session") from exc
        if not self.core.services.user.has_user(user_id):
            raise AuthenticationError("Invalid or expired session")
        return self.core.services.user.get_user(user_id)
