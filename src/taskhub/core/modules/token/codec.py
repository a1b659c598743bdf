"""Token codec contract shared by the server and edge implementations.

Both implementations sign `header.payload` with HS256 and evaluate expiry with
the same rule (`now >= exp` is expired, no leeway) so a token issued by one
verifies under the other.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime
from enum import StrEnum
from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError

from taskhub.core.modules.token.models import TOKEN_ALGORITHM, TOKEN_TTL_SECONDS, SessionClaims, TokenPayload
from taskhub.utils import now

logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]


class TokenError(Exception):
    """Base class for token verification failures. Never shown to clients."""

    reason = "invalid"


class MalformedTokenError(TokenError):
    reason = "malformed"


class SignatureMismatchError(TokenError):
    reason = "signature_mismatch"


class TokenExpiredError(TokenError):
    reason = "expired"


class TokenRuntime(StrEnum):
    """Execution context a codec is built for."""

    SERVER = "server"
    EDGE = "edge"


class TokenCodec(ABC):
    """Issues and verifies signed, time-limited session tokens."""

    algorithm = TOKEN_ALGORITHM
    ttl_seconds = TOKEN_TTL_SECONDS

    def __init__(self, clock: Clock = now) -> None:
        self._clock = clock

    def issue(self, claims: SessionClaims, secret: str) -> str:
        """Sign claims with an expiry of issuance time plus 24 hours."""
        issued_at = int(self._clock().timestamp())
        payload = {**claims.to_payload(), "iat": issued_at, "exp": issued_at + self.ttl_seconds}
        return self._encode(payload, secret)

    def decode(self, token: str, secret: str) -> SessionClaims:
        """Verify a token and return its claims.

        Raises:
            MalformedTokenError: structure, encoding, algorithm or claim set is wrong
            SignatureMismatchError: signature does not match the secret
            TokenExpiredError: current time is at or past expiry
        """
        raw = self._decode_verified(token, secret)
        try:
            payload = TokenPayload.model_validate(raw)
        except PydanticValidationError as exc:
            raise MalformedTokenError("Token claims are invalid") from exc
        if int(self._clock().timestamp()) >= payload.exp:
            raise TokenExpiredError("Token has expired")
        return payload.to_claims()

    def verify(self, token: str, secret: str) -> SessionClaims | None:
        """Verify a token, collapsing every failure kind to None."""
        try:
            return self.decode(token, secret)
        except TokenError as exc:
            logger.debug("token_verification_failed", reason=exc.reason, runtime=self.runtime)
            return None

    @property
    @abstractmethod
    def runtime(self) -> TokenRuntime: ...

    @abstractmethod
    def _encode(self, payload: dict[str, Any], secret: str) -> str: ...

    @abstractmethod
    def _decode_verified(self, token: str, secret: str) -> dict[str, Any]:
        """Check structure, algorithm and signature; return the raw payload without time checks."""


def create_token_codec(runtime: TokenRuntime, clock: Clock = now) -> TokenCodec:
    """Build the codec implementation for a deployment context."""
    if runtime == TokenRuntime.EDGE:
        from taskhub.core.modules.token.edge import EdgeTokenCodec  # noqa: PLC0415

        return EdgeTokenCodec(clock)

    from taskhub.core.modules.token.server import ServerTokenCodec  # noqa: PLC0415

    return ServerTokenCodec(clock)
