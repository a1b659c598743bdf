"""Derives a verified identity from the session cookie of an inbound request."""

from collections.abc import Mapping
from typing import Protocol

import structlog

from taskhub.core.modules.session.models import SESSION_COOKIE_NAME
from taskhub.core.modules.token.codec import TokenCodec
from taskhub.core.modules.token.models import VerifiedIdentity

logger = structlog.get_logger(__name__)


class RequestLike(Protocol):
    @property
    def headers(self) -> Mapping[str, str]: ...


def parse_cookie_header(header: str | None) -> dict[str, str]:
    """Split a Cookie header into name/value pairs.

    Pairs are separated by `;` and split on the first `=`. Pairs without `=`
    or with an empty name are skipped. A repeated name keeps
    its last value.
    """
    cookies: dict[str, str] = {}
    if not header:
        return cookies
    for chunk in header.split(";"):
        name, sep, value = chunk.strip().partition("=")
        name = name.strip()
        if not sep or not name:
            continue
        cookies[name] = value.strip()
    return cookies


class SessionExtractor:
    """Binds a request to the identity in its session cookie, if any."""

    def __init__(self, codec: TokenCodec, secret: str, cookie_name: str = SESSION_COOKIE_NAME) -> None:
        self._codec = codec
        self._secret = secret
        self._cookie_name = cookie_name

    def extract_token(self, request: RequestLike) -> str | None:
        token = parse_cookie_header(request.headers.get("cookie")).get(self._cookie_name)
        return token or None

    def extract_identity(self, request: RequestLike) -> VerifiedIdentity | None:
        """Return the verified identity or None; never raises for bad input."""
        token = self.extract_token(request)
        if token is None:
            return None
        claims = self._codec.verify(token, self._secret)
        if claims is None:
            logger.info("session_token_rejected", runtime=self._codec.runtime)
            return None
        return VerifiedIdentity.from_claims(claims)
