"""Edge gatekeeper: path-based session check that runs before any route handler.

Every request is classified once and ends in exactly one terminal outcome:

- ALLOW: public path, path outside the protected set, or protected path with a
  valid session cookie (identity headers are then attached to the request).
- REDIRECT: protected page path without a usable session; the client is sent
  to the login page.
- DENY: protected API path without a usable session; answered with 401 JSON.

A present-but-invalid cookie (bad signature, expired, malformed) is also
cleared on the client. Identity headers sent by clients are always stripped,
so downstream handlers only ever see headers set here.
"""

from dataclasses import dataclass
from enum import StrEnum
from urllib.parse import urlencode

import structlog
from starlette.datastructures import MutableHeaders
from starlette.requests import HTTPConnection
from starlette.responses import JSONResponse, RedirectResponse, Response
from starlette.types import ASGIApp, Receive, Scope, Send

from taskhub.core.modules.session.extractor import SessionExtractor
from taskhub.core.modules.session.models import (
    IDENTITY_HEADERS,
    USER_EMAIL_HEADER,
    USER_ID_HEADER,
    encode_identity_header,
)
from taskhub.core.modules.token.codec import TokenCodec, TokenRuntime, create_token_codec
from taskhub.core.modules.token.models import VerifiedIdentity
from taskhub.web.cookies import clear_session_cookie

logger = structlog.get_logger(__name__)

LOGIN_PATH = "/login"
API_PREFIX = "/api/"

PUBLIC_ROUTES: tuple[str, ...] = (
    "/",
    "/login",
    "/register",
    "/api/auth/login",
    "/api/auth/register",
    "/api/auth/logout",
    "/api/health",
)

PROTECTED_ROUTES: tuple[str, ...] = (
    "/dashboard",
    "/workspace",
    "/project",
    "/profile",
    "/settings",
    "/api/auth/user",
    "/api/workspaces",
    "/api/projects",
    "/api/tasks",
)


class RouteClass(StrEnum):
    PUBLIC = "public"
    PROTECTED = "protected"


class GateDecision(StrEnum):
    ALLOW = "allow"
    REDIRECT = "redirect"
    DENY = "deny"


@dataclass(frozen=True)
class GateOutcome:
    decision: GateDecision
    identity: VerifiedIdentity | None = None
    location: str | None = None
    clear_cookie: bool = False


def is_public_path(path: str) -> bool:
    return any(path == route or path.startswith(route + "/") for route in PUBLIC_ROUTES)


def is_protected_path(path: str) -> bool:
    return any(path.startswith(route) for route in PROTECTED_ROUTES)


def classify_path(path: str) -> RouteClass:
    """Public entries win over protected prefixes; unknown paths are public."""
    if is_public_path(path):
        return RouteClass.PUBLIC
    if is_protected_path(path):
        return RouteClass.PROTECTED
    return RouteClass.PUBLIC


def login_redirect_location(path: str | None = None) -> str:
    if path is None:
        return LOGIN_PATH
    return f"{LOGIN_PATH}?{urlencode({'redirect': path}, safe='/')}"


def decide(path: str, token: str | None, codec: TokenCodec, secret: str) -> GateOutcome:
    """Compute the gate outcome for one request."""
    if classify_path(path) == RouteClass.PUBLIC:
        return GateOutcome(GateDecision.ALLOW)

    rejected = GateDecision.DENY if path.startswith(API_PREFIX) else GateDecision.REDIRECT

    if not token:
        return GateOutcome(rejected, location=login_redirect_location(path))

    claims = codec.verify(token, secret)
    if claims is None:
        return GateOutcome(rejected, location=login_redirect_location(), clear_cookie=True)

    return GateOutcome(GateDecision.ALLOW, identity=VerifiedIdentity.from_claims(claims))


class EdgeGatekeeper:
    """Pure ASGI middleware applying `decide` to every HTTP request.

    Identity header values are percent-encoded.
    """

    def __init__(self, app: ASGIApp, secret: str, secure_cookies: bool = False, codec: TokenCodec | None = None) -> None:
        self.app = app
        self._secret = secret
        self._secure_cookies = secure_cookies
        self._codec = codec or create_token_codec(TokenRuntime.EDGE)
        self._extractor = SessionExtractor(self._codec, secret)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        stripped = [(name, value) for name, value in scope["headers"] if name.decode("latin-1").lower() not in IDENTITY_HEADERS]
        scope = {**scope, "headers": stripped}

        token = self._extractor.extract_token(HTTPConnection(scope))
        outcome = decide(scope["path"], token, self._codec, self._secret)

        if outcome.decision == GateDecision.ALLOW:
            user_id = None
            if outcome.identity is not None:
                user_id = outcome.identity.id
                # Writes through to scope["headers"], whichever list it holds now
                headers = MutableHeaders(scope=scope)
                headers.append(USER_ID_HEADER, encode_identity_header(outcome.identity.id))
                headers.append(USER_EMAIL_HEADER, encode_identity_header(outcome.identity.email))
            with structlog.contextvars.bound_contextvars(path=scope["path"], user_id=user_id):
                await self.app(scope, receive, send)
            return

        logger.info(
            "gatekeeper_rejected",
            path=scope["path"],
            decision=outcome.decision,
            cleared_cookie=outcome.clear_cookie,
        )
        response = self._build_rejection(outcome)
        await response(scope, receive, send)

    def _build_rejection(self, outcome: GateOutcome) -> Response:
        response: Response
        if outcome.decision == GateDecision.DENY:
            response = JSONResponse(
                status_code=401,
                content={"message": "Authentication required", "type": "authentication_error"},
            )
        else:
            response = RedirectResponse(url=outcome.location or LOGIN_PATH)
        if outcome.clear_cookie:
            clear_session_cookie(response, self._secure_cookies)
        return response
