from typing import Annotated, cast

from fastapi import Depends, Request

from taskhub.app import App
from taskhub.config import Config
from taskhub.core.modules.session.models import USER_EMAIL_HEADER, USER_ID_HEADER, decode_identity_header
from taskhub.core.modules.token.models import VerifiedIdentity
from taskhub.errors import AuthenticationError


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_config(request: Request) -> Config:
    return cast(Config, request.app.state.config)


async def get_identity(request: Request, app: Annotated[App, Depends(get_app)]) -> VerifiedIdentity:
    """Verify the session cookie with the server token codec."""
    identity = app.session_extractor.extract_identity(request)
    if identity is None:
        raise AuthenticationError
    return identity


async def get_header_identity(request: Request) -> VerifiedIdentity:
    """Trust identity headers attached by the edge gatekeeper."""
    user_id = request.headers.get(USER_ID_HEADER)
    email = request.headers.get(USER_EMAIL_HEADER)
    if not user_id or not email:
        raise AuthenticationError
    return VerifiedIdentity(id=decode_identity_header(user_id), email=decode_identity_header(email))


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
ConfigDep = Annotated[Config, Depends(get_config)]
IdentityDep = Annotated[VerifiedIdentity, Depends(get_identity)]
HeaderIdentityDep = Annotated[VerifiedIdentity, Depends(get_header_identity)]
