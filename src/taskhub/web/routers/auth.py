from fastapi import APIRouter, Response
from pydantic import BaseModel, Field

from taskhub.core.modules.user.models import UserView
from taskhub.web.cookies import clear_session_cookie, set_session_cookie
from taskhub.web.deps import AppDep, ConfigDep, HeaderIdentityDep, IdentityDep
from taskhub.web.openapi import ErrorResponse

router = APIRouter(tags=["auth"])


class RegisterRequest(BaseModel):
    """Registration request."""

    full_name: str = Field(..., alias="fullName", min_length=2, description="Display name")
    email: str = Field(..., description="Email address, used as login")
    password: str = Field(..., min_length=6, description="Password (at least 6 characters)")


class LoginRequest(BaseModel):
    """Authentication request."""

    email: str = Field(..., description="Email address")
    password: str = Field(..., min_length=1, description="Password")


class AuthResponse(BaseModel):
    message: str = Field(..., description="Human-readable result")
    user: UserView


class UserResponse(BaseModel):
    user: UserView


class MessageResponse(BaseModel):
    message: str


@router.post(
    "/auth/register",
    summary="Register user",
    description="Create a new user account. Does not log the user in.",
    operation_id="register",
    status_code=201,
    responses={
        201: {"description": "User registered"},
        400: {"model": ErrorResponse, "description": "Validation failed"},
        409: {"model": ErrorResponse, "description": "Email already registered"},
    },
)
async def register(data: RegisterRequest, app: AppDep) -> AuthResponse:
    user = await app.register(data.full_name, data.email, data.password)
    return AuthResponse(message="User registered successfully", user=user)


@router.post(
    "/auth/login",
    summary="Authenticate user",
    description="Authenticate with email and password; the session token is set as an HTTP-only cookie.",
    operation_id="login",
    responses={
        200: {"description": "Successfully authenticated"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
async def login(data: LoginRequest, app: AppDep, config: ConfigDep, response: Response) -> AuthResponse:
    user, token = await app.login(data.email, data.password)
    set_session_cookie(response, token, secure=config.is_production)
    return AuthResponse(message="Login successful", user=user)


@router.post(
    "/auth/logout",
    summary="End session",
    description="Delete the session cookie on the client. Always succeeds.",
    operation_id="logout",
    responses={200: {"description": "Successfully logged out"}},
)
async def logout(config: ConfigDep, response: Response) -> MessageResponse:
    clear_session_cookie(response, secure=config.is_production)
    return MessageResponse(message="Logout successful")


@router.get(
    "/auth/verify",
    summary="Verify session",
    description="Verify the session cookie and return the current user.",
    operation_id="verifySession",
    responses={
        200: {"description": "Current user"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def verify(app: AppDep, identity: IdentityDep) -> UserResponse:
    return UserResponse(user=await app.get_current_user(identity))


@router.get(
    "/auth/user",
    summary="Current user from gatekeeper identity",
    description="Return the current user using the identity attached by the edge gatekeeper.",
    operation_id="getSessionUser",
    responses={
        200: {"description": "Current user"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def session_user(app: AppDep, identity: HeaderIdentityDep) -> UserResponse:
    return UserResponse(user=await app.get_current_user(identity))
