from starlette.responses import Response

from taskhub.core.modules.session.models import SESSION_COOKIE_MAX_AGE, SESSION_COOKIE_NAME


def set_session_cookie(response: Response, token: str, secure: bool) -> None:
    """Attach the session token as an HTTP-only, same-site strict cookie."""
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=SESSION_COOKIE_MAX_AGE,
        path="/",
        secure=secure,
        httponly=True,
        samesite="strict",
    )


def clear_session_cookie(response: Response, secure: bool) -> None:
    """Instruct the client to drop the session cookie (expired replacement)."""
    response.delete_cookie(
        key=SESSION_COOKIE_NAME,
        path="/",
        secure=secure,
        httponly=True,
        samesite="strict",
    )
