"""Session cookie and identity header definitions."""

from typing import NewType
from urllib.parse import quote, unquote

from taskhub.core.modules.token.models import TOKEN_TTL_SECONDS

AuthToken = NewType("AuthToken", str)

SESSION_COOKIE_NAME = "auth-token"
SESSION_COOKIE_MAX_AGE = TOKEN_TTL_SECONDS

# Set only by the edge gatekeeper; inbound copies from clients are stripped
USER_ID_HEADER = "x-user-id"
USER_EMAIL_HEADER = "x-user-email"
IDENTITY_HEADERS = (USER_ID_HEADER, USER_EMAIL_HEADER)


def encode_identity_header(value: str) -> str:
    """Percent-encode so the value survives latin-1 header decoding."""
    return quote(value, safe="@")


def decode_identity_header(value: str) -> str:
    return unquote(value)
