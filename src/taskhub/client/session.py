"""Client-side session state mirroring the server-verified identity.

`SessionContext` asks the server "who am I" once, exposes the answer to its
subscribers and offers `logout`. The state moves init -> loading -> resolved:

    ctx = SessionContext(httpx.AsyncClient(base_url="https://taskhub.example"))
    await ctx.mount()
    if ctx.state.identity is None:
        ...  # send the user to the login page
"""

from collections.abc import Callable
from dataclasses import dataclass

import httpx
import structlog
from pydantic import BaseModel

from taskhub.core.modules.token.models import VerifiedIdentity

logger = structlog.get_logger(__name__)

SESSION_USER_PATH = "/api/auth/user"
SESSION_VERIFY_PATH = "/api/auth/verify"
LOGOUT_PATH = "/api/auth/logout"
REQUEST_TIMEOUT_SECONDS = 3.0


@dataclass(frozen=True)
class SessionState:
    identity: VerifiedIdentity | None = None
    is_loading: bool = True


class _SessionUser(BaseModel):
    id: str
    email: str
    name: str | None = None


class _UserEnvelope(BaseModel):
    user: _SessionUser


Listener = Callable[[SessionState], None]


class SessionContext:
    """Single owner of the client session state; only its own methods mutate it."""

    def __init__(self, client: httpx.AsyncClient, timeout: float = REQUEST_TIMEOUT_SECONDS) -> None:
        self._client = client
        self._timeout = timeout
        self._state = SessionState()
        self._listeners: list[Listener] = []
        self._mounted = False

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def identity(self) -> VerifiedIdentity | None:
        return self._state.identity

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a state listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def mount(self) -> None:
        """Resolve the identity once; later calls are no-ops."""
        if self._mounted:
            return
        self._mounted = True

        identity: VerifiedIdentity | None = None
        try:
            identity = await self._fetch_identity(SESSION_USER_PATH)
        except (httpx.HTTPError, ValueError):
            logger.debug("session_user_lookup_failed", fallback=SESSION_VERIFY_PATH)
            try:
                identity = await self._fetch_identity(SESSION_VERIFY_PATH)
            except (httpx.HTTPError, ValueError):
                logger.debug("session_verification_failed")
                identity = None
        finally:
            self._set_state(SessionState(identity=identity, is_loading=False))

    async def logout(self) -> None:
        """Ask the server to drop the session cookie, then forget the identity.

        Server errors are logged and re-raised; the identity is kept in that case.
        """
        try:
            response = await self._client.post(LOGOUT_PATH, timeout=self._timeout)
            response.raise_for_status()
        except httpx.HTTPError:
            logger.warning("logout_failed")
            raise
        self._set_state(SessionState(identity=None, is_loading=False))

    async def _fetch_identity(self, path: str) -> VerifiedIdentity:
        """Raises httpx.HTTPError, or ValueError for non-JSON bodies and unexpected payload shapes."""
        response = await self._client.get(path, timeout=self._timeout, headers={"Cache-Control": "no-cache"})
        response.raise_for_status()
        user = _UserEnvelope.model_validate(response.json()).user
        return VerifiedIdentity(id=user.id, email=user.email, name=user.name)

    def _set_state(self, state: SessionState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)
