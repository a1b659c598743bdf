import asyncio
from collections.abc import Awaitable, Callable

import httpx
import pytest

from taskhub.client.session import SessionContext, SessionState
from taskhub.core.modules.token.models import VerifiedIdentity

USER_PAYLOAD = {"user": {"id": "u-1", "email": "gina@example.com", "name": "Gina", "createdAt": "2025-01-01T00:00:00Z"}}
GINA = VerifiedIdentity(id="u-1", email="gina@example.com", name="Gina")

Handler = Callable[[httpx.Request], httpx.Response]


class Recorder:
    """MockTransport handler that records request paths and answers from a route table."""

    def __init__(self, routes: dict[tuple[str, str], Handler]) -> None:
        self.routes = routes
        self.calls: list[tuple[str, str]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        key = (request.method, request.url.path)
        self.calls.append(key)
        handler = self.routes.get(key)
        if handler is None:
            return httpx.Response(404, json={"message": "Not found"})
        return handler(request)


def _ok(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json=USER_PAYLOAD)


def _unauthorized(request: httpx.Request) -> httpx.Response:
    return httpx.Response(401, json={"message": "Authentication required", "type": "authentication_error"})


def _timeout(request: httpx.Request) -> httpx.Response:
    raise httpx.ReadTimeout("timed out", request=request)


def _run(recorder: Recorder, scenario: Callable[[SessionContext], Awaitable[None]]) -> SessionContext:
    async def main() -> SessionContext:
        async with httpx.AsyncClient(transport=httpx.MockTransport(recorder), base_url="http://testserver") as client:
            context = SessionContext(client)
            await scenario(context)
            return context

    return asyncio.run(main())


async def _mount(context: SessionContext) -> None:
    await context.mount()


def test_initial_state_is_loading():
    context = SessionContext(httpx.AsyncClient())

    assert context.state == SessionState(identity=None, is_loading=True)
    assert context.is_loading


def test_mount_uses_session_user_endpoint():
    recorder = Recorder({("GET", "/api/auth/user"): _ok})

    context = _run(recorder, _mount)

    assert context.identity == GINA
    assert not context.is_loading
    assert recorder.calls == [("GET", "/api/auth/user")]


def test_mount_falls_back_to_verify_endpoint():
    recorder = Recorder({("GET", "/api/auth/user"): _unauthorized, ("GET", "/api/auth/verify"): _ok})

    context = _run(recorder, _mount)

    assert context.identity == GINA
    assert recorder.calls == [("GET", "/api/auth/user"), ("GET", "/api/auth/verify")]


def test_mount_falls_back_on_timeout():
    recorder = Recorder({("GET", "/api/auth/user"): _timeout, ("GET", "/api/auth/verify"): _ok})

    context = _run(recorder, _mount)

    assert context.identity == GINA


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>login</html>"),
        httpx.Response(200, json={"id": "u-1"}),
        httpx.Response(200, json={"user": {"email": "gina@example.com"}}),
    ],
    ids=["not-json", "no-envelope", "no-id"],
)
def test_mount_falls_back_on_unexpected_body(response):
    recorder = Recorder({("GET", "/api/auth/user"): lambda request: response, ("GET", "/api/auth/verify"): _ok})

    context = _run(recorder, _mount)

    assert context.identity == GINA


def test_mount_resolves_to_anonymous_when_both_fail():
    recorder = Recorder({("GET", "/api/auth/user"): _unauthorized, ("GET", "/api/auth/verify"): _timeout})

    context = _run(recorder, _mount)

    assert context.state == SessionState(identity=None, is_loading=False)


def test_mount_runs_once():
    recorder = Recorder({("GET", "/api/auth/user"): _ok})

    async def mount_twice(context: SessionContext) -> None:
        await context.mount()
        await context.mount()

    _run(recorder, mount_twice)

    assert recorder.calls == [("GET", "/api/auth/user")]


def test_mount_bypasses_caches():
    seen: list[str | None] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.headers.get("cache-control"))
        return _ok(request)

    _run(Recorder({("GET", "/api/auth/user"): handler}), _mount)

    assert seen == ["no-cache"]


def test_listeners_receive_state_changes():
    recorder = Recorder({("GET", "/api/auth/user"): _ok, ("POST", "/api/auth/logout"): lambda r: httpx.Response(200)})
    received: list[SessionState] = []
    removed: list[SessionState] = []

    async def scenario(context: SessionContext) -> None:
        context.subscribe(received.append)
        unsubscribe = context.subscribe(removed.append)
        await context.mount()
        unsubscribe()
        await context.logout()

    _run(recorder, scenario)

    assert received == [SessionState(identity=GINA, is_loading=False), SessionState(identity=None, is_loading=False)]
    assert removed == [SessionState(identity=GINA, is_loading=False)]


def test_logout_clears_identity():
    recorder = Recorder(
        {
            ("GET", "/api/auth/user"): _ok,
            ("POST", "/api/auth/logout"): lambda request: httpx.Response(200, json={"message": "Logout successful"}),
        }
    )

    async def scenario(context: SessionContext) -> None:
        await context.mount()
        await context.logout()

    context = _run(recorder, scenario)

    assert context.identity is None
    assert not context.is_loading
    assert ("POST", "/api/auth/logout") in recorder.calls


def test_logout_failure_keeps_identity_and_raises():
    recorder = Recorder(
        {
            ("GET", "/api/auth/user"): _ok,
            ("POST", "/api/auth/logout"): lambda request: httpx.Response(500, json={"message": "boom"}),
        }
    )
    outcome: dict[str, object] = {}

    async def scenario(context: SessionContext) -> None:
        await context.mount()
        with pytest.raises(httpx.HTTPStatusError):
            await context.logout()
        outcome["identity"] = context.identity

    _run(recorder, scenario)

    assert outcome["identity"] == GINA
