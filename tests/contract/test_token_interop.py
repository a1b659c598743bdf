"""Tokens must verify identically under the server and edge codecs."""

import pytest
from jose import jws

from taskhub.core.modules.token.codec import TokenRuntime, create_token_codec
from taskhub.core.modules.token.models import SessionClaims

PAIRS = [
    pytest.param(TokenRuntime.SERVER, TokenRuntime.EDGE, id="server-to-edge"),
    pytest.param(TokenRuntime.EDGE, TokenRuntime.SERVER, id="edge-to-server"),
]


@pytest.fixture
def claims() -> SessionClaims:
    return SessionClaims(user_id="9b2e0c8e-1f55-4c1e-8d3b-51f0f5d6a7c2", email="dana@example.com", name="Dana Ö")


@pytest.mark.parametrize(("issuer", "verifier"), PAIRS)
def test_issued_token_verifies_under_other_runtime(issuer, verifier, claims, clock, secret):
    token = create_token_codec(issuer, clock=clock).issue(claims, secret)

    assert create_token_codec(verifier, clock=clock).verify(token, secret) == claims


@pytest.mark.parametrize(("issuer", "verifier"), PAIRS)
def test_expiry_boundary_agrees(issuer, verifier, claims, clock, secret):
    issuing = create_token_codec(issuer, clock=clock)
    verifying = create_token_codec(verifier, clock=clock)
    token = issuing.issue(claims, secret)

    clock.advance(hours=24, seconds=-1)
    assert issuing.verify(token, secret) == verifying.verify(token, secret) == claims

    clock.advance(seconds=1)
    assert issuing.verify(token, secret) is None
    assert verifying.verify(token, secret) is None


@pytest.mark.parametrize(("issuer", "verifier"), PAIRS)
def test_foreign_secret_rejected_by_both(issuer, verifier, claims, clock, secret):
    token = create_token_codec(issuer, clock=clock).issue(claims, "another-secret-that-is-long-enough-000000")

    assert create_token_codec(issuer, clock=clock).verify(token, secret) is None
    assert create_token_codec(verifier, clock=clock).verify(token, secret) is None


@pytest.mark.parametrize(("issuer", "verifier"), PAIRS)
def test_tampered_token_rejected_by_both(issuer, verifier, claims, clock, secret):
    head, body, signature = create_token_codec(issuer, clock=clock).issue(claims, secret).split(".")
    tampered = f"{head}.{body}.{signature[::-1]}"

    assert create_token_codec(issuer, clock=clock).verify(tampered, secret) is None
    assert create_token_codec(verifier, clock=clock).verify(tampered, secret) is None


@pytest.mark.parametrize("runtime", [TokenRuntime.SERVER, TokenRuntime.EDGE])
def test_unused_registered_claims_are_ignored(runtime, clock, secret):
    issued_at = int(clock().timestamp())
    token = jws.sign(
        {
            "userId": "u-1",
            "email": "erin@example.com",
            "sub": 123,
            "jti": 456,
            "nbf": issued_at + 3600,
            "iat": issued_at,
            "exp": issued_at + 60,
        },
        secret,
        algorithm="HS256",
    )

    assert create_token_codec(runtime, clock=clock).verify(token, secret) == SessionClaims(
        user_id="u-1", email="erin@example.com"
    )
