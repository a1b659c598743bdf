from types import SimpleNamespace

import pytest

from taskhub.core.modules.session.extractor import SessionExtractor, parse_cookie_header
from taskhub.core.modules.token.codec import TokenRuntime, create_token_codec
from taskhub.core.modules.token.models import SessionClaims, VerifiedIdentity


def _request(cookie: str | None = None) -> SimpleNamespace:
    headers = {} if cookie is None else {"cookie": cookie}
    return SimpleNamespace(headers=headers)


@pytest.fixture
def codec(clock):
    return create_token_codec(TokenRuntime.SERVER, clock=clock)


@pytest.fixture
def extractor(codec, secret) -> SessionExtractor:
    return SessionExtractor(codec, secret)


@pytest.fixture
def token(codec, secret) -> str:
    return codec.issue(SessionClaims(user_id="u-42", email="erin@example.com", name="Erin"), secret)


class TestParseCookieHeader:
    @pytest.mark.parametrize(
        ("header", "expected"),
        [
            (None, {}),
            ("", {}),
            ("a=1", {"a": "1"}),
            ("a=1; b=2", {"a": "1", "b": "2"}),
            ("  a = 1 ;b=2;  ", {"a": "1", "b": "2"}),
            ("a=b=c", {"a": "b=c"}),
            ("flag; a=1", {"a": "1"}),
            ("=orphan; a=1", {"a": "1"}),
            ("a=", {"a": ""}),
            ("a=1; a=2", {"a": "2"}),
        ],
    )
    def test_parse(self, header, expected):
        assert parse_cookie_header(header) == expected


class TestExtractToken:
    def test_among_other_cookies(self, extractor):
        request = _request("theme=dark; auth-token=abc.def.ghi; lang=en")

        assert extractor.extract_token(request) == "abc.def.ghi"

    def test_missing(self, extractor):
        assert extractor.extract_token(_request("theme=dark")) is None

    def test_empty_value(self, extractor):
        assert extractor.extract_token(_request("auth-token=")) is None

    def test_custom_cookie_name(self, codec, secret):
        extractor = SessionExtractor(codec, secret, cookie_name="sid")

        assert extractor.extract_token(_request("auth-token=a; sid=b")) == "b"


class TestExtractIdentity:
    def test_valid_session(self, extractor, token):
        identity = extractor.extract_identity(_request(f"auth-token={token}"))

        assert identity == VerifiedIdentity(id="u-42", email="erin@example.com", name="Erin")

    def test_no_cookie_header(self, extractor):
        assert extractor.extract_identity(_request()) is None

    def test_cookie_absent(self, extractor):
        assert extractor.extract_identity(_request("theme=dark")) is None

    def test_garbage_token(self, extractor):
        assert extractor.extract_identity(_request("auth-token=garbage")) is None

    def test_expired_token(self, extractor, token, clock):
        clock.advance(days=1)

        assert extractor.extract_identity(_request(f"auth-token={token}")) is None

    def test_foreign_secret(self, codec, token):
        extractor = SessionExtractor(codec, "a-completely-different-secret-value-123456")

        assert extractor.extract_identity(_request(f"auth-token={token}")) is None
