"""Token codec for the full server runtime, built on PyJWT."""

from typing import Any

import jwt

from taskhub.core.modules.token.codec import MalformedTokenError, SignatureMismatchError, TokenCodec, TokenRuntime

# Only the signature is checked here; claims are validated by TokenCodec.decode for both runtimes
_DECODE_OPTIONS = {
    "verify_signature": True,
    "verify_exp": False,
    "verify_nbf": False,
    "verify_iat": False,
    "verify_aud": False,
    "verify_iss": False,
    "verify_sub": False,
    "verify_jti": False,
}


class ServerTokenCodec(TokenCodec):
    @property
    def runtime(self) -> TokenRuntime:
        return TokenRuntime.SERVER

    def _encode(self, payload: dict[str, Any], secret: str) -> str:
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def _decode_verified(self, token: str, secret: str) -> dict[str, Any]:
        try:
            return jwt.decode(token, secret, algorithms=[self.algorithm], options=_DECODE_OPTIONS)
        except jwt.InvalidSignatureError as exc:
            raise SignatureMismatchError("Signature verification failed") from exc
        except jwt.InvalidTokenError as exc:
            raise MalformedTokenError(str(exc)) from exc
