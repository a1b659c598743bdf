"""Token codec for the edge runtime, built on python-jose.

The gatekeeper middleware uses this implementation; it must stay wire
compatible with ServerTokenCodec.
"""

import json
from typing import Any

from jose import jws, jwt
from jose.exceptions import JWSError

from taskhub.core.modules.token.codec import MalformedTokenError, SignatureMismatchError, TokenCodec, TokenRuntime


class EdgeTokenCodec(TokenCodec):
    @property
    def runtime(self) -> TokenRuntime:
        return TokenRuntime.EDGE

    def _encode(self, payload: dict[str, Any], secret: str) -> str:
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def _decode_verified(self, token: str, secret: str) -> dict[str, Any]:
        try:
            header = jws.get_unverified_header(token)
            raw = jws.get_unverified_claims(token)
        except (JWSError, ValueError, TypeError) as exc:
            raise MalformedTokenError(str(exc)) from exc
        if header.get("alg") != self.algorithm:
            raise MalformedTokenError("Unexpected token algorithm")

        # Structure and algorithm are known good here, so any failure is the signature
        try:
            jws.verify(token, secret, algorithms=[self.algorithm])
        except JWSError as exc:
            raise SignatureMismatchError("Signature verification failed") from exc

        try:
            payload = json.loads(raw)
        except ValueError as exc:
            raise MalformedTokenError("Token payload is not JSON") from exc
        if not isinstance(payload, dict):
            raise MalformedTokenError("Token payload is not an object")
        return payload
