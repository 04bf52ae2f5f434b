from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

import jwt

from cleo.models.base import utcnow
from cleo.models.user import Role
from cleo.services._shared.errors import (
    ExpiredAccessToken,
    InvalidSignature,
    MalformedToken,
)
from cleo.services._shared.ports import AccessTokenClaims, TokenCodec, TokenSubject

log = logging.getLogger(__name__)

DEFAULT_ISSUER = "sidex-cleo-api"
DEFAULT_ALGORITHM = "HS256"
REQUIRED_CLAIMS = ("sub", "email", "role", "iss", "iat", "exp")


class JWTTokenCodec(TokenCodec):
    """
    HS256 access-token codec built on PyJWT.

    Signature, issuer and claim presence are checked by PyJWT. Expiry is
    checked here against the injected clock so that ``ttl_seconds=0`` tokens
    are rejected immediately and tests can move time without touching PyJWT.

    :param secret: Shared HMAC secret. Must be non-empty.
    :param issuer: Value stamped into and required from ``iss``.
    :param algorithm: JWS algorithm; tokens declaring any other are malformed.
    :param clock: Callable returning the current UTC time.
    """

    def __init__(
        self,
        secret: str,
        *,
        issuer: str = DEFAULT_ISSUER,
        algorithm: str = DEFAULT_ALGORITHM,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if not secret:
            raise ValueError("JWT signing secret must not be empty.")
        self._secret = secret
        self._issuer = issuer
        self._algorithm = algorithm
        self._clock = clock or utcnow

    @property
    def issuer(self) -> str:
        return self._issuer

    def sign(self, subject: TokenSubject, ttl_seconds: int) -> str:
        if ttl_seconds < 0:
            raise ValueError("ttl_seconds must be >= 0")
        iat = int(self._clock().timestamp())
        payload = {
            "sub": subject.sub,
            "email": subject.email,
            "role": subject.role,
            "iss": self._issuer,
            "iat": iat,
            "exp": iat + int(ttl_seconds),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> AccessTokenClaims:
        if not isinstance(token, str) or token.count(".") != 2:
            raise MalformedToken("token is not a three-segment compact JWS")

        try:
            header = jwt.get_unverified_header(token)
        except jwt.InvalidTokenError as exc:
            raise MalformedToken("unreadable header") from exc
        if header.get("alg") != self._algorithm:
            raise MalformedToken(f"unexpected alg {header.get('alg')!r}")

        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                issuer=self._issuer,
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                    "require": list(REQUIRED_CLAIMS),
                },
            )
        except jwt.InvalidSignatureError as exc:
            raise InvalidSignature("signature mismatch") from exc
        except jwt.InvalidTokenError as exc:
            raise MalformedToken(str(exc) or type(exc).__name__) from exc

        claims = self._coerce(payload)
        if self._clock().timestamp() >= claims.exp:
            raise ExpiredAccessToken(f"expired at {claims.exp}")
        return claims

    # ------------------------- helpers -------------------------

    @staticmethod
    def _coerce(payload: dict[str, Any]) -> AccessTokenClaims:
        sub, email, role = payload["sub"], payload["email"], payload["role"]
        iat, exp = payload["iat"], payload["exp"]
        if not all(isinstance(v, str) for v in (sub, email, role, payload["iss"])):
            raise MalformedToken("string claims have the wrong type")
        if role not in Role.values():
            raise MalformedToken(f"unknown role {role!r}")
        # bool is an int subclass; reject it explicitly
        if any(isinstance(v, bool) or not isinstance(v, int | float) for v in (iat, exp)):
            raise MalformedToken("numeric claims have the wrong type")
        return AccessTokenClaims(
            sub=sub,
            email=email,
            role=role,
            iss=payload["iss"],
            iat=int(iat),
            exp=int(exp),
        )
