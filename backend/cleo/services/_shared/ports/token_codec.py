from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class TokenSubject:
    """Identity facts stamped into an access token."""

    sub: str
    email: str
    role: str


@dataclass(frozen=True, slots=True)
class AccessTokenClaims:
    """
    Verified access-token payload.

    :ivar sub: User id.
    :ivar email: User email at signing time.
    :ivar role: User role at signing time.
    :ivar iss: Issuer string.
    :ivar iat: Issued-at, seconds since epoch.
    :ivar exp: Expiry, seconds since epoch (``iat + ttl``).
    """

    sub: str
    email: str
    role: str
    iss: str
    iat: int
    exp: int


class TokenCodec(Protocol):
    """Port for signing and verifying short-lived access tokens."""

    def sign(self, subject: TokenSubject, ttl_seconds: int) -> str:
        """Return a compact signed token valid for ``ttl_seconds`` from now."""
        ...

    def verify(self, token: str) -> AccessTokenClaims:
        """
        Return the claims of a token this codec signed and that has not expired.

        :raises MalformedToken: Input is not a usable token.
        :raises InvalidSignature: Signature does not verify.
        :raises ExpiredAccessToken: ``now >= exp``.
        """
        ...
