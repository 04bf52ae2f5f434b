"""
Bearer-token authentication and the role gate.

Framework-agnostic: the Flask decorators in :mod:`cleo.api.deps` call these
functions and put the resulting :class:`Identity` on ``flask.g``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from cleo.services._shared.errors import (
    Forbidden,
    InvalidToken,
    MissingBearerToken,
    TokenError,
    Unauthenticated,
)
from cleo.services._shared.ports import TokenCodec

log = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


@dataclass(frozen=True, slots=True)
class Identity:
    """Request-scoped caller identity, taken from verified access-token claims."""

    id: str
    email: str
    role: str


def extract_bearer(header: str | None) -> str:
    """
    Return the token from an ``Authorization`` header value.

    The scheme match is case-insensitive; surrounding whitespace is ignored.

    :raises MissingBearerToken: Header absent, not ``Bearer``, or empty token.
    """
    if not header:
        raise MissingBearerToken("no Authorization header")
    scheme, _, token = header.strip().partition(" ")
    if scheme.lower() != BEARER_SCHEME:
        raise MissingBearerToken("Authorization scheme is not Bearer")
    token = token.strip()
    if not token:
        raise MissingBearerToken("empty bearer token")
    return token


class BearerAuthenticator:
    """
    Resolve an ``Authorization`` header into an :class:`Identity`.

    Only the token codec is consulted; the user row is not re-read.

    :param codec: Access token verifier.
    """

    def __init__(self, codec: TokenCodec) -> None:
        self._codec = codec

    def authenticate(self, header: str | None) -> Identity:
        token = extract_bearer(header)
        try:
            claims = self._codec.verify(token)
        except TokenError as exc:
            raise InvalidToken(type(exc).__name__) from exc
        return Identity(id=claims.sub, email=claims.email, role=claims.role)


def ensure_role(identity: Identity | None, required: Iterable[str]) -> Identity:
    """
    Allow the call iff the identity's role is one of ``required``.

    Exact membership only; ``admin`` does not imply ``worker`` unless listed.

    :raises Unauthenticated: ``identity`` is ``None``.
    :raises Forbidden: Role not in ``required``.
    """
    need = list(required)
    if identity is None:
        raise Unauthenticated("role gate reached without identity")
    if identity.role not in need:
        log.info(
            "Role gate denied",
            extra={
                "event": "authz.forbidden",
                "user_id": identity.id,
                "role": identity.role,
                "required_roles": need,
            },
        )
        raise Forbidden(need=need, have=identity.role)
    return identity
