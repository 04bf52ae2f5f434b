"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask or HTTP directly. They serve as stable contracts between the token
codec, the stores, the session service and the authorization gate.

Every authentication fault carries two views:

* an internal one (class, ``internal_reason``, ``__cause__``) meant for logs;
* a caller-safe projection returned by :meth:`AuthFault.public`, which
  ``cleo/core/errors.py`` renders as an RFC 7807 response.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, ClassVar

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    :param exc: The exception raised by SQLAlchemy during flush/commit.
    :param constraint_name: Constraint name to match (e.g. ``uq_users_email``).
    :returns: ``True`` if the IntegrityError mentions the constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - The API layer translates them to problem responses.
    """


@dataclass(frozen=True, slots=True)
class PublicFault:
    """
    Caller-safe projection of a fault.

    :param status: HTTP-equivalent status (401 or 403).
    :param code: Stable machine-readable code.
    :param message: Human-readable summary safe for clients.
    :param details: Optional structured, non-sensitive details.
    """

    status: int
    code: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)


class AuthFault(ServiceError):
    """
    Base class of the authentication/authorization taxonomy.

    Subclasses set ``code``, ``status`` and ``message`` as class attributes.
    ``internal_reason`` is free-form diagnostic text that never reaches the
    caller.
    """

    code: ClassVar[str] = "unauthorized"
    status: ClassVar[int] = HTTPStatus.UNAUTHORIZED
    message: ClassVar[str] = "Unauthorized"

    def __init__(self, internal_reason: str | None = None) -> None:
        super().__init__(internal_reason or self.message)
        self.internal_reason = internal_reason

    def public_details(self) -> dict[str, Any]:
        return {}

    def public(self) -> PublicFault:
        """Return the projection that may be sent over the wire."""
        return PublicFault(
            status=int(self.status),
            code=self.code,
            message=self.message,
            details=self.public_details(),
        )


# --------------------------------------------------------------------------- #
# Credentials
# --------------------------------------------------------------------------- #


class InvalidCredentials(AuthFault):
    """Email/password pair rejected. Never says which half was wrong."""

    code = "invalid_credentials"
    message = "Invalid credentials"


# --------------------------------------------------------------------------- #
# Access tokens (raised by the token codec)
# --------------------------------------------------------------------------- #


class TokenError(AuthFault):
    """Base for access-token verification failures."""

    code = "invalid_token"
    message = "Invalid access token"


class MalformedToken(TokenError):
    """Token is not a well-formed JWT or its claims are unusable."""


class InvalidSignature(TokenError):
    """Token MAC does not verify against the service secret."""


class ExpiredAccessToken(TokenError):
    """Token signature is valid but ``now >= exp``."""


# --------------------------------------------------------------------------- #
# Refresh tokens (raised/returned by the session service)
# --------------------------------------------------------------------------- #


REFRESH_NOT_FOUND = "not_found"
REFRESH_REVOKED = "revoked"
REFRESH_EXPIRED = "expired"
REFRESH_USER_MISSING = "user_missing"


class RefreshFault(AuthFault):
    """Base for refresh-token failures; ``reason`` is safe to expose."""

    reason: str = REFRESH_NOT_FOUND

    def public_details(self) -> dict[str, Any]:
        return {"reason": self.reason}


class InvalidRefreshToken(RefreshFault):
    """Refresh token unknown or explicitly revoked."""

    code = "invalid_refresh_token"
    message = "Invalid refresh token"

    def __init__(self, reason: str, internal_reason: str | None = None) -> None:
        if reason not in (REFRESH_NOT_FOUND, REFRESH_REVOKED):
            raise ValueError(f"Unsupported refresh fault reason: {reason!r}")
        super().__init__(internal_reason or f"refresh token {reason}")
        self.reason = reason


class ExpiredRefreshToken(RefreshFault):
    """Refresh token found, not revoked, but past ``expires_at``."""

    code = "refresh_token_expired"
    message = "Refresh token expired"
    reason = REFRESH_EXPIRED


class OrphanedRefreshToken(RefreshFault):
    """Refresh token usable but its owning user no longer exists."""

    code = "user_not_found"
    message = "User not found"
    reason = REFRESH_USER_MISSING


# --------------------------------------------------------------------------- #
# Authorization gate
# --------------------------------------------------------------------------- #


class MissingBearerToken(AuthFault):
    """No ``Authorization: Bearer <token>`` header on the request."""

    code = "missing_bearer_token"
    message = "Missing bearer token"


class InvalidToken(AuthFault):
    """
    Bearer token rejected by the codec.

    The original :class:`TokenError` is chained as ``__cause__`` for logging;
    the caller only ever sees ``invalid_token``.
    """

    code = "invalid_token"
    message = "Invalid token"


class Unauthenticated(AuthFault):
    """A role gate ran without a resolved identity."""

    code = "unauthenticated"
    message = "Authentication required"


class Forbidden(AuthFault):
    """Authenticated identity lacks every required role."""

    code = "forbidden"
    status = HTTPStatus.FORBIDDEN
    message = "Forbidden"

    def __init__(self, need: Iterable[str], have: str) -> None:
        self.need = list(need)
        self.have = have
        super().__init__(f"role {have!r} not in {self.need!r}")

    def public_details(self) -> dict[str, Any]:
        return {"need": list(self.need), "have": self.have}


__all__ = [
    "AuthFault",
    "ExpiredAccessToken",
    "ExpiredRefreshToken",
    "Forbidden",
    "InvalidCredentials",
    "InvalidRefreshToken",
    "InvalidSignature",
    "InvalidToken",
    "MalformedToken",
    "MissingBearerToken",
    "OrphanedRefreshToken",
    "PublicFault",
    "REFRESH_EXPIRED",
    "REFRESH_NOT_FOUND",
    "REFRESH_REVOKED",
    "REFRESH_USER_MISSING",
    "RefreshFault",
    "ServiceError",
    "TokenError",
    "Unauthenticated",
    "violates",
]
