from __future__ import annotations

from dataclasses import dataclass

from cleo.services.identity.dto import UserRecord

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email (normalized by the credential store).
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Opaque refresh token. Empty means "not supplied".
    :type refresh_token: str
    """

    refresh_token: str = ""


@dataclass(frozen=True, slots=True)
class LogoutIn:
    """
    Input DTO for logout.

    :param refresh_token: Opaque refresh token, or ``None``/empty when absent.
    :type refresh_token: str | None
    """

    refresh_token: str | None = None


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginOut:
    """
    Output DTO for a successful login.

    :param access_token: Signed access token.
    :param refresh_token: Opaque refresh token.
    :param expires_in: Access token lifetime in seconds.
    :param user: Authenticated user.
    """

    access_token: str
    refresh_token: str
    expires_in: int
    user: UserRecord
    token_type: str = "Bearer"


@dataclass(frozen=True, slots=True)
class RefreshOut:
    """
    Output DTO for a successful refresh. The refresh token is not rotated.

    :param access_token: Newly signed access token.
    :param expires_in: Access token lifetime in seconds.
    """

    access_token: str
    expires_in: int
    token_type: str = "Bearer"


# ------------------------------ Config ------------------------------------ #


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """
    Token lifetimes used by :class:`~cleo.services.auth.service.SessionService`.

    :param access_ttl_seconds: Access token TTL (default 15 minutes).
    :param refresh_ttl_seconds: Refresh token TTL (default 30 days).
    """

    access_ttl_seconds: int = 60 * 15
    refresh_ttl_seconds: int = 60 * 60 * 24 * 30
