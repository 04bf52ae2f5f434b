from __future__ import annotations

import logging

from cleo.services._shared.base import BaseService, Clock
from cleo.services._shared.errors import (
    REFRESH_NOT_FOUND,
    REFRESH_REVOKED,
    AuthFault,
    ExpiredRefreshToken,
    InvalidCredentials,
    InvalidRefreshToken,
    OrphanedRefreshToken,
)
from cleo.services._shared.ports import RefreshTokenStore, TokenCodec, TokenSubject
from cleo.services._shared.result import Err, Ok
from cleo.services.auth.dto import (
    AuthTokenConfig,
    LoginIn,
    LoginOut,
    LogoutIn,
    RefreshIn,
    RefreshOut,
)
from cleo.services.identity.dto import UserRecord
from cleo.services.identity.service import CredentialStore

log = logging.getLogger(__name__)


def _subject(user: UserRecord) -> TokenSubject:
    return TokenSubject(sub=user.id, email=user.email, role=user.role)


class SessionService(BaseService):
    """
    Session lifecycle service (login / refresh / logout).

    Expected authentication failures are returned as ``Err(fault)``, never
    raised. Refresh tokens are not rotated and access tokens are not tracked
    server-side, so an access token stays valid until its ``exp`` even after
    logout.
    """

    def __init__(
        self,
        *,
        credentials: CredentialStore,
        refresh_store: RefreshTokenStore,
        codec: TokenCodec,
        token_cfg: AuthTokenConfig | None = None,
        clock: Clock | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param credentials: User lookup and password verification.
        :param refresh_store: Persistent refresh token store.
        :param codec: Access token signer.
        :param token_cfg: Access/refresh lifetimes.
        :param clock: Clock used for refresh expiry decisions.
        """
        super().__init__(clock=clock)
        self.credentials = credentials
        self.refresh_store = refresh_store
        self.codec = codec
        self.cfg = token_cfg or AuthTokenConfig()

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> Ok[LoginOut] | Err[AuthFault]:
        """
        Verify credentials, then issue an access token and a refresh token.

        :param dto: Login input.
        :returns: ``Ok(LoginOut)`` or ``Err(InvalidCredentials)``.
        """
        user = self.credentials.verify_credentials(dto.email, dto.password)
        if user is None:
            return Err(InvalidCredentials("credential check failed"))

        access = self.codec.sign(_subject(user), self.cfg.access_ttl_seconds)
        refresh = self.refresh_store.issue(user.id, self.cfg.refresh_ttl_seconds)
        log.info("Login succeeded", extra={"event": "auth.login", "user_id": user.id})
        return Ok(
            LoginOut(
                access_token=access,
                refresh_token=refresh.token,
                expires_in=self.cfg.access_ttl_seconds,
                user=user,
            )
        )

    # ------------------------------------------------------------------ #
    # Refresh
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> Ok[RefreshOut] | Err[AuthFault]:
        """
        Exchange a usable refresh token for a new access token.

        Classification order: unknown, revoked, expired, owner missing.
        Claims come from the **current** user row, so a changed role shows up
        in the new access token.

        :param dto: Refresh input.
        :returns: ``Ok(RefreshOut)`` or ``Err`` with a :class:`RefreshFault`.
        """
        token = dto.refresh_token or ""
        if not token:
            return Err(InvalidRefreshToken(REFRESH_NOT_FOUND, "no refresh token supplied"))

        row = self.refresh_store.lookup(token)
        if row is None:
            return Err(InvalidRefreshToken(REFRESH_NOT_FOUND))
        if row.revoked:
            return Err(InvalidRefreshToken(REFRESH_REVOKED))
        if row.is_expired(self.now()):
            return Err(ExpiredRefreshToken(f"expired at {row.expires_at.isoformat()}"))

        user = self.credentials.get_by_id(row.user_id)
        if user is None:
            return Err(OrphanedRefreshToken(f"user {row.user_id} no longer exists"))

        access = self.codec.sign(_subject(user), self.cfg.access_ttl_seconds)
        log.info("Access token refreshed", extra={"event": "auth.refresh", "user_id": user.id})
        return Ok(RefreshOut(access_token=access, expires_in=self.cfg.access_ttl_seconds))

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, dto: LogoutIn) -> Ok[None]:
        """
        Revoke the refresh token when one is given. Always succeeds.

        Unknown or already revoked tokens are ignored, so repeated logouts are
        indistinguishable from the first.
        """
        if dto.refresh_token:
            self.refresh_store.revoke(dto.refresh_token)
        return Ok(None)
