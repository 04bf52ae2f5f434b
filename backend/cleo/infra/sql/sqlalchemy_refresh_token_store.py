from __future__ import annotations

import logging
from datetime import timedelta

from cleo.models.refresh_token import RefreshToken
from cleo.services._shared.base import BaseService, Clock
from cleo.services._shared.ports import (
    DEFAULT_REFRESH_TTL_SECONDS,
    RefreshTokenStore,
    RefreshTokenView,
    new_refresh_token,
)

log = logging.getLogger(__name__)

TOKEN_PREFIX_LEN = 8


def _to_view(row: RefreshToken) -> RefreshTokenView:
    return RefreshTokenView(
        token=row.token,
        user_id=row.user_id,
        created_at=row.created_at,
        expires_at=row.expires_at,
        revoked_at=row.revoked_at,
    )


def token_prefix(token: str) -> str:
    """Return the loggable prefix of a token; full values never reach the logs."""
    return token[:TOKEN_PREFIX_LEN]


class SQLAlchemyRefreshTokenStore(BaseService, RefreshTokenStore):
    """
    Refresh token store on the ``refresh_tokens`` table.

    Concurrency relies on the database only: ``issue`` is insert-only with a
    256-bit random primary key and ``revoke`` is one conditional ``UPDATE``.
    """

    def __init__(self, *, clock: Clock | None = None) -> None:
        super().__init__(clock=clock)

    def issue(self, user_id: str, ttl_seconds: int = DEFAULT_REFRESH_TTL_SECONDS) -> RefreshTokenView:
        now = self.now()
        row = RefreshToken(
            token=new_refresh_token(),
            user_id=user_id,
            created_at=now,
            expires_at=now + timedelta(seconds=ttl_seconds),
        )
        with self.rw_uow() as uow:
            uow.refresh_tokens.add(row)
            view = _to_view(row)
        log.info(
            "Refresh token issued",
            extra={"event": "refresh.issued", "user_id": user_id, "token_prefix": token_prefix(view.token)},
        )
        return view

    def lookup(self, token: str) -> RefreshTokenView | None:
        with self.ro_uow() as uow:
            row = uow.refresh_tokens.get(token)
            if row is not None:
                return _to_view(row)
            total = uow.refresh_tokens.count()
        log.warning(
            "Refresh token lookup miss",
            extra={
                "event": "refresh.lookup_miss",
                "token_prefix": token_prefix(token),
                "total_tokens": total,
            },
        )
        return None

    def revoke(self, token: str) -> None:
        with self.rw_uow() as uow:
            changed = uow.refresh_tokens.mark_revoked(token, at=self.now())
        if changed:
            log.info(
                "Refresh token revoked",
                extra={"event": "refresh.revoked", "token_prefix": token_prefix(token)},
            )

    def purge_expired(self) -> int:
        """Delete rows already past ``expires_at``; used by operator tooling only."""
        with self.rw_uow() as uow:
            removed = uow.refresh_tokens.purge_expired(before=self.now())
        log.info("Expired refresh tokens purged", extra={"event": "refresh.purged", "total_tokens": removed})
        return removed
