"""Refresh-token repository: insert, lookup, conditional revoke and purge."""

from __future__ import annotations

from datetime import datetime
from typing import Any, cast

from sqlalchemy import delete, update
from sqlalchemy.orm import InstrumentedAttribute

from cleo.models.refresh_token import RefreshToken
from cleo.repositories.base import BaseRepository


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Persistence-only repository for :class:`RefreshToken`.

    Rows are inserted once and mutated at most once (revocation). Nothing here
    classifies tokens as usable or not; callers do that.
    """

    model = RefreshToken

    def _pk_attr(self) -> InstrumentedAttribute[Any] | None:
        return RefreshToken.token

    def mark_revoked(self, token: str, *, at: datetime) -> bool:
        """Set ``revoked_at`` unless the row is unknown or already revoked.

        Runs as a single conditional ``UPDATE`` so concurrent revocations of
        the same token cannot overwrite the first timestamp.

        :param token: Refresh token value.
        :param at: Revocation timestamp (UTC).
        :returns: ``True`` when a row transitioned to revoked.
        """
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.token == token, RefreshToken.revoked_at.is_(None))
            .values(revoked_at=at)
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        return bool(cast(Any, result).rowcount)

    def purge_expired(self, *, before: datetime) -> int:
        """Delete rows whose ``expires_at`` is at or before ``before``.

        :returns: Number of deleted rows.
        """
        stmt = (
            delete(RefreshToken)
            .where(RefreshToken.expires_at <= before)
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        return int(cast(Any, result).rowcount or 0)
