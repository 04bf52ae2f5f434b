from __future__ import annotations

import secrets
import threading
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Protocol

from cleo.models.base import utcnow
from cleo.services._shared.base import Clock

DEFAULT_REFRESH_TTL_SECONDS = 60 * 60 * 24 * 30
TOKEN_BYTES = 32


def new_refresh_token() -> str:
    """Return 64 lowercase hex characters from a CSPRNG (256 bits)."""
    return secrets.token_hex(TOKEN_BYTES)


@dataclass(frozen=True, slots=True)
class RefreshTokenView:
    """
    Read-model for a stored refresh token.

    :ivar token: The opaque token value.
    :ivar user_id: Owner user id.
    :ivar created_at: Issue time (UTC).
    :ivar expires_at: Absolute expiration (UTC).
    :ivar revoked_at: Revocation time, ``None`` while active.
    """

    token: str
    user_id: str
    created_at: datetime
    expires_at: datetime
    revoked_at: datetime | None = None

    @property
    def revoked(self) -> bool:
        return self.revoked_at is not None

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def is_usable(self, now: datetime) -> bool:
        return not self.revoked and not self.is_expired(now)


class RefreshTokenStore(Protocol):
    """
    Persistent map from opaque refresh tokens to their owner and lifecycle.

    ``lookup`` reports facts only; classifying a token as unknown, revoked or
    expired is the caller's job.
    """

    def issue(self, user_id: str, ttl_seconds: int = DEFAULT_REFRESH_TTL_SECONDS) -> RefreshTokenView:
        """Create and persist a fresh token for ``user_id``."""
        ...

    def lookup(self, token: str) -> RefreshTokenView | None:
        """Return the stored row for ``token`` or ``None`` when absent."""
        ...

    def revoke(self, token: str) -> None:
        """Set ``revoked_at`` if the token exists and is not yet revoked; else no-op."""
        ...


class InMemoryRefreshTokenStore(RefreshTokenStore):
    """
    Dict-backed refresh token store for unit tests.

    .. note::
       A threading lock keeps issue/revoke atomic under concurrent callers.
    """

    def __init__(self, *, clock: Clock | None = None) -> None:
        self._rows: dict[str, RefreshTokenView] = {}
        self._lock = threading.Lock()
        self._clock: Clock = clock or utcnow

    def issue(self, user_id: str, ttl_seconds: int = DEFAULT_REFRESH_TTL_SECONDS) -> RefreshTokenView:
        now = self._clock()
        with self._lock:
            token = new_refresh_token()
            while token in self._rows:
                token = new_refresh_token()
            view = RefreshTokenView(
                token=token,
                user_id=user_id,
                created_at=now,
                expires_at=now + timedelta(seconds=ttl_seconds),
            )
            self._rows[token] = view
            return view

    def lookup(self, token: str) -> RefreshTokenView | None:
        with self._lock:
            return self._rows.get(token)

    def revoke(self, token: str) -> None:
        now = self._clock()
        with self._lock:
            row = self._rows.get(token)
            if row is None or row.revoked:
                return
            self._rows[token] = replace(row, revoked_at=now)

    def drop_user(self, user_id: str) -> int:
        """Remove every token owned by ``user_id`` (mirrors ``ON DELETE CASCADE``)."""
        with self._lock:
            doomed = [t for t, row in self._rows.items() if row.user_id == user_id]
            for t in doomed:
                del self._rows[t]
            return len(doomed)

    def __len__(self) -> int:
        return len(self._rows)
