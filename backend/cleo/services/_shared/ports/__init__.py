"""
cleo.services._shared.ports
===========================

Collection of *ports* (hexagonal interfaces) that define the contracts for
authentication infrastructure.

Modules
-------
- :mod:`token_codec`:
    :class:`~.TokenCodec` signs and verifies access tokens.
- :mod:`refresh_token_store`:
    :class:`~.RefreshTokenStore` persists opaque refresh tokens, plus the
    :class:`~.InMemoryRefreshTokenStore` test double.
- :mod:`password_hasher`:
    :class:`~.PasswordHasher` wraps the one-way hashing primitive.

Concrete adapters live under ``cleo.infra``.
"""

from __future__ import annotations

from .password_hasher import PasswordHasher
from .refresh_token_store import (
    DEFAULT_REFRESH_TTL_SECONDS,
    InMemoryRefreshTokenStore,
    RefreshTokenStore,
    RefreshTokenView,
    new_refresh_token,
)
from .token_codec import AccessTokenClaims, TokenCodec, TokenSubject

__all__ = [
    "AccessTokenClaims",
    "DEFAULT_REFRESH_TTL_SECONDS",
    "InMemoryRefreshTokenStore",
    "PasswordHasher",
    "RefreshTokenStore",
    "RefreshTokenView",
    "TokenCodec",
    "TokenSubject",
    "new_refresh_token",
]
