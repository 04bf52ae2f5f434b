"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from cleo.repositories.base import BaseRepository
from cleo.repositories.refresh_token import RefreshTokenRepository
from cleo.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "RefreshTokenRepository",
    "UserRepository",
]
