"""Refresh token model: opaque long-lived session credential."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cleo.core.extensions import db

from .base import ReprMixin, TimestampMixin, UTCDateTime


class RefreshToken(ReprMixin, TimestampMixin, db.Model):
    """
    One row per successful login.

    The token value itself is the primary key (64 lowercase hex characters).
    A row is usable iff ``revoked_at`` is ``None`` and the current time is
    strictly before ``expires_at``.
    """

    __tablename__ = "refresh_tokens"
    __repr_key__ = "user_id"

    token: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    expires_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    revoked_at: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)

    user = relationship("User", back_populates="refresh_tokens")

    __table_args__ = (
        Index("ix_refresh_tokens_user_id", "user_id"),
        Index("ix_refresh_tokens_expires_at", "expires_at"),
    )

    @property
    def is_revoked(self) -> bool:
        return self.revoked_at is not None
