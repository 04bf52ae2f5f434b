"""User model: an authenticatable account with a single role."""

from __future__ import annotations

from enum import Enum
from typing import Any
from uuid import uuid4

from sqlalchemy import CheckConstraint, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from cleo.core.extensions import db

from .base import ReprMixin, TimestampMixin


class Role(str, Enum):
    """Closed set of roles understood by the authorization gate."""

    ADMIN = "admin"
    WORKER = "worker"

    @classmethod
    def values(cls) -> tuple[str, ...]:
        return tuple(member.value for member in cls)


def normalize_email(value: str) -> str:
    """Return ``value`` trimmed and lower-cased (the stored email form)."""
    return value.strip().lower()


def _new_user_id() -> str:
    return uuid4().hex


class User(ReprMixin, TimestampMixin, db.Model):
    """
    Authentication identity.

    Rows are created by the idempotent bootstrap upsert and never mutated by
    the authentication core. Deleting a user cascades to its refresh tokens.

    Fields
    ------
    id : str
        Opaque identifier (bootstrap accounts use fixed ids such as ``admin-1``).
    email : str
        Login email. Stored normalized (lowercase, trimmed) and unique.
    password_hash : str
        Salted adaptive hash; plaintext is never stored.
    role : str
        One of :class:`Role`, enforced by a CHECK constraint.
    created_at : datetime
        Creation timestamp (from mixin).
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_user_id)
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(16), nullable=False)

    refresh_tokens = relationship(
        "RefreshToken",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        CheckConstraint(
            "role IN ({})".format(", ".join(f"'{r}'" for r in Role.values())),
            name="role_allowed",
        ),
    )

    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize email. Bootstrap accounts use bare handles such as
        ``admin``, so no address syntax is enforced here.

        :raises ValueError: If email is missing or blank.
        """
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Email is required.")
        return normalize_email(value)

    @validates("role")
    def _validate_role(self, key: str, value: Any) -> str:
        raw = value.value if isinstance(value, Role) else value
        if raw not in Role.values():
            raise ValueError(f"Unknown role: {raw!r}")
        return str(raw)
