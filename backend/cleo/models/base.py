"""Reusable SQLAlchemy column types and mixins shared by models (typed 2.0)."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import DateTime
from sqlalchemy.engine import Dialect
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


def utcnow() -> datetime:
    """Return the current time as a timezone-aware UTC ``datetime``."""
    return datetime.now(UTC)


class UTCDateTime(TypeDecorator[datetime]):
    """Store datetimes as naive UTC and hand them back timezone-aware.

    SQLite drops offsets on the way in, so comparing a value read back from
    the database with ``utcnow()`` would otherwise raise ``TypeError``.
    Naive inputs are taken to already be UTC.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is not None:
            value = value.astimezone(UTC).replace(tzinfo=None)
        return value

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)


class TimestampMixin:
    """Provide an immutable ``created_at`` column.

    Attributes
    ----------
    created_at:
        UTC timestamp assigned in Python on insert, so it is readable before
        the first flush.
    """

    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=utcnow)


class ReprMixin:
    """Provide a concise ``__repr__`` including the class name and key."""

    __repr_key__ = "id"

    def __repr__(self) -> str:
        cls = self.__class__.__name__
        key = getattr(self, self.__repr_key__, None)
        return f"<{cls} {self.__repr_key__}={key}>"
