"""User repository: lookups used by credential verification and seeding."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from cleo.models.user import User, normalize_email
from cleo.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It NEVER verifies passwords or issues tokens; that belongs to
    :class:`cleo.services.identity.CredentialStore`.
    """

    model = User

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive, surrounding blanks ignored).

        :param email: Email address to normalise and search.
        :type email: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.email == normalize_email(email))
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_email(self, email: str) -> bool:
        stmt = select(User.id).where(User.email == normalize_email(email))
        return self.session.execute(stmt).first() is not None
