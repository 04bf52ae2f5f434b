"""
CredentialStore
===============

Service over the ``users`` table responsible for:

- Looking users up by id or normalized email.
- Verifying email/password pairs without revealing which half failed.
- The idempotent create-if-absent upsert used for bootstrap accounts.

It never issues tokens; that is :class:`cleo.services.auth.SessionService`.
"""

from __future__ import annotations

import logging
from functools import cached_property

from sqlalchemy.exc import IntegrityError

from cleo.models.user import User, normalize_email
from cleo.repositories.user import UserRepository
from cleo.services._shared.base import BaseService, Clock
from cleo.services._shared.errors import violates
from cleo.services._shared.ports import PasswordHasher
from cleo.services.identity.dto import BootstrapUserIn, UserRecord

log = logging.getLogger(__name__)

# Verified against when the email is unknown so both failure paths hash once.
_TIMING_PLACEHOLDER = "cleo-unknown-user-placeholder"


def _to_record(user: User) -> UserRecord:
    return UserRecord(id=user.id, email=user.email, role=user.role, created_at=user.created_at)


class CredentialStore(BaseService):
    """
    Application service for user credentials.

    :param hasher: Password hashing adapter.
    :param clock: Optional clock override.
    """

    def __init__(self, *, hasher: PasswordHasher, clock: Clock | None = None) -> None:
        super().__init__(clock=clock)
        self._hasher = hasher

    @cached_property
    def _dummy_digest(self) -> str:
        return self._hasher.hash(_TIMING_PLACEHOLDER)

    # --------------------------------------------------------------------- #
    # Retrieval
    # --------------------------------------------------------------------- #

    def find_by_email(self, email: str) -> UserRecord | None:
        """
        Return the user whose normalized email matches, or ``None``.

        :param email: Email in any case, surrounding blanks allowed.
        :type email: str
        :rtype: UserRecord | None
        """
        with self.ro_uow() as uow:
            user = uow.users.get_by_email(email)
            return _to_record(user) if user is not None else None

    def get_by_id(self, user_id: str) -> UserRecord | None:
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            return _to_record(user) if user is not None else None

    # --------------------------------------------------------------------- #
    # Verification
    # --------------------------------------------------------------------- #

    def verify_credentials(self, email: str, password: str) -> UserRecord | None:
        """
        Check an email/password pair.

        Unknown email and wrong password both return ``None``. For an unknown
        email the placeholder digest is still verified so the two paths take
        comparable time. The distinguishing reason is logged, never returned.

        :param email: Candidate email.
        :type email: str
        :param password: Candidate plaintext password.
        :type password: str
        :returns: The matching user, or ``None``.
        :rtype: UserRecord | None
        """
        with self.ro_uow() as uow:
            user = uow.users.get_by_email(email)
            if user is None:
                digest, record = self._dummy_digest, None
            else:
                digest, record = user.password_hash, _to_record(user)

        matched = self._hasher.verify(password, digest)
        if record is None:
            log.info(
                "Credential check failed",
                extra={"event": "auth.credentials_rejected", "reason": "unknown_email"},
            )
            return None
        if not matched:
            log.info(
                "Credential check failed",
                extra={
                    "event": "auth.credentials_rejected",
                    "reason": "password_mismatch",
                    "user_id": record.id,
                },
            )
            return None
        return record

    # --------------------------------------------------------------------- #
    # Bootstrap
    # --------------------------------------------------------------------- #

    def upsert_bootstrap_user(self, dto: BootstrapUserIn) -> UserRecord:
        """
        Create the user if no row has this email; otherwise return the existing row.

        Existing rows are never modified (password and role included).

        :param dto: Bootstrap account definition.
        :type dto: BootstrapUserIn
        :returns: The stored user.
        :rtype: UserRecord
        """
        email = normalize_email(dto.email)
        existing = self.find_by_email(email)
        if existing is not None:
            return existing

        digest = self._hasher.hash(dto.password)
        try:
            with self.rw_uow() as uow:
                repo: UserRepository = uow.users
                user = repo.model(id=dto.id, email=email, password_hash=digest, role=dto.role)
                repo.add(user)
                record = _to_record(user)
        except IntegrityError as exc:
            # A concurrent caller inserted the same email first.
            if not violates(exc, "uq_users_email") and not violates(exc, "users.email"):
                raise
            winner = self.find_by_email(email)
            if winner is None:
                raise
            return winner

        log.info("Bootstrap user created", extra={"event": "user.bootstrapped", "user_id": record.id})
        return record
