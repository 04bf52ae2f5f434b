from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from cleo.models.base import utcnow
from cleo.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)

Clock = Callable[[], datetime]


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Own an injectable clock so expiry decisions are testable.
    * Keep services thin, orchestration-only, no web leakage.

    Notes
    -----
    - Services must never touch the global session; always use a Unit of Work.
    - Collaborators are passed to constructors; nothing is looked up globally.
    """

    # ---- Configuration defaults (override per subclass if needed) ----
    DEFAULT_READ_ISOLATION = "READ COMMITTED"

    def __init__(self, *, clock: Clock | None = None) -> None:
        """
        Initialize the base service.

        :param clock: Callable returning the current UTC time. Defaults to
            :func:`cleo.models.base.utcnow`.
        :type clock: Callable[[], datetime] | None
        """
        self._clock: Clock = clock or utcnow

    def now(self) -> datetime:
        return self._clock()

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :returns: Read-write UoW instance.
        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork()

    def ro_uow(
        self, *, isolation: str | None = None, enforce_db_readonly: bool = True
    ) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :param isolation: Transaction isolation level (e.g. "READ COMMITTED").
        :param enforce_db_readonly: Apply ``SET TRANSACTION READ ONLY`` when supported.
        :returns: Read-only UoW instance.
        :rtype: SQLAlchemyReadOnlyUnitOfWork
        """
        return SQLAlchemyReadOnlyUnitOfWork(
            isolation_level=isolation or self.DEFAULT_READ_ISOLATION,
            enforce_db_readonly=enforce_db_readonly,
        )
