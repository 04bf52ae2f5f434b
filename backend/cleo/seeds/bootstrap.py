"""Fixed non-production accounts created at development startup or via ``flask seed run``."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from cleo.models.user import Role
from cleo.services.identity import BootstrapUserIn, CredentialStore

LOGGER = logging.getLogger(__name__)

BOOTSTRAP_USERS: tuple[BootstrapUserIn, ...] = (
    BootstrapUserIn(id="admin-1", email="admin", password="123", role=Role.ADMIN.value),
    BootstrapUserIn(id="worker-1", email="worker", password="123", role=Role.WORKER.value),
)


def run_all(
    credentials: CredentialStore,
    users: Iterable[BootstrapUserIn] = BOOTSTRAP_USERS,
) -> dict[str, dict[str, int]]:
    """Upsert every bootstrap account and report how many were new.

    :param credentials: Store performing the create-if-absent upsert.
    :param users: Accounts to ensure; defaults to :data:`BOOTSTRAP_USERS`.
    :returns: ``{"users": {"created": n, "existing": m}}``.
    """
    created = existing = 0
    for spec in users:
        if credentials.find_by_email(spec.email) is not None:
            existing += 1
            continue
        credentials.upsert_bootstrap_user(spec)
        created += 1
    LOGGER.info("Bootstrap users ensured: created=%d existing=%d", created, existing)
    return {"users": {"created": created, "existing": existing}}
