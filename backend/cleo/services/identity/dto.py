"""
DTOs for the credential store.

Data Transfer Objects (DTOs) isolate the service layer from ORM models,
ensuring clear input/output contracts and type safety.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class BootstrapUserIn:
    """
    Input DTO for the create-if-absent upsert.

    :param id: Fixed user identifier (e.g. ``admin-1``).
    :type id: str
    :param email: Login email (normalized before storage).
    :type email: str
    :param password: Raw password; hashed before it reaches the model.
    :type password: str
    :param role: ``admin`` or ``worker``.
    :type role: str
    """

    id: str
    email: str
    password: str
    role: str


@dataclass(frozen=True, slots=True)
class UserRecord:
    """
    Public-safe view of a stored user. Never carries the password hash.

    :param id: User identifier.
    :type id: str
    :param email: Normalized email.
    :type email: str
    :param role: Role string.
    :type role: str
    :param created_at: Creation timestamp (UTC).
    :type created_at: datetime | None
    """

    id: str
    email: str
    role: str
    created_at: datetime | None = None
