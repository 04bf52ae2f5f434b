"""Service layer public API.

Re-exports
----------
- :class:`CredentialStore` (``cleo.services.identity``): user lookup, password
  verification and bootstrap upsert.
- :class:`SessionService` (``cleo.services.auth``): login / refresh / logout.
- :class:`BearerAuthenticator`, :func:`ensure_role` (``cleo.services.authz``):
  request authentication and the role gate.
"""

from __future__ import annotations

from cleo.services.auth import SessionService
from cleo.services.authz import BearerAuthenticator, Identity, ensure_role, extract_bearer
from cleo.services.identity import CredentialStore

__all__ = [
    "BearerAuthenticator",
    "CredentialStore",
    "Identity",
    "SessionService",
    "ensure_role",
    "extract_bearer",
]
