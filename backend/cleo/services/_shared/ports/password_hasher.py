from __future__ import annotations

from typing import Protocol


class PasswordHasher(Protocol):
    """Port for salted, adaptive one-way password hashing."""

    def hash(self, plain: str) -> str: ...

    def verify(self, plain: str, digest: str) -> bool:
        """Return ``True`` iff ``plain`` matches ``digest``. Never raises on mismatch."""
        ...
