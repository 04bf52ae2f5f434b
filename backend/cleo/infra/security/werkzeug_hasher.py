from __future__ import annotations

from dataclasses import dataclass

from werkzeug.security import check_password_hash, generate_password_hash

from cleo.services._shared.ports import PasswordHasher


@dataclass(frozen=True, slots=True)
class WerkzeugPasswordHasher(PasswordHasher):
    """
    Salted adaptive hashing via :mod:`werkzeug.security`.

    :param method: Werkzeug method string, e.g. ``"scrypt"`` or
        ``"pbkdf2:sha256:600000"``.
    """

    method: str = "scrypt"
    salt_length: int = 16

    def hash(self, plain: str) -> str:
        if not isinstance(plain, str) or not plain:
            raise ValueError("Password must be a non-empty string.")
        return generate_password_hash(plain, method=self.method, salt_length=self.salt_length)

    def verify(self, plain: str, digest: str) -> bool:
        if not digest or not isinstance(plain, str):
            return False
        # ``check_password_hash`` is untyped; coerce to bool.
        return bool(check_password_hash(digest, plain))
