from __future__ import annotations

import pytest

from cleo.infra.security import WerkzeugPasswordHasher


@pytest.fixture()
def hasher() -> WerkzeugPasswordHasher:
    return WerkzeugPasswordHasher(method="pbkdf2:sha256:1000")


def test_hash_verifies_and_never_equals_plaintext(hasher):
    digest = hasher.hash("123")

    assert digest != "123"
    assert digest.startswith("pbkdf2:sha256:1000$")
    assert hasher.verify("123", digest) is True
    assert hasher.verify("1234", digest) is False


def test_hashes_are_salted(hasher):
    assert hasher.hash("same") != hasher.hash("same")


def test_empty_password_cannot_be_hashed(hasher):
    with pytest.raises(ValueError):
        hasher.hash("")


def test_empty_digest_never_verifies(hasher):
    assert hasher.verify("anything", "") is False
