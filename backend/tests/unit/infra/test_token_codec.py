"""
Unit tests for :class:`cleo.infra.jwt.JWTTokenCodec`.

No database involved: the codec only needs a secret and a clock.
"""

from __future__ import annotations

import base64
import json

import jwt
import pytest

from cleo.infra.jwt import DEFAULT_ISSUER, JWTTokenCodec
from cleo.services._shared.errors import (
    ExpiredAccessToken,
    InvalidSignature,
    MalformedToken,
    TokenError,
)
from cleo.services._shared.ports import TokenSubject
from tests.helpers.clock import FakeClock

SECRET = "unit-test-secret-long-enough-for-every-hmac-variant-including-hs512-keys"
OTHER_SECRET = "another-secret-long-enough-for-every-hmac-variant-including-hs512-keys"


def _b64(data: dict) -> str:
    raw = json.dumps(data, separators=(",", ":")).encode()
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def codec(clock) -> JWTTokenCodec:
    return JWTTokenCodec(SECRET, clock=clock)


@pytest.fixture()
def subject() -> TokenSubject:
    return TokenSubject(sub="admin-1", email="admin", role="admin")


def _payload(clock: FakeClock, **overrides) -> dict:
    iat = int(clock().timestamp())
    payload = {
        "sub": "admin-1",
        "email": "admin",
        "role": "admin",
        "iss": DEFAULT_ISSUER,
        "iat": iat,
        "exp": iat + 900,
    }
    payload.update(overrides)
    return payload


class TestSign:
    def test_roundtrip_returns_signed_claims(self, codec, clock, subject):
        token = codec.sign(subject, 900)

        claims = codec.verify(token)

        iat = int(clock().timestamp())
        assert (claims.sub, claims.email, claims.role) == ("admin-1", "admin", "admin")
        assert claims.iss == DEFAULT_ISSUER
        assert claims.iat == iat
        assert claims.exp == iat + 900

    def test_token_is_compact_hs256_jws(self, codec, subject):
        token = codec.sign(subject, 60)

        assert token.count(".") == 2
        assert jwt.get_unverified_header(token)["alg"] == "HS256"

    def test_negative_ttl_is_rejected(self, codec, subject):
        with pytest.raises(ValueError):
            codec.sign(subject, -1)

    def test_empty_secret_is_rejected(self):
        with pytest.raises(ValueError):
            JWTTokenCodec("")


class TestExpiry:
    def test_zero_ttl_is_expired_immediately(self, codec, subject):
        token = codec.sign(subject, 0)

        with pytest.raises(ExpiredAccessToken):
            codec.verify(token)

    def test_valid_until_exp_then_expired(self, codec, clock, subject):
        token = codec.sign(subject, 900)

        clock.advance(seconds=899)
        assert codec.verify(token).sub == "admin-1"

        clock.advance(seconds=1)
        with pytest.raises(ExpiredAccessToken):
            codec.verify(token)

    def test_expired_is_a_token_error(self, codec, subject):
        with pytest.raises(TokenError):
            codec.verify(codec.sign(subject, 0))


class TestSignature:
    def test_tampered_payload_fails_signature(self, codec, clock, subject):
        header, _, signature = codec.sign(subject, 900).split(".")
        forged = ".".join([header, _b64(_payload(clock, role="worker")), signature])

        with pytest.raises(InvalidSignature):
            codec.verify(forged)

    def test_tampered_signature_fails(self, codec, subject):
        header, payload, signature = codec.sign(subject, 900).split(".")
        # Change a middle character; the last one may only carry padding bits.
        mid = len(signature) // 2
        swapped = "A" if signature[mid] != "A" else "B"
        forged_sig = signature[:mid] + swapped + signature[mid + 1 :]

        with pytest.raises(InvalidSignature):
            codec.verify(".".join([header, payload, forged_sig]))

    def test_token_from_other_secret_fails(self, clock, subject):
        foreign = JWTTokenCodec(OTHER_SECRET, clock=clock).sign(subject, 900)

        with pytest.raises(InvalidSignature):
            JWTTokenCodec(SECRET, clock=clock).verify(foreign)


class TestMalformed:
    @pytest.mark.parametrize("token", ["", "garbage", "a.b", "a.b.c", "a.b.c.d"])
    def test_unparseable_inputs(self, codec, token):
        with pytest.raises(MalformedToken):
            codec.verify(token)

    def test_wrong_issuer(self, codec, clock):
        token = jwt.encode(_payload(clock, iss="someone-else"), SECRET, algorithm="HS256")

        with pytest.raises(MalformedToken):
            codec.verify(token)

    def test_missing_claim(self, codec, clock):
        payload = _payload(clock)
        del payload["email"]
        token = jwt.encode(payload, SECRET, algorithm="HS256")

        with pytest.raises(MalformedToken):
            codec.verify(token)

    def test_unknown_role(self, codec, clock):
        token = jwt.encode(_payload(clock, role="root"), SECRET, algorithm="HS256")

        with pytest.raises(MalformedToken):
            codec.verify(token)

    def test_other_algorithm_is_refused(self, codec, clock):
        token = jwt.encode(_payload(clock), SECRET, algorithm="HS512")

        with pytest.raises(MalformedToken):
            codec.verify(token)

    def test_alg_none_is_refused(self, codec, clock):
        header = _b64({"alg": "none", "typ": "JWT"})
        token = f"{header}.{_b64(_payload(clock))}."

        with pytest.raises(MalformedToken):
            codec.verify(token)

    def test_malformed_is_a_token_error(self, codec):
        with pytest.raises(TokenError):
            codec.verify("not-a-token")
