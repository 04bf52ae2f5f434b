"""
Unit tests for :class:`SQLAlchemyRefreshTokenStore` against SQLite.
"""

from __future__ import annotations

import logging
from datetime import timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from cleo.infra.sql import SQLAlchemyRefreshTokenStore
from cleo.infra.sql.sqlalchemy_refresh_token_store import token_prefix
from cleo.models.refresh_token import RefreshToken
from cleo.uow import SQLAlchemyUnitOfWork
from tests.factories.refresh_token import RefreshTokenFactory
from tests.factories.user import UserFactory
from tests.helpers.clock import FakeClock


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(session, clock) -> SQLAlchemyRefreshTokenStore:
    return SQLAlchemyRefreshTokenStore(clock=clock)


class TestIssueAndLookup:
    def test_issue_persists_row(self, store, clock, session):
        user = UserFactory(id="admin-1")

        view = store.issue(user.id, 3600)

        row = session.get(RefreshToken, view.token)
        assert row is not None
        assert row.user_id == "admin-1"
        assert row.revoked_at is None
        assert view.expires_at == clock() + timedelta(hours=1)

    def test_lookup_returns_timezone_aware_view(self, store, clock):
        user = UserFactory()
        issued = store.issue(user.id, 60)

        found = store.lookup(issued.token)

        assert found is not None
        assert found.expires_at.tzinfo is not None
        assert found.expires_at == issued.expires_at
        assert found.created_at == clock()
        assert not found.is_expired(clock())

    def test_lookup_miss_logs_prefix_and_total(self, store, caplog):
        RefreshTokenFactory()
        RefreshTokenFactory()
        missing = "f" * 64

        with caplog.at_level(logging.WARNING):
            assert store.lookup(missing) is None

        records = [r for r in caplog.records if getattr(r, "event", None) == "refresh.lookup_miss"]
        assert len(records) == 1
        assert records[0].token_prefix == "ffffffff"
        assert records[0].total_tokens == 2
        assert missing not in records[0].getMessage()

    def test_issue_for_unknown_user_violates_foreign_key(self, store):
        with pytest.raises(IntegrityError):
            store.issue("ghost", 60)


class TestRevoke:
    def test_revoke_sets_timestamp_once(self, store, clock):
        token = RefreshTokenFactory().token
        revoked_at = clock()

        store.revoke(token)
        first = store.lookup(token).revoked_at
        clock.advance(minutes=10)
        store.revoke(token)

        assert first == revoked_at
        assert store.lookup(token).revoked_at == first

    def test_revoke_unknown_is_a_noop(self, store, session):
        store.revoke("0" * 64)
        assert session.query(RefreshToken).count() == 0


class TestHousekeeping:
    def test_purge_expired_removes_only_expired_rows(self, store, clock):
        now = clock()
        RefreshTokenFactory(created_at=now - timedelta(days=31), expires_at=now - timedelta(days=1))
        RefreshTokenFactory(created_at=now - timedelta(days=30), expires_at=now)
        keep = RefreshTokenFactory(created_at=now, expires_at=now + timedelta(days=30)).token

        assert store.purge_expired() == 2
        assert store.lookup(keep) is not None

    def test_deleting_user_cascades_to_tokens(self, store):
        user = UserFactory()
        token = store.issue(user.id).token

        with SQLAlchemyUnitOfWork() as uow:
            uow.users.delete(uow.users.get(user.id))

        assert store.lookup(token) is None


def test_token_prefix_is_eight_characters():
    assert token_prefix("abcdef0123456789") == "abcdef01"
