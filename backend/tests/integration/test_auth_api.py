"""
End-to-end tests of the HTTP session surface.

Every test runs against a fresh in-memory database seeded with the
``admin``/``worker`` bootstrap accounts.
"""

from __future__ import annotations

from datetime import timedelta

import pytest
from sqlalchemy import delete, text

from cleo.api.deps import current_identity, json_response, require_auth, require_roles
from cleo.core.auth import get_auth
from cleo.core.config import TestingConfig
from cleo.core.extensions import db
from cleo.models.refresh_token import RefreshToken
from cleo.models.user import User
from cleo.seeds import bootstrap
from tests.helpers.http import API, assert_problem, bearer, login, login_tokens


@pytest.fixture()
def client(seeded_app):
    return seeded_app.test_client()


def _refresh(client, token):
    return client.post(f"{API}/auth/refresh", json={"refresh_token": token})


# --------------------------------------------------------------------------- #
# Login
# --------------------------------------------------------------------------- #


class TestLogin:
    def test_admin_login_returns_token_pair(self, client, seeded_app):
        data = login_tokens(client, "admin", "123")

        assert data["token_type"] == "Bearer"
        assert data["expires_in"] == 900
        assert data["user"] == {"id": "admin-1", "email": "admin", "role": "admin"}
        assert len(data["refresh_token"]) == 64

        with seeded_app.app_context():
            claims = get_auth().codec.verify(data["access_token"])
        assert (claims.sub, claims.role, claims.iss) == ("admin-1", "admin", "sidex-cleo-api")

    def test_email_is_case_insensitive(self, client):
        assert login(client, " WORKER ", "123").status_code == 200

    @pytest.mark.parametrize(("email", "password"), [("admin", "wrong"), ("ghost", "123")])
    def test_bad_credentials_are_indistinguishable(self, client, email, password):
        body = assert_problem(login(client, email, password), 401, "invalid_credentials")

        assert body["detail"] == "Invalid credentials"
        assert "details" not in body

    @pytest.mark.parametrize("payload", [{}, {"email": "admin"}, {"password": "123"}, {"email": "", "password": ""}])
    def test_missing_fields_are_validation_errors(self, client, payload):
        resp = client.post(f"{API}/auth/login", json=payload)
        body = assert_problem(resp, 422, "validation_error")
        assert "errors" in body["details"]

    def test_non_json_body_is_validation_error(self, client):
        resp = client.post(f"{API}/auth/login", data="email=admin", content_type="text/plain")
        assert_problem(resp, 422, "validation_error")

    def test_unknown_fields_are_ignored(self, client):
        resp = client.post(f"{API}/auth/login", json={"email": "admin", "password": "123", "remember": True})
        assert resp.status_code == 200

    def test_each_login_persists_a_refresh_row(self, client, seeded_app):
        login_tokens(client, "admin", "123")
        login_tokens(client, "admin", "123")

        with seeded_app.app_context():
            assert db.session.query(RefreshToken).filter_by(user_id="admin-1").count() == 2


# --------------------------------------------------------------------------- #
# Refresh
# --------------------------------------------------------------------------- #


class TestRefresh:
    def test_refresh_returns_new_access_token(self, client):
        tokens = login_tokens(client, "worker", "123")

        resp = _refresh(client, tokens["refresh_token"])

        assert resp.status_code == 200
        data = resp.get_json()["data"]
        assert set(data) == {"access_token", "token_type", "expires_in"}
        me = client.get(f"{API}/auth/me", headers=bearer(data["access_token"]))
        assert me.get_json()["data"]["id"] == "worker-1"

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"refresh_token": ""},
            {"refresh_token": None},
            {"refresh_token": "f" * 64},
            {"refresh_token": "x" * 300},
            {"refresh_token": 123},
            {"refresh_token": ["a"]},
            ["not", "an", "object"],
        ],
    )
    def test_unknown_token_is_not_found(self, client, payload):
        body = assert_problem(client.post(f"{API}/auth/refresh", json=payload), 401, "invalid_refresh_token")
        assert body["details"] == {"reason": "not_found"}

    def test_expired_token(self, client, seeded_app):
        token = login_tokens(client, "admin", "123")["refresh_token"]
        with seeded_app.app_context():
            row = db.session.get(RefreshToken, token)
            row.expires_at = row.created_at - timedelta(seconds=1)
            db.session.commit()

        body = assert_problem(_refresh(client, token), 401, "refresh_token_expired")
        assert body["details"] == {"reason": "expired"}

    def test_orphaned_token(self, client, seeded_app):
        token = login_tokens(client, "worker", "123")["refresh_token"]
        with seeded_app.app_context():
            # Drop the owner without cascading so the token row survives.
            db.session.execute(text("PRAGMA foreign_keys=OFF"))
            db.session.execute(delete(User).where(User.id == "worker-1"))
            db.session.commit()
            db.session.execute(text("PRAGMA foreign_keys=ON"))

        body = assert_problem(_refresh(client, token), 401, "user_not_found")
        assert body["details"] == {"reason": "user_missing"}


# --------------------------------------------------------------------------- #
# Logout
# --------------------------------------------------------------------------- #


class TestLogout:
    @pytest.mark.parametrize(
        "payload",
        [
            None,
            {},
            {"refresh_token": None},
            {"refresh_token": "nope"},
            {"refresh_token": 123},
            {"refresh_token": ["a"]},
            [1, 2],
            "tok",
        ],
    )
    def test_always_no_content(self, client, payload):
        resp = client.post(f"{API}/auth/logout", json=payload)
        assert resp.status_code == 204
        assert resp.data == b""

    def test_scenario_b_revoked_refresh_but_access_still_valid(self, client):
        tokens = login_tokens(client, "admin", "123")

        assert client.post(f"{API}/auth/logout", json={"refresh_token": tokens["refresh_token"]}).status_code == 204
        assert client.post(f"{API}/auth/logout", json={"refresh_token": tokens["refresh_token"]}).status_code == 204

        body = assert_problem(_refresh(client, tokens["refresh_token"]), 401, "invalid_refresh_token")
        assert body["details"] == {"reason": "revoked"}
        # No server-side access-token revocation: it lives until exp.
        assert client.get(f"{API}/auth/me", headers=bearer(tokens["access_token"])).status_code == 200


# --------------------------------------------------------------------------- #
# Authorization gate
# --------------------------------------------------------------------------- #


class TestRoleGate:
    def test_scenario_a_admin(self, seeded_app):
        @seeded_app.get("/_test/worker-only")
        @require_auth
        @require_roles("worker")
        def worker_only():
            return json_response({"id": current_identity().id})

        client = seeded_app.test_client()
        token = login_tokens(client, "admin", "123")["access_token"]

        assert client.get(f"{API}/admin/secret", headers=bearer(token)).status_code == 200
        body = assert_problem(client.get("/_test/worker-only", headers=bearer(token)), 403, "forbidden")
        assert body["details"] == {"need": ["worker"], "have": "admin"}

    def test_worker_reaches_worker_resource_only(self, client):
        token = login_tokens(client, "worker", "123")["access_token"]

        ok = client.get(f"{API}/worker/secret", headers=bearer(token))
        assert ok.status_code == 200
        assert ok.get_json()["data"]["user_id"] == "worker-1"

        body = assert_problem(client.get(f"{API}/admin/secret", headers=bearer(token)), 403, "forbidden")
        assert body["details"] == {"need": ["admin"], "have": "worker"}

    def test_admin_is_listed_on_worker_resource(self, client):
        token = login_tokens(client, "admin", "123")["access_token"]
        assert client.get(f"{API}/worker/secret", headers=bearer(token)).status_code == 200

    @pytest.mark.parametrize(
        "headers",
        [{"Authorization": "Bearer garbage"}, {"Authorization": "Bearer a.b.c"}],
    )
    def test_scenario_c_garbage_token(self, client, headers):
        body = assert_problem(client.get(f"{API}/admin/secret", headers=headers), 401, "invalid_token")
        assert "details" not in body

    @pytest.mark.parametrize("headers", [{}, {"Authorization": "Basic dXNlcjpwYXNz"}, {"Authorization": "Bearer "}])
    def test_scenario_c_missing_bearer(self, client, headers):
        assert_problem(client.get(f"{API}/admin/secret", headers=headers), 401, "missing_bearer_token")

    def test_me_returns_identity(self, client):
        token = login_tokens(client, "worker", "123")["access_token"]

        resp = client.get(f"{API}/auth/me", headers=bearer(token))

        assert resp.get_json()["data"] == {"id": "worker-1", "email": "worker", "role": "worker"}


# --------------------------------------------------------------------------- #
# Ambient surface
# --------------------------------------------------------------------------- #


def test_health(client):
    resp = client.get(f"{API}/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok", "db": "ok", "env": "testing", "version": "dev"}


def test_unknown_route_is_problem_json(client):
    body = assert_problem(client.get(f"{API}/nope"), 404, "not_found")
    assert body["instance"] == f"{API}/nope"


class _RateLimited(TestingConfig):
    RATELIMIT_ENABLED = True
    AUTH_LOGIN_RATE_LIMIT = "2 per minute"


def test_login_is_rate_limited(app_factory):
    limited = app_factory(_RateLimited)
    with limited.app_context():
        bootstrap.run_all(get_auth().credentials)
    client = limited.test_client()

    assert login(client, "admin", "wrong").status_code == 401
    assert login(client, "admin", "wrong").status_code == 401
    assert_problem(login(client, "admin", "123"), 429, "too_many_requests")
