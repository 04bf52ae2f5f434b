"""Session endpoints: login, refresh, logout and the caller's identity."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from cleo.api.deps import current_identity, json_response, require_auth, timing
from cleo.core.auth import get_auth
from cleo.core.extensions import limiter
from cleo.schemas import (
    IdentitySchema,
    LoginResponseSchema,
    LoginSchema,
    LogoutSchema,
    RefreshResponseSchema,
    RefreshSchema,
)
from cleo.services.auth import LoginIn, LogoutIn, RefreshIn

bp = Blueprint("auth", __name__)

login_schema = LoginSchema()
refresh_schema = RefreshSchema()
logout_schema = LogoutSchema()
login_response_schema = LoginResponseSchema()
refresh_response_schema = RefreshResponseSchema()
identity_schema = IdentitySchema()


def _json_object() -> dict:
    """Request body as a JSON object; anything else reads as an empty one."""

    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def _login_rate_limit() -> str:
    return str(current_app.config.get("AUTH_LOGIN_RATE_LIMIT", "10 per minute"))


@bp.post("/login")
@limiter.limit(_login_rate_limit)
@timing
def login():
    """Verify credentials and issue an access/refresh token pair."""

    data = login_schema.load(request.get_json(silent=True) or {})
    result = get_auth().sessions.login(LoginIn(email=data["email"], password=data["password"]))
    out = result.unwrap()
    return json_response({"data": login_response_schema.dump(out)})


@bp.post("/refresh")
@timing
def refresh():
    """Exchange a refresh token for a new access token (no rotation)."""

    data = refresh_schema.load(_json_object())
    result = get_auth().sessions.refresh(RefreshIn(refresh_token=data["refresh_token"] or ""))
    out = result.unwrap()
    return json_response({"data": refresh_response_schema.dump(out)})


@bp.post("/logout")
@timing
def logout():
    """Revoke the given refresh token. Always answers 204."""

    data = logout_schema.load(_json_object())
    get_auth().sessions.logout(LogoutIn(refresh_token=data["refresh_token"]))
    return "", 204


@bp.get("/me")
@require_auth
@timing
def me():
    """Return the identity carried by the bearer token."""

    return json_response({"data": identity_schema.dump(current_identity())})
