"""Construction and registration of the authentication components.

Everything is built once per application from its config and stored in
``app.extensions["cleo.auth"]``. Views reach it through :func:`get_auth`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, cast

from flask import Flask, current_app

from cleo.core.config import DEV_JWT_SECRET
from cleo.infra.jwt import JWTTokenCodec
from cleo.infra.security import WerkzeugPasswordHasher
from cleo.infra.sql import SQLAlchemyRefreshTokenStore
from cleo.services._shared.base import Clock
from cleo.services.auth import AuthTokenConfig, SessionService
from cleo.services.authz import BearerAuthenticator
from cleo.services.identity import CredentialStore

log = logging.getLogger(__name__)

EXTENSION_KEY = "cleo.auth"


@dataclass(frozen=True, slots=True)
class AuthComponents:
    """Wired authentication collaborators for one application."""

    codec: JWTTokenCodec
    hasher: WerkzeugPasswordHasher
    credentials: CredentialStore
    refresh_store: SQLAlchemyRefreshTokenStore
    sessions: SessionService
    authenticator: BearerAuthenticator
    token_cfg: AuthTokenConfig


def build_auth_components(config: Mapping[str, Any], *, clock: Clock | None = None) -> AuthComponents:
    """Build codec, hasher, stores, session service and authenticator.

    Parameters
    ----------
    config: Mapping[str, Any]
        Usually ``app.config``. Reads ``JWT_SECRET_KEY``, ``JWT_ISSUER``,
        ``JWT_ALGORITHM``, ``ACCESS_TOKEN_TTL_SECONDS``,
        ``REFRESH_TOKEN_TTL_SECONDS`` and ``PASSWORD_HASH_METHOD``.
    clock: Callable, optional
        Shared clock override (tests).
    """
    token_cfg = AuthTokenConfig(
        access_ttl_seconds=int(config.get("ACCESS_TOKEN_TTL_SECONDS", 60 * 15)),
        refresh_ttl_seconds=int(config.get("REFRESH_TOKEN_TTL_SECONDS", 60 * 60 * 24 * 30)),
    )
    codec = JWTTokenCodec(
        config["JWT_SECRET_KEY"],
        issuer=config.get("JWT_ISSUER", "sidex-cleo-api"),
        algorithm=config.get("JWT_ALGORITHM", "HS256"),
        clock=clock,
    )
    hasher = WerkzeugPasswordHasher(method=config.get("PASSWORD_HASH_METHOD", "scrypt"))
    credentials = CredentialStore(hasher=hasher, clock=clock)
    refresh_store = SQLAlchemyRefreshTokenStore(clock=clock)
    sessions = SessionService(
        credentials=credentials,
        refresh_store=refresh_store,
        codec=codec,
        token_cfg=token_cfg,
        clock=clock,
    )
    return AuthComponents(
        codec=codec,
        hasher=hasher,
        credentials=credentials,
        refresh_store=refresh_store,
        sessions=sessions,
        authenticator=BearerAuthenticator(codec),
        token_cfg=token_cfg,
    )


def warn_on_insecure_secret(app: Flask) -> bool:
    """Log a deployment warning when the built-in development secret is active.

    Returns ``True`` when the warning fired. Startup continues either way.
    """
    if app.config.get("JWT_SECRET_KEY") != DEV_JWT_SECRET:
        return False
    level = logging.ERROR if app.config.get("APP_ENV") == "production" else logging.WARNING
    log.log(
        level,
        "JWT_SECRET is not set; signing access tokens with the development default",
        extra={"event": "config.insecure_jwt_secret"},
    )
    return True


def init_app(app: Flask) -> None:
    warn_on_insecure_secret(app)
    app.extensions[EXTENSION_KEY] = build_auth_components(app.config)


def get_auth() -> AuthComponents:
    """Return the components registered on ``current_app``."""
    return cast(AuthComponents, current_app.extensions[EXTENSION_KEY])


__all__ = ["AuthComponents", "build_auth_components", "get_auth", "init_app", "warn_on_insecure_secret"]
