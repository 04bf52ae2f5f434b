"""WSGI-level HTTP concerns: CORS policy and reverse-proxy header trust."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix

# Browser clients send bearer tokens and may correlate requests.
ALLOWED_HEADERS = ("Authorization", "Content-Type", "X-Request-ID", "X-Correlation-ID")
EXPOSED_HEADERS = ("X-Request-ID",)


def parse_origins(raw: str | None) -> list[str]:
    """Split a comma-separated ``CORS_ORIGINS`` value into clean entries."""
    return [o.strip() for o in (raw or "").split(",") if o.strip()]


def init_app(app: Flask) -> None:
    """Install CORS for ``/api/*`` and, when enabled, :class:`ProxyFix`.

    Parameters
    ----------
    app: flask.Flask
        Application whose ``CORS_ORIGINS``, ``CORS_MAX_AGE`` and
        ``USE_PROXYFIX`` settings are consulted.

    Notes
    -----
    A blank or ``"*"`` origin list allows any origin but disables credential
    support. ``ProxyFix`` trusts a single hop for ``X-Forwarded-*`` headers so
    that rate limiting keys on the real client address.
    """
    origins = parse_origins(app.config.get("CORS_ORIGINS"))
    wildcard = not origins or origins == ["*"]

    CORS(
        app,
        resources={r"/api/*": {"origins": "*" if wildcard else origins}},
        allow_headers=list(ALLOWED_HEADERS),
        expose_headers=list(EXPOSED_HEADERS),
        supports_credentials=not wildcard,
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )

    if app.config.get("USE_PROXYFIX", True):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)
