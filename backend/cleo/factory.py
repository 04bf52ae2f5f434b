"""Application factory wiring Flask extensions and blueprints."""

from __future__ import annotations

import logging

from flask import Flask

from cleo.core.config import BaseConfig, get_config
from cleo.core.logger import configure_logging, init_app as init_logging

log = logging.getLogger(__name__)


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    Parameters
    ----------
    config: str | type | object, optional
        Config name (``"testing"``), class, or object. Defaults to the class
        selected by ``APP_ENV``.

    Notes
    -----
    When ``AUTO_CREATE_SCHEMA`` is set the tables are created at startup, and
    when ``SEED_BOOTSTRAP_USERS`` is set the fixed admin/worker accounts are
    upserted. Both are on in development only.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    if isinstance(config, str):
        config = get_config(config)
    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from cleo.core import extensions, http

    extensions.init_app(app)
    init_logging(app)
    http.init_app(app)

    from cleo.core import auth

    auth.init_app(app)

    from cleo.api import init_app as init_api

    init_api(app)

    from cleo.core import errors

    errors.init_app(app)

    from cleo import cli as app_cli

    app_cli.init_app(app)

    _bootstrap(app)
    return app


def _bootstrap(app: Flask) -> None:
    """Create the schema and bootstrap accounts when configured to."""
    if not (app.config.get("AUTO_CREATE_SCHEMA") or app.config.get("SEED_BOOTSTRAP_USERS")):
        return

    from cleo.core.auth import get_auth
    from cleo.core.extensions import db
    from cleo.seeds import bootstrap

    with app.app_context():
        if app.config.get("AUTO_CREATE_SCHEMA"):
            db.create_all()
        if app.config.get("SEED_BOOTSTRAP_USERS"):
            if app.config.get("APP_ENV") == "production":
                log.error("Refusing to seed bootstrap users in production")
                return
            bootstrap.run_all(get_auth().credentials)
