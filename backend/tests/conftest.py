"""Pytest fixtures: a fresh application and in-memory database per test.

The ``app`` fixture does not keep an application context pushed, so test
client requests get their own context exactly as in production. Tests that
call services directly request ``session`` (or ``app_ctx``) instead.
"""

from __future__ import annotations

from collections.abc import Generator

import pytest
from flask import Flask
from flask.testing import FlaskClient

from cleo.core.auth import get_auth
from cleo.core.config import TestingConfig
from cleo.core.extensions import db as _db
from cleo.factory import create_app
from cleo.seeds import bootstrap
from tests.factories import SQLAlchemySession


def _make_app(config: type[TestingConfig] = TestingConfig) -> Flask:
    application = create_app(config, instance_relative_config=False)
    with application.app_context():
        _db.create_all()
    return application


def _dispose(application: Flask) -> None:
    with application.app_context():
        _db.session.remove()
        _db.drop_all()
        _db.engine.dispose()


@pytest.fixture()
def app_factory() -> Generator:
    """Build extra applications from config subclasses; all are torn down."""
    created: list[Flask] = []

    def _build(config: type[TestingConfig] = TestingConfig) -> Flask:
        application = _make_app(config)
        created.append(application)
        return application

    yield _build
    for application in created:
        _dispose(application)


@pytest.fixture()
def app(app_factory) -> Flask:
    """Create a Flask application configured for testing with an empty schema."""
    return app_factory()


@pytest.fixture()
def app_ctx(app: Flask) -> Generator[Flask, None, None]:
    with app.app_context():
        yield app


@pytest.fixture()
def session(app_ctx: Flask):
    """Provide the Flask-scoped session and wire Factory Boy to it."""
    SQLAlchemySession.set(_db.session)
    yield _db.session
    _db.session.rollback()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    return app.test_client()


@pytest.fixture()
def seeded_app(app: Flask) -> Flask:
    """Application with the bootstrap ``admin``/``worker`` accounts present."""
    with app.app_context():
        bootstrap.run_all(get_auth().credentials)
    return app

