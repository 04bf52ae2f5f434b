from __future__ import annotations

import logging

import pytest

from cleo.core.auth import build_auth_components, warn_on_insecure_secret
from cleo.core.config import (
    DEV_JWT_SECRET,
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    env_bool,
    env_int,
    get_config,
)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("testing", TestingConfig),
        ("production", ProductionConfig),
        (" Development ", DevelopmentConfig),
        ("unknown", DevelopmentConfig),
    ],
)
def test_get_config_by_name(name, expected):
    assert get_config(name) is expected


def test_get_config_reads_app_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    assert get_config() is ProductionConfig


@pytest.mark.parametrize(("raw", "expected"), [("1", True), ("YES", True), ("on", True), ("0", False), ("nah", False)])
def test_env_bool(monkeypatch, raw, expected):
    monkeypatch.setenv("CLEO_FLAG", raw)
    assert env_bool("CLEO_FLAG") is expected


def test_env_bool_default(monkeypatch):
    monkeypatch.delenv("CLEO_FLAG", raising=False)
    assert env_bool("CLEO_FLAG", True) is True


def test_env_int(monkeypatch):
    monkeypatch.setenv("CLEO_NUM", "42")
    assert env_int("CLEO_NUM", 1) == 42
    monkeypatch.setenv("CLEO_NUM", "  ")
    assert env_int("CLEO_NUM", 1) == 1


def test_auth_components_default_lifetimes():
    components = build_auth_components(
        {"JWT_SECRET_KEY": "component-test-secret-with-enough-bytes", "PASSWORD_HASH_METHOD": "pbkdf2:sha256:1000"}
    )
    assert components.token_cfg.access_ttl_seconds == 900
    assert components.token_cfg.refresh_ttl_seconds == 30 * 24 * 3600
    assert components.codec.issuer == "sidex-cleo-api"


class TestInsecureSecretWarning:
    def test_custom_secret_is_silent(self, app):
        assert warn_on_insecure_secret(app) is False

    def test_default_secret_warns_outside_production(self, app, caplog):
        app.config["JWT_SECRET_KEY"] = DEV_JWT_SECRET
        with caplog.at_level(logging.WARNING, logger="cleo.core.auth"):
            assert warn_on_insecure_secret(app) is True

        [record] = [r for r in caplog.records if getattr(r, "event", None) == "config.insecure_jwt_secret"]
        assert record.levelno == logging.WARNING

    def test_default_secret_logs_error_in_production(self, app, caplog):
        app.config.update(JWT_SECRET_KEY=DEV_JWT_SECRET, APP_ENV="production")
        with caplog.at_level(logging.WARNING, logger="cleo.core.auth"):
            assert warn_on_insecure_secret(app) is True

        [record] = [r for r in caplog.records if getattr(r, "event", None) == "config.insecure_jwt_secret"]
        assert record.levelno == logging.ERROR
