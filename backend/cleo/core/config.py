"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

# Fallback signing secret. Startup logs a deployment warning whenever it is active.
DEV_JWT_SECRET: Final[str] = "dev-secret-change-me-before-deploying-cleo"

# Load .env in development (no-op when the file is missing)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back on ``default``."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val)


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret used for session signing.
    JWT_SECRET_KEY: str
        Symmetric secret for HS256 access tokens, read from ``JWT_SECRET``.
        Falls back to :data:`DEV_JWT_SECRET`, which is reported as a
        misconfiguration at startup.
    JWT_ISSUER: str
        ``iss`` claim stamped on and required from every access token.
    ACCESS_TOKEN_TTL_SECONDS: int
        Access token lifetime (15 minutes by default).
    REFRESH_TOKEN_TTL_SECONDS: int
        Refresh token lifetime (30 days by default).
    PASSWORD_HASH_METHOD: str
        Werkzeug hashing method used for stored password digests.
    SEED_BOOTSTRAP_USERS: bool
        Create the fixed ``admin``/``worker`` accounts at startup.
    AUTO_CREATE_SCHEMA: bool
        Run ``db.create_all()`` at startup instead of relying on migrations.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    AUTH_LOGIN_RATE_LIMIT: str
        Flask-Limiter expression applied to the login endpoint.
    RATELIMIT_STORAGE_URI: str
        Limiter backend; ``memory://`` unless ``REDIS_URL`` is set.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    APP_ENV = os.getenv(ENV_VAR, "development").strip().lower()
    API_BASE_PREFIX = "/api"

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET", DEV_JWT_SECRET)
    JWT_ISSUER = os.getenv("JWT_ISSUER", "sidex-cleo-api")
    JWT_ALGORITHM = "HS256"
    ACCESS_TOKEN_TTL_SECONDS = env_int("ACCESS_TOKEN_TTL_SECONDS", 60 * 15)
    REFRESH_TOKEN_TTL_SECONDS = env_int("REFRESH_TOKEN_TTL_SECONDS", 60 * 60 * 24 * 30)
    PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "scrypt")

    # Bootstrap
    SEED_BOOTSTRAP_USERS = env_bool("SEED_BOOTSTRAP_USERS", False)
    AUTO_CREATE_SCHEMA = env_bool("AUTO_CREATE_SCHEMA", False)

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./cleo.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Rate limiting
    AUTH_LOGIN_RATE_LIMIT = os.getenv("AUTH_LOGIN_RATE_LIMIT", "10 per minute")
    RATELIMIT_ENABLED = env_bool("RATELIMIT_ENABLED", True)
    RATELIMIT_STORAGE_URI = os.getenv("REDIS_URL", "memory://")

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Creates the schema and seeds the fixed ``admin``/``worker`` accounts on
    startup unless explicitly disabled through the environment.
    """

    APP_ENV = "development"
    DEBUG = env_bool("FLASK_DEBUG", True)
    SEED_BOOTSTRAP_USERS = env_bool("SEED_BOOTSTRAP_USERS", True)
    AUTO_CREATE_SCHEMA = env_bool("AUTO_CREATE_SCHEMA", True)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Uses a fast password hash and disables rate limiting.
    - Propagates exceptions so pytest can surface tracebacks directly.
    """

    APP_ENV = "testing"
    TESTING = True
    DEBUG = False
    JWT_SECRET_KEY = "testing-secret-with-enough-bytes-for-hs256"
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SEED_BOOTSTRAP_USERS = False
    AUTO_CREATE_SCHEMA = False
    RATELIMIT_ENABLED = False
    RATELIMIT_STORAGE_URI = "memory://"
    USE_PROXYFIX = False
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Never seeds bootstrap accounts; the schema is owned by migrations.
    """

    APP_ENV = "production"
    DEBUG = False
    SQLALCHEMY_ECHO = False
    SEED_BOOTSTRAP_USERS = False
    AUTO_CREATE_SCHEMA = False
    PROPAGATE_EXCEPTIONS = False


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config(name: str | None = None) -> type[BaseConfig]:
    """Return the configuration class for ``name`` or inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when the name is unset or
    unknown.
    """
    selected = name if name is not None else os.getenv(ENV_VAR, "development")
    return CONFIG_MAP.get(selected.strip().lower(), DevelopmentConfig)
