"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'


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
    """Parse an integer from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: int
        Value returned when the variable is unset or blank.

    Returns
    -------
    int
        Parsed value.

    Raises
    ------
    ValueError
        If the variable is set but is not an integer literal.
    """
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    try:
        return int(val.strip())
    except ValueError as exc:
        raise ValueError(f"Environment variable {name} must be an integer, got {val!r}") from exc


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret. Also the fallback material for ``ACTION_TOKEN_KEY``.
    JWT_ACCESS_SECRET / JWT_REFRESH_SECRET: str
        Distinct HMAC secrets for access and refresh tokens.
    JWT_ACCESS_EXPIRES / JWT_REFRESH_EXPIRES: int
        Token lifetimes in seconds (1 hour and 7 days by default).
    JWT_ISSUER: str
        ``iss`` claim written to and required from every token.
    ACTION_TOKEN_KEY: str
        Fernet key for e-mail verification / password reset tokens. When
        blank a key is derived from ``SECRET_KEY``.
    VERIFY_TOKEN_TTL / RESET_TOKEN_TTL: int
        Lifetimes in seconds of the one-time action tokens.
    APP_NAME / APP_URL: str
        Product name used in e-mail subjects and the public base URL used to
        build links sent by e-mail.
    MAIL_*: various
        Outbound e-mail settings. ``MAIL_BACKEND`` is ``"smtp"`` or
        ``"memory"``.
    TASK_DISPATCHER: str
        ``"thread"`` (background pool) or ``"inline"``.
    REFRESH_TOKEN_BACKEND: str
        ``"sql"``, ``"redis"`` (requires ``REDIS_URL``) or ``"memory"``.
    MEDIA_ROOT / MEDIA_URL_PREFIX: str
        Filesystem root and public URL prefix of uploaded avatars.
    AVATAR_MAX_BYTES: int
        Upper bound for avatar uploads.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"
    APP_NAME = os.getenv("APP_NAME", "Accounts Service")
    APP_URL = os.getenv("APP_URL", "http://localhost:8000")
    APP_VERSION = os.getenv("APP_VERSION", "dev")
    APP_COMMIT = os.getenv("APP_COMMIT", "unknown")

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_ACCESS_SECRET = os.getenv("JWT_ACCESS_SECRET", "CHANGE_ME_ACCESS")
    JWT_REFRESH_SECRET = os.getenv("JWT_REFRESH_SECRET", "CHANGE_ME_REFRESH")
    JWT_ACCESS_EXPIRES = env_int("JWT_ACCESS_EXPIRES", 3600)
    JWT_REFRESH_EXPIRES = env_int("JWT_REFRESH_EXPIRES", 7 * 24 * 3600)
    JWT_ISSUER = os.getenv("JWT_ISSUER", "accounts-service")
    ACTION_TOKEN_KEY = os.getenv("ACTION_TOKEN_KEY", "")
    VERIFY_TOKEN_TTL = env_int("VERIFY_TOKEN_TTL", 24 * 3600)
    RESET_TOKEN_TTL = env_int("RESET_TOKEN_TTL", 3600)
    REFRESH_TOKEN_BACKEND = os.getenv("REFRESH_TOKEN_BACKEND", "sql")
    REDIS_URL = os.getenv("REDIS_URL", "")

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Mail
    MAIL_BACKEND = os.getenv("MAIL_BACKEND", "smtp")
    MAIL_HOST = os.getenv("MAIL_HOST", "localhost")
    MAIL_PORT = env_int("MAIL_PORT", 587)
    MAIL_USERNAME = os.getenv("MAIL_USERNAME", "")
    MAIL_PASSWORD = os.getenv("MAIL_PASSWORD", "")
    MAIL_SENDER = os.getenv("MAIL_SENDER", "no-reply@localhost")
    MAIL_USE_TLS = env_bool("MAIL_USE_TLS", True)
    MAIL_TIMEOUT = env_int("MAIL_TIMEOUT", 10)

    # Background tasks
    TASK_DISPATCHER = os.getenv("TASK_DISPATCHER", "thread")
    TASK_MAX_WORKERS = env_int("TASK_MAX_WORKERS", 4)

    # Media
    MEDIA_ROOT = os.getenv("MEDIA_ROOT", "./assets")
    MEDIA_URL_PREFIX = os.getenv("MEDIA_URL_PREFIX", "/assets")
    AVATAR_MAX_BYTES = env_int("AVATAR_MAX_BYTES", 2 * 1024 * 1024)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default and honors ``SQLALCHEMY_ECHO`` for verbose
    SQL logging when requested.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Captures e-mails in memory and runs background tasks inline.
    - Propagates exceptions so pytest can surface tracebacks directly.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    PROPAGATE_EXCEPTIONS = True
    MAIL_BACKEND = "memory"
    TASK_DISPATCHER = "inline"
    REFRESH_TOKEN_BACKEND = "sql"


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug and SQL echoing disabled while relying on WSGI-level log
    configuration for noise control.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
