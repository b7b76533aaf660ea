"""Extension singletons: SQLAlchemy, Flask-Migrate and the Redis client."""

from __future__ import annotations

import logging

import redis
from flask import Flask
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError
from sqlalchemy import MetaData

log = logging.getLogger(__name__)

# Constraint names are referenced by the migration and by ``violates()``
NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

db: SQLAlchemy = SQLAlchemy(
    metadata=MetaData(naming_convention=NAMING_CONVENTION),
    session_options={"autoflush": False},
)
migrate = Migrate(render_as_batch=True)
redis_client: redis.Redis | None = None


def connect_redis(url: str) -> redis.Redis:
    """
    Open a client for ``url`` and ping it once.

    :raises RuntimeError: The server did not answer.
    """
    client = redis.Redis.from_url(url)
    try:
        client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {url!r}") from exc
    return client


def init_app(app: Flask) -> None:
    """
    Bind ``db`` and ``migrate`` and, when ``REDIS_URL`` is set, connect Redis.

    The models package is imported here so Alembic autogenerate sees the
    ``users`` and ``refresh_tokens`` tables.
    """
    global redis_client

    db.init_app(app)
    from accounts import models  # noqa: F401

    migrate.init_app(app, db)

    url = app.config.get("REDIS_URL")
    if not url:
        redis_client = None
        app.extensions.pop("redis_client", None)
        return
    redis_client = connect_redis(url)
    app.extensions["redis_client"] = redis_client
    log.info("redis.connected", extra={"backend": "redis"})


def get_redis() -> redis.Redis:
    """Return the client connected by :func:`init_app`."""
    if redis_client is None:
        raise RuntimeError("Redis client is not initialized. Set REDIS_URL and call init_app().")
    return redis_client
