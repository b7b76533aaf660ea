"""Liveness probe: database ping, refresh-token backend and build info."""

from __future__ import annotations

from flask import Blueprint, current_app
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from accounts.api.deps import json_response, timing
from accounts.core import extensions
from accounts.core.extensions import db

bp = Blueprint("health", __name__)


def _check_db() -> str:
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        current_app.logger.exception("health.db_failed")
        return "fail"
    return "ok"


def _check_redis() -> str | None:
    if extensions.redis_client is None:
        return None
    try:
        extensions.redis_client.ping()
    except RedisError:
        current_app.logger.exception("health.redis_failed")
        return "fail"
    return "ok"


@bp.get("/health")
@timing
def healthcheck():
    """Report ``ok`` (200) or ``degraded`` (503) with per-dependency status."""
    checks = {"db": _check_db()}
    redis_status = _check_redis()
    if redis_status is not None:
        checks["redis"] = redis_status
    healthy = all(value == "ok" for value in checks.values())

    config = current_app.config
    payload = {
        "status": "ok" if healthy else "degraded",
        **checks,
        "refresh_backend": config.get("REFRESH_TOKEN_BACKEND", "sql"),
        "version": config.get("APP_VERSION", "dev"),
        "commit": config.get("APP_COMMIT", "unknown"),
    }
    return json_response(payload, status=200 if healthy else 503)
