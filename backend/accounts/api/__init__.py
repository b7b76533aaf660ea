"""HTTP surface: versioned JSON API plus the media file route."""

from __future__ import annotations

from collections.abc import Iterable

from flask import Blueprint, Flask


def _join_prefix(base: str, relative: str) -> str:
    parts = [p for p in (base.strip("/"), relative.strip("/")) if p]
    return "/" + "/".join(parts)


def register_blueprint_group(
    app: Flask,
    *,
    base_prefix: str,
    entries: Iterable[tuple[Blueprint, str]],
) -> None:
    """
    Mount ``(blueprint, relative_prefix)`` pairs below ``base_prefix``.

    ``register_blueprint_group(app, base_prefix="/api/v1", entries=[(bp, "/auth")])``
    serves ``bp`` at ``/api/v1/auth``.
    """
    for bp, relative in entries:
        app.register_blueprint(bp, url_prefix=_join_prefix(base_prefix, relative))


def init_app(app: Flask) -> None:
    """Mount API v1 under ``API_BASE_PREFIX`` and stored media under ``MEDIA_URL_PREFIX``."""
    from accounts.api.media import bp as media_bp
    from accounts.api.v1 import API_VERSION, REGISTRY

    api_base = app.config.get("API_BASE_PREFIX", "/api")
    register_blueprint_group(app, base_prefix=f"{api_base}/{API_VERSION}", entries=REGISTRY)
    register_blueprint_group(
        app,
        base_prefix=app.config.get("MEDIA_URL_PREFIX", "/assets"),
        entries=[(media_bp, "")],
    )


__all__ = ["init_app", "register_blueprint_group"]
