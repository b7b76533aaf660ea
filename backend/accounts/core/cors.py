"""Cross-origin policy for the JSON API."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

# Request headers the SPA sends: bearer auth, refresh rotation, correlation id
ALLOWED_HEADERS = ["Authorization", "Content-Type", "X-Refresh-Token", "X-Request-ID"]
EXPOSED_HEADERS = ["X-Request-ID"]


def parse_origins(raw: str | None) -> list[str] | None:
    """Split ``CORS_ORIGINS``; ``None`` means any origin (blank or ``*``)."""
    origins = [o.strip() for o in (raw or "").split(",") if o.strip()]
    if not origins or origins == ["*"]:
        return None
    return origins


def init_app(app: Flask) -> None:
    """
    Enable CORS on ``/api/*``.

    Credentials are only allowed with an explicit origin list; a wildcard
    policy answers ``*`` without them.
    """
    origins = parse_origins(app.config.get("CORS_ORIGINS"))
    CORS(
        app,
        resources={r"/api/*": {"origins": origins or "*"}},
        supports_credentials=origins is not None,
        allow_headers=ALLOWED_HEADERS,
        expose_headers=EXPOSED_HEADERS,
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
