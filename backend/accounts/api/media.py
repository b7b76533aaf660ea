"""Serves uploaded media (avatars) from ``MEDIA_ROOT``."""

from __future__ import annotations

import os

from flask import Blueprint, current_app, send_from_directory

bp = Blueprint("media", __name__)


@bp.get("/<path:filename>")
def serve(filename: str):
    """Return a stored file; unknown paths and traversal attempts yield 404."""

    root = os.path.abspath(current_app.config["MEDIA_ROOT"])
    return send_from_directory(root, filename)
