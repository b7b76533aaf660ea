"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request

from accounts.container import get_container
from accounts.core.errors import Unauthorized
from accounts.schemas.common import PaginationQuerySchema
from accounts.schemas.user import UserUpdateSchema
from accounts.services._shared.errors import TokenInvalidError
from accounts.services._shared.ports import AccessTokenClaims
from accounts.services.users.dto import AvatarUpload, UserUpdateIn

F = TypeVar("F", bound=Callable[..., Any])

BEARER_PREFIX = "Bearer "


def parse_pagination(default_limit: int = 20, max_limit: int = 100) -> dict[str, Any]:
    """Parse ``page``, ``limit``, ``sort`` and ``search`` from ``request.args``."""

    schema = PaginationQuerySchema(default_limit=default_limit, max_limit=max_limit)
    return schema.load(request.args)


def require_auth(func: F) -> F:
    """Ensure the request carries a valid Bearer access token.

    The decoded claims are stored on ``g.current_claims``.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        header = request.headers.get("Authorization", "")
        if not header:
            raise Unauthorized("Authorization header is required")
        if not header.startswith(BEARER_PREFIX):
            raise Unauthorized("Authorization header must use the Bearer scheme")
        token = header[len(BEARER_PREFIX) :].strip()
        try:
            g.current_claims = get_container().signer.validate_access_token(token)
        except TokenInvalidError as exc:
            raise Unauthorized(exc.message, code=exc.code) from exc
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def current_claims() -> AccessTokenClaims:
    """Claims of the authenticated caller (inside ``@require_auth`` views)."""

    claims = getattr(g, "current_claims", None)
    if claims is None:
        raise Unauthorized()
    return claims


def current_user_id() -> int:
    return current_claims().user_id


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def envelope(message: str, data: Any = None, *, meta: dict[str, Any] | None = None, status: int = 200) -> Response:
    """Wrap ``data`` in the standard ``{"message", "data", "meta"?}`` envelope."""

    body: dict[str, Any] = {"message": message, "data": data}
    if meta is not None:
        body["meta"] = meta
    return json_response(body, status=status)


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]


def parse_user_update() -> UserUpdateIn:
    """Build a :class:`UserUpdateIn` from JSON or ``multipart/form-data``.

    Multipart requests may carry the avatar as the ``avatar`` file part.
    """

    if request.mimetype == "multipart/form-data":
        fields = {k: v for k, v in request.form.items() if k in ("name", "gender")}
    else:
        fields = request.get_json(silent=True) or {}
    data = UserUpdateSchema().load(fields)

    avatar: AvatarUpload | None = None
    upload = request.files.get("avatar")
    if upload is not None and upload.filename:
        avatar = AvatarUpload(
            stream=upload.stream,
            filename=upload.filename,
            size=upload.content_length or None,
        )
    return UserUpdateIn(name=data.get("name"), gender=data.get("gender"), avatar=avatar)
