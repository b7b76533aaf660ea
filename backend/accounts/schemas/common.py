"""Common Marshmallow schemas and helpers shared across resources."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from marshmallow import Schema, ValidationError, fields, post_load, validate

from accounts.services._shared.errors import PolicyViolationError


def policy(check: Callable[[str], Any]) -> Callable[[str], None]:
    """Adapt a service policy check into a Marshmallow validator."""

    def _validate(value: str) -> None:
        try:
            check(value)
        except PolicyViolationError as exc:
            raise ValidationError(exc.message) from exc

    return _validate


class PaginationQuerySchema(Schema):
    """Validate ``page``/``limit``/``sort``/``search`` query parameters."""

    def __init__(self, *, default_limit: int = 20, max_limit: int = 100, **kwargs: Any) -> None:
        self._default_limit = default_limit
        self._max_limit = max_limit
        super().__init__(**kwargs)

    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    limit = fields.Integer(validate=validate.Range(min=1))
    sort = fields.String(load_default="")
    search = fields.String(load_default=None, validate=validate.Length(max=254))

    @post_load
    def apply_defaults(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        raw = data.get("sort") or ""
        data["sort"] = [segment.strip() for segment in raw.split(",") if segment.strip()]
        limit = data.get("limit", self._default_limit)
        data["limit"] = min(max(limit, 1), self._max_limit)
        search = (data.get("search") or "").strip()
        data["search"] = search or None
        return data


class MetaSchema(Schema):
    """Metadata block for paginated responses."""

    total = fields.Integer(required=True)
    page = fields.Integer(required=True)
    limit = fields.Integer(required=True)
    total_pages = fields.Integer(required=True)


def build_meta(*, total: int, page: int, limit: int) -> dict[str, int]:
    """Return a ``meta`` mapping for paginated responses."""

    total_pages = (int(total) + int(limit) - 1) // int(limit) if limit else 0
    return {"total": int(total), "page": int(page), "limit": int(limit), "total_pages": total_pages}
