"""User administration endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from accounts.api.deps import envelope, parse_pagination, parse_user_update, require_auth, timing
from accounts.container import get_container
from accounts.schemas import UserCreateSchema, UserPublicSchema, build_meta
from accounts.services.users.dto import UserCreateIn, UserListIn

bp = Blueprint("users", __name__)

user_schema = UserPublicSchema()
user_list_schema = UserPublicSchema(many=True)
user_create_schema = UserCreateSchema()


@bp.get("")
@require_auth
@timing
def list_users():
    """Return paginated users, optionally filtered by ``search``."""

    query = parse_pagination()
    page = get_container().users.list_users(
        UserListIn(
            page=query["page"],
            limit=query["limit"],
            search=query["search"],
            sort=tuple(query["sort"]),
        )
    )
    meta = build_meta(total=page.total, page=page.page, limit=page.limit)
    return envelope("users retrieved", user_list_schema.dump(page.items), meta=meta)


@bp.get("/<int:user_id>")
@require_auth
@timing
def get_user(user_id: int):
    user = get_container().users.get_user(user_id)
    return envelope("user retrieved", user_schema.dump(user))


@bp.post("")
@require_auth
@timing
def create_user():
    """Create a pre-activated user."""

    data = user_create_schema.load(request.get_json(silent=True) or {})
    user = get_container().users.create_user(
        UserCreateIn(
            name=data["name"],
            email=data["email"],
            password=data["password"],
            gender=data["gender"],
        )
    )
    return envelope("user created", user_schema.dump(user), status=201)


@bp.put("/<int:user_id>")
@require_auth
@timing
def update_user(user_id: int):
    user = get_container().users.update_user(user_id, parse_user_update())
    return envelope("user updated", user_schema.dump(user))


@bp.delete("/<int:user_id>")
@require_auth
@timing
def delete_user(user_id: int):
    """Soft-delete a user and revoke its sessions."""

    get_container().users.delete_user(user_id)
    return envelope("user deleted")
