"""Self-service endpoints for the authenticated user."""

from __future__ import annotations

from flask import Blueprint, request

from accounts.api.deps import current_user_id, envelope, parse_user_update, require_auth, timing
from accounts.container import get_container
from accounts.schemas import PasswordChangeSchema, UserPublicSchema
from accounts.services.users.dto import PasswordChangeIn

bp = Blueprint("profile", __name__)

user_schema = UserPublicSchema()
password_change_schema = PasswordChangeSchema()


@bp.get("")
@require_auth
@timing
def get_profile():
    """Return the authenticated user's public view."""

    user = get_container().users.get_user(current_user_id())
    return envelope("profile retrieved", user_schema.dump(user))


@bp.put("")
@require_auth
@timing
def update_profile():
    """Update name, gender and/or avatar (JSON or multipart)."""

    user = get_container().users.update_user(current_user_id(), parse_user_update())
    return envelope("profile updated", user_schema.dump(user))


@bp.post("/change-password")
@require_auth
@timing
def change_password():
    data = password_change_schema.load(request.get_json(silent=True) or {})
    get_container().users.change_password(
        PasswordChangeIn(
            user_id=current_user_id(),
            old_password=data["old_password"],
            new_password=data["new_password"],
        )
    )
    return envelope("password changed")


@bp.post("/logout")
@require_auth
@timing
def logout():
    """Revoke every refresh token of the caller."""

    get_container().auth.logout(current_user_id())
    return envelope("logged out")
