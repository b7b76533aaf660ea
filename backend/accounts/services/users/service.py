"""User administration and self-service profile management."""

from __future__ import annotations

import io
import logging
from uuid import uuid4

from sqlalchemy.exc import IntegrityError

from accounts.models.user import Gender, User
from accounts.services._shared.base import BaseService
from accounts.services._shared.dto import PageOut
from accounts.services._shared.errors import (
    EmailAlreadyExistsError,
    FileTooLargeError,
    PasswordMismatchError,
    PolicyViolationError,
    UnsupportedFileTypeError,
    UserNotFoundError,
    violates,
)
from accounts.services._shared.policies import (
    check_email,
    check_name,
    check_password_strength,
)
from accounts.services._shared.ports import MediaStorage, PasswordHasher, RefreshTokenStore
from accounts.services.users.dto import (
    AvatarUpload,
    PasswordChangeIn,
    UserCreateIn,
    UserListIn,
    UserPublicOut,
    UserUpdateIn,
)

logger = logging.getLogger(__name__)

AVATAR_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "gif", "webp"})
DEFAULT_AVATAR_MAX_BYTES = 2 * 1024 * 1024


def parse_gender(value: str | Gender | None) -> Gender:
    """
    Coerce a client value into :class:`Gender`.

    :raises PolicyViolationError: For values outside ``Male|Female|Unknown``.
    """
    if value is None:
        return Gender.UNKNOWN
    if isinstance(value, Gender):
        return value
    for member in Gender:
        if member.value.lower() == str(value).strip().lower():
            return member
    raise PolicyViolationError("gender must be one of Male, Female, Unknown")


class UsersService(BaseService):
    """
    CRUD over accounts plus password change and avatar uploads.

    :param hasher: Password hasher.
    :param refresh_store: Used to revoke sessions of deleted users.
    :param media: Storage for avatar files.
    :param avatar_max_bytes: Upper bound for avatar uploads.
    """

    def __init__(
        self,
        *,
        hasher: PasswordHasher,
        refresh_store: RefreshTokenStore,
        media: MediaStorage,
        avatar_max_bytes: int = DEFAULT_AVATAR_MAX_BYTES,
    ) -> None:
        self.hasher = hasher
        self.refresh_store = refresh_store
        self.media = media
        self.avatar_max_bytes = avatar_max_bytes

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def list_users(self, query: UserListIn) -> PageOut[UserPublicOut]:
        """
        Paginated listing of live accounts.

        :param query: Page, size, free-text search and sort tokens.
        :returns: Page of public user views.
        """
        pagination = self.ensure_pagination(page=query.page, limit=query.limit, sort=query.sort)
        with self.ro_uow() as uow:
            page = uow.users.search(pagination, term=query.search)
            items = [UserPublicOut.from_model(u) for u in page.items]
        return PageOut(items=items, total=page.total, page=page.page, limit=page.limit)

    def get_user(self, user_id: int) -> UserPublicOut:
        """
        :raises UserNotFoundError: If no live user has ``user_id``.
        """
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise UserNotFoundError(user_id)
            return UserPublicOut.from_model(user)

    # ------------------------------------------------------------------ #
    # Commands
    # ------------------------------------------------------------------ #

    def create_user(self, dto: UserCreateIn) -> UserPublicOut:
        """
        Administrative create. The account is active immediately.

        :raises PolicyViolationError: If email or password break the policy.
        :raises EmailAlreadyExistsError: If the email is taken (also by a deleted account).
        """
        name = check_name(dto.name)
        email = check_email(dto.email)
        check_password_strength(dto.password)
        gender = parse_gender(dto.gender)

        try:
            with self.rw_uow() as uow:
                if uow.users.exists_by_email(email):
                    raise EmailAlreadyExistsError()
                user = User(
                    name=name,
                    email=email,
                    password_hash=self.hasher.hash(dto.password),
                    gender=gender,
                    is_active=True,
                )
                uow.users.add(user)
                out = UserPublicOut.from_model(user)
        except IntegrityError as exc:
            if violates(exc, "uq_users_email") or violates(exc, "users.email"):
                raise EmailAlreadyExistsError() from exc
            raise
        logger.info("users.created", extra={"user_id": out.id})
        return out

    def update_user(self, user_id: int, dto: UserUpdateIn) -> UserPublicOut:
        """
        Partial update of name, gender and avatar.

        The avatar is validated and stored before the row changes; the
        previous file is removed once the new URL is committed.

        :raises UserNotFoundError: If the user does not exist.
        :raises UnsupportedFileTypeError: If the avatar extension is not allowed.
        :raises FileTooLargeError: If the avatar exceeds the size limit.
        """
        fields: dict[str, object] = {}
        if dto.name is not None:
            fields["name"] = check_name(dto.name)
        if dto.gender is not None:
            fields["gender"] = parse_gender(dto.gender)

        with self.ro_uow() as uow:
            if uow.users.get(user_id) is None:
                raise UserNotFoundError(user_id)

        if dto.avatar is not None:
            fields["avatar"] = self._store_avatar(user_id, dto.avatar)

        previous_avatar: str | None = None
        with self.rw_uow() as uow:
            user = uow.users.get_for_update(user_id)
            if user is None:
                raise UserNotFoundError(user_id)
            previous_avatar = user.avatar
            uow.users.update(user, **fields)
            out = UserPublicOut.from_model(user)

        if "avatar" in fields and previous_avatar and previous_avatar != fields["avatar"]:
            self.media.delete(previous_avatar)
        return out

    def change_password(self, dto: PasswordChangeIn) -> None:
        """
        Replace the password after checking the current one.

        Existing refresh tokens stay valid.

        :raises UserNotFoundError: If the user does not exist.
        :raises PasswordMismatchError: If ``old_password`` is wrong.
        :raises PolicyViolationError: If ``new_password`` breaks the policy.
        """
        with self.rw_uow() as uow:
            user = uow.users.get_for_update(dto.user_id)
            if user is None:
                raise UserNotFoundError(dto.user_id)
            if not self.hasher.verify(user.password_hash, dto.old_password):
                raise PasswordMismatchError()
            check_password_strength(dto.new_password)
            uow.users.set_password_hash(user, self.hasher.hash(dto.new_password))
        logger.info("users.password_changed", extra={"user_id": dto.user_id})

    def delete_user(self, user_id: int) -> None:
        """
        Soft-delete the account and revoke its refresh tokens.

        :raises UserNotFoundError: If the user does not exist.
        """
        with self.rw_uow() as uow:
            user = uow.users.get_for_update(user_id)
            if user is None:
                raise UserNotFoundError(user_id)
            uow.users.delete(user)
        revoked = self.refresh_store.revoke_all_by_user_id(user_id)
        logger.info("users.deleted", extra={"user_id": user_id, "revoked": revoked})

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _store_avatar(self, user_id: int, upload: AvatarUpload) -> str:
        ext = upload.filename.rsplit(".", 1)[-1].lower() if "." in upload.filename else ""
        if ext not in AVATAR_EXTENSIONS:
            raise UnsupportedFileTypeError()
        if upload.size is not None and upload.size > self.avatar_max_bytes:
            raise FileTooLargeError()
        data = upload.stream.read(self.avatar_max_bytes + 1)
        if len(data) > self.avatar_max_bytes:
            raise FileTooLargeError()
        return self.media.save(
            io.BytesIO(data),
            filename=f"avatar_{uuid4().hex}.{ext}",
            folder=f"avatars/user_{user_id}",
        )
