from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO

from accounts.models.user import Gender, User


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """
    Public view of an account. Never carries the password hash.

    :param id: User id.
    :param name: Display name.
    :param email: Normalized email.
    :param avatar: Public avatar URL, if any.
    :param gender: Gender value (``"Male"``, ``"Female"`` or ``"Unknown"``).
    :param is_active: Whether the email has been verified.
    :param created_at: Creation timestamp.
    """

    id: int
    name: str
    email: str
    avatar: str | None
    gender: str
    is_active: bool
    created_at: datetime | None = None

    @classmethod
    def from_model(cls, user: User) -> UserPublicOut:
        gender = user.gender.value if isinstance(user.gender, Gender) else str(user.gender)
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            avatar=user.avatar,
            gender=gender,
            is_active=bool(user.is_active),
            created_at=user.created_at,
        )


@dataclass(frozen=True, slots=True)
class AvatarUpload:
    """
    Uploaded avatar file.

    :param stream: Readable binary stream.
    :param filename: Client-side file name (only the extension is trusted).
    :param size: Size in bytes, if the transport reported it.
    """

    stream: BinaryIO
    filename: str
    size: int | None = None


@dataclass(frozen=True, slots=True)
class UserCreateIn:
    name: str
    email: str
    password: str
    gender: str = Gender.UNKNOWN.value


@dataclass(frozen=True, slots=True)
class UserUpdateIn:
    """
    Partial profile update. ``None`` means "leave unchanged".

    :param name: New display name.
    :param gender: New gender value.
    :param avatar: New avatar upload.
    """

    name: str | None = None
    gender: str | None = None
    avatar: AvatarUpload | None = None


@dataclass(frozen=True, slots=True)
class PasswordChangeIn:
    user_id: int
    old_password: str
    new_password: str


@dataclass(frozen=True, slots=True)
class UserListIn:
    """
    Listing query.

    :param page: 1-based page.
    :param limit: Page size.
    :param search: Case-insensitive substring matched on name or email.
    :param sort: Sort tokens such as ``["-created_at"]``.
    """

    page: int = 1
    limit: int = 20
    search: str | None = None
    sort: tuple[str, ...] = ()
