"""User account model."""

from __future__ import annotations

import enum

from sqlalchemy import Boolean, Enum, Index, String, UniqueConstraint, false
from sqlalchemy.orm import Mapped, mapped_column, validates

from accounts.core.extensions import db

from .base import PKMixin, ReprMixin, SoftDeleteMixin, TimestampMixin


class Gender(str, enum.Enum):
    """Self-declared gender of an account holder."""

    MALE = "Male"
    FEMALE = "Female"
    UNKNOWN = "Unknown"


class User(PKMixin, ReprMixin, TimestampMixin, SoftDeleteMixin, db.Model):
    """
    Account identity.

    Fields
    ------
    name : str
        Display name.
    email : str
        Login email. Stored normalized (lowercase, trimmed) and unique, also
        across soft-deleted rows.
    password_hash : str
        One-way hash produced by the configured password hasher.
    avatar : str | None
        Public URL of the uploaded avatar.
    gender : Gender
        Defaults to :attr:`Gender.UNKNOWN`.
    is_active : bool
        ``False`` until the e-mail address is verified (or the account was
        created by an administrator).
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    avatar: Mapped[str | None] = mapped_column(String(512), nullable=True)
    gender: Mapped[Gender] = mapped_column(
        Enum(Gender, name="gender", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=Gender.UNKNOWN,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )

    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        Index("ix_users_email", "email"),
        Index("ix_users_is_deleted", "is_deleted"),
    )

    def activate(self) -> None:
        self.is_active = True

    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize the email and run a minimal sanity check.

        Full policy validation happens in the service layer.

        :raises ValueError: If email is missing or obviously malformed.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = value.strip().lower()
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Email format looks invalid.")
        return v

    @validates("name")
    def _normalize_name(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Name is required.")
        return value.strip()
