"""User repository: lookups, search and soft deletion."""

from __future__ import annotations

from typing import cast

from sqlalchemy import ColumnElement, func, or_, select

from accounts.models.user import User
from accounts.repositories.base import BaseRepository, Page, Pagination


def _normalize(email: str) -> str:
    return email.strip().lower()


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    Soft-deleted users are invisible to every read except
    :meth:`exists_by_email`, which keeps deleted addresses reserved.
    """

    model = User

    def _base_select(self):
        return select(User).where(User.is_deleted.is_(False))

    def _sortable_fields(self):
        return {
            "id": User.id,
            "name": User.name,
            "email": User.email,
            "created_at": User.created_at,
        }

    def _updatable_fields(self):
        """Profile fields. Credentials and activation have dedicated methods."""
        return {"name", "gender", "avatar"}

    def _soft_delete(self, instance: User) -> bool:
        instance.mark_deleted()
        return True

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_email(self, email: str) -> User | None:
        """Fetch a visible user by email (case-insensitive).

        :param email: Email address to normalise and search.
        :type email: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = self._base_select().where(User.email == _normalize(email))
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_email(self, email: str) -> bool:
        """Return ``True`` when any row, deleted or not, owns ``email``."""
        stmt = select(User.id).where(User.email == _normalize(email)).limit(1)
        return self.session.execute(stmt).first() is not None

    def search(self, pagination: Pagination, *, term: str | None = None) -> Page[User]:
        """Paginate users whose name or email contains ``term`` (case-insensitive).

        :param pagination: Page, size and sort tokens.
        :param term: Optional free-text filter; blank means no filter.
        :returns: Page of users.
        """
        criteria: list[ColumnElement[bool]] = []
        if term and term.strip():
            pattern = f"%{term.strip().lower()}%"
            criteria.append(or_(func.lower(User.name).like(pattern), User.email.like(pattern)))
        return self.paginate(pagination, criteria=criteria)

    # ---------------------------- Credential ops ----------------------------

    def set_password_hash(self, user: User, password_hash: str) -> None:
        user.password_hash = password_hash
        self.flush()

    def activate(self, user: User) -> None:
        user.activate()
        self.flush()
