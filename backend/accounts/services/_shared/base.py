from __future__ import annotations

from collections.abc import Iterable

from accounts.repositories.base import Pagination
from accounts.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


class BaseService:
    """
    Common plumbing for the account services.

    Services open a unit of work per operation and hand back DTOs, so ORM
    rows never outlive the ``with`` block that loaded them. Anything that is
    not SQL (token store, mailer, media) is injected through a port.

    :cvar READ_ISOLATION: Isolation hint for read-only units of work.
    :cvar MAX_PAGE_SIZE: Upper bound applied by :meth:`ensure_pagination`.
    """

    READ_ISOLATION: str | None = "READ COMMITTED"
    MAX_PAGE_SIZE = 100

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """Open a unit of work that commits on a clean exit."""
        return SQLAlchemyUnitOfWork()

    def ro_uow(self, *, isolation: str | None = None) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Open a read-only unit of work.

        :param isolation: Overrides :attr:`READ_ISOLATION` for this scope.
        """
        return SQLAlchemyReadOnlyUnitOfWork(isolation_level=isolation or self.READ_ISOLATION)

    def ensure_pagination(
        self, *, page: int, limit: int, sort: Iterable[str] | None = None
    ) -> Pagination:
        """
        Clamp client paging input into a :class:`Pagination`.

        ``page`` is raised to at least 1 and ``limit`` is kept within
        ``[1, MAX_PAGE_SIZE]``. Sort tokens pass through untouched; the
        repository ignores fields it does not whitelist.
        """
        return Pagination(
            page=max(1, int(page)),
            limit=min(max(1, int(limit)), self.MAX_PAGE_SIZE),
            sort=list(sort or ()),
        )
