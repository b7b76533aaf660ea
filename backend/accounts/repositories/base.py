"""Repository base for SQLAlchemy 2.x.

Repositories are persistence-only: they build statements, stage rows and
flush, but never commit. Units of work own the transaction.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import ColumnElement, Select, func, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from accounts.core.extensions import db

E = TypeVar("E")

SortMap = Mapping[str, InstrumentedAttribute[Any]]


@dataclass(slots=True)
class Pagination:
    """Requested page. ``sort`` holds public tokens such as ``"-created_at"``."""

    page: int
    limit: int
    sort: list[str] = field(default_factory=list)


@dataclass(slots=True)
class Page(Generic[E]):
    """One page of rows plus the unpaged total."""

    items: Sequence[E]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit if self.limit > 0 else 0


def apply_sorting(
    stmt: Select[Any],
    sortable: SortMap,
    tokens: Iterable[str],
    *,
    pk_attr: InstrumentedAttribute[Any] | None,
) -> Select[Any]:
    """
    Translate sort tokens into ``ORDER BY`` clauses.

    A leading ``-`` means descending. Tokens that are not keys of
    ``sortable`` are dropped, and the primary key is appended last so that
    equal sort values still page deterministically.
    """
    for token in tokens:
        name = token.lstrip("-").strip()
        column = sortable.get(name)
        if column is None:
            continue
        stmt = stmt.order_by(column.desc() if token.startswith("-") else column.asc())
    if pk_attr is not None:
        stmt = stmt.order_by(pk_attr.asc())
    return stmt


def paginate_select(session: Session, stmt: Select[Any], *, page: int, limit: int) -> tuple[list[Any], int]:
    """Run ``stmt`` for one page and return ``(items, total)``."""
    page, limit = max(int(page), 1), max(int(limit), 1)
    total = session.execute(
        select(func.count()).select_from(stmt.order_by(None).subquery())
    ).scalar_one()
    rows = session.execute(stmt.limit(limit).offset((page - 1) * limit)).scalars().all()
    return list(rows), int(total)


class BaseRepository(Generic[E]):
    """
    CRUD over a single mapped class.

    Subclasses set :attr:`model` and may override the hooks
    ``_base_select`` (row visibility), ``_sortable_fields``,
    ``_updatable_fields`` and ``_soft_delete``.

    :param session: Session to use; defaults to the Flask-scoped
        :data:`accounts.core.extensions.db` session.
    """

    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        return self._session if self._session is not None else cast(Session, db.session)

    # hooks

    def _base_select(self) -> Select[Any]:
        return select(self.model)

    def _pk_attr(self) -> InstrumentedAttribute[Any]:
        return getattr(self.model, "id")

    def _sortable_fields(self) -> SortMap:
        return {}

    def _updatable_fields(self) -> set[str]:
        return set()

    def _soft_delete(self, instance: E) -> bool:
        """Return ``True`` when the instance was soft-deleted in place."""
        return False

    # CRUD

    def add(self, instance: E) -> E:
        """Stage ``instance`` and flush so its primary key is assigned."""
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        stmt = self._base_select().where(self._pk_attr() == entity_id)
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def get_for_update(self, entity_id: Any) -> E | None:
        """Like :meth:`get` but locks the row (``FOR UPDATE``) where supported."""
        stmt = self._base_select().where(self._pk_attr() == entity_id).with_for_update()
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def update(self, instance: E, **fields: Any) -> E:
        """
        Assign whitelisted attributes and flush.

        :raises ValueError: When a key is not in ``_updatable_fields``.
        """
        unknown = sorted(set(fields) - self._updatable_fields())
        if unknown:
            raise ValueError(f"Unknown or non-updatable fields: {unknown}")
        for key, value in fields.items():
            setattr(instance, key, value)
        self.flush()
        return instance

    def delete(self, instance: E) -> None:
        if not self._soft_delete(instance):
            self.session.delete(instance)
        self.flush()

    def flush(self) -> None:
        self.session.flush()

    def paginate(
        self,
        pagination: Pagination,
        *,
        criteria: Iterable[ColumnElement[bool]] = (),
    ) -> Page[E]:
        """Page through visible rows matching every clause in ``criteria``."""
        stmt = self._base_select().where(*criteria)
        stmt = apply_sorting(stmt, self._sortable_fields(), pagination.sort, pk_attr=self._pk_attr())
        items, total = paginate_select(self.session, stmt, page=pagination.page, limit=pagination.limit)
        return Page(items=items, total=total, page=pagination.page, limit=pagination.limit)
