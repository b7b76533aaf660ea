"""
SQLAlchemy units of work over the Flask-SQLAlchemy scoped session.

Both flavours expose the account repositories on the shared session. The
writer commits when its block exits cleanly; the reader never commits and
refuses writes while it is open.
"""

from __future__ import annotations

import logging
import re
from contextlib import suppress

from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import InvalidRequestError, SQLAlchemyError
from sqlalchemy.orm import Session, SessionTransaction

from accounts.core.extensions import db
from accounts.repositories import RefreshTokenRepository, UserRepository
from accounts.uow.base import UnitOfWork

logger = logging.getLogger(__name__)

_WRITE_STATEMENT = re.compile(
    r"^\s*(insert|update|delete|merge|replace|create|alter|drop|truncate|grant|revoke)\b",
    re.IGNORECASE,
)

# Dialects that understand ``SET TRANSACTION`` inside an open transaction
_SET_TRANSACTION_DIALECTS = frozenset({"postgresql", "mysql", "mariadb"})


def _bind_repositories(uow: UnitOfWork, session: Session) -> None:
    uow.session = session
    uow.users = UserRepository(session=session)
    uow.refresh_tokens = RefreshTokenRepository(session=session)


class WriteGuard:
    """
    Event listeners that reject writes on a session and its connection.

    ORM flushes with pending changes and DML/DDL statements both raise
    :class:`RuntimeError` while the guard is installed.
    """

    def __init__(self, session: Session, connection: Connection) -> None:
        self.session = session
        self.connection = connection
        self._installed = False

    def _on_flush(self, session, flush_context, instances) -> None:
        if session.new or session.dirty or session.deleted:
            raise RuntimeError("Read-only UnitOfWork: ORM flush blocked (pending changes).")

    def _on_execute(self, conn, cursor, statement, parameters, context, executemany) -> None:
        match = _WRITE_STATEMENT.match(statement or "")
        if match:
            raise RuntimeError(f"Read-only UnitOfWork: SQL statement blocked: {match.group(1).upper()}")

    def install(self) -> None:
        if self._installed:
            return
        event.listen(self.session, "before_flush", self._on_flush)
        event.listen(self.connection, "before_cursor_execute", self._on_execute)
        self._installed = True

    def remove(self) -> None:
        if not self._installed:
            return
        with suppress(InvalidRequestError):
            event.remove(self.session, "before_flush", self._on_flush)
        with suppress(InvalidRequestError):
            event.remove(self.connection, "before_cursor_execute", self._on_execute)
        self._installed = False


class SQLAlchemyUnitOfWork(UnitOfWork):
    """Read-write unit of work: commit on clean exit, rollback otherwise."""

    def __init__(self) -> None:
        _bind_repositories(self, db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()
            return
        try:
            self.commit()
        except Exception:
            self.rollback()
            raise

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(UnitOfWork):
    """
    Read-only unit of work.

    On entry it opens its own transaction when the session has none. If a
    transaction is already running (for example a request that wrote
    earlier) it joins it instead, and only the :class:`WriteGuard` applies.

    When it owns the transaction on PostgreSQL or MySQL it also issues
    ``SET TRANSACTION ISOLATION LEVEL`` and ``SET TRANSACTION READ ONLY``.
    An owned transaction is always rolled back on exit.

    Parameters
    ----------
    isolation_level:
        Isolation level hint such as ``"READ COMMITTED"``; ``None`` keeps the
        connection default.
    enforce_db_readonly:
        Issue ``SET TRANSACTION READ ONLY`` where supported.
    """

    def __init__(
        self,
        *,
        isolation_level: str | None = "READ COMMITTED",
        enforce_db_readonly: bool = True,
    ) -> None:
        _bind_repositories(self, db.session)
        self.isolation_level = isolation_level
        self.enforce_db_readonly = enforce_db_readonly
        self._owned: SessionTransaction | None = None
        self._guard: WriteGuard | None = None

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        try:
            self._owned = self.session.begin()
        except InvalidRequestError:
            # A transaction is already running on the session; join it
            self._owned = None

        connection = self.session.connection()
        self._guard = WriteGuard(self.session, connection)
        self._guard.install()

        if self._owned is not None and connection.dialect.name in _SET_TRANSACTION_DIALECTS:
            self._apply_transaction_mode()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if self._owned is not None:
                with suppress(SQLAlchemyError):
                    self.session.rollback()
        finally:
            self._owned = None
            if self._guard is not None:
                self._guard.remove()
                self._guard = None

    def commit(self) -> None:
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()

    def _apply_transaction_mode(self) -> None:
        try:
            if self.isolation_level:
                level = self.isolation_level.strip().upper()
                self.session.execute(text(f"SET TRANSACTION ISOLATION LEVEL {level}"))
            if self.enforce_db_readonly:
                self.session.execute(text("SET TRANSACTION READ ONLY"))
        except SQLAlchemyError as exc:
            logger.warning("uow.readonly.set_transaction_failed", exc_info=exc)
