"""Unit of Work contract shared by the account services."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from accounts.repositories import RefreshTokenRepository, UserRepository


class UnitOfWork(ABC):
    """
    Transaction scope for one service operation.

    Implementations expose ``users`` and ``refresh_tokens`` bound to the same
    session, so everything read or written inside one ``with`` block shares a
    transaction.
    """

    session: Session
    users: UserRepository
    refresh_tokens: RefreshTokenRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...

    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...
