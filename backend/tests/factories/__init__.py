"""factory-boy base bound to whatever session the current test installed."""

from __future__ import annotations

import factory
from sqlalchemy.orm import Session


class SQLAlchemySession:
    """Slot filled by the autouse ``_factories_session`` fixture."""

    current: Session | None = None

    @classmethod
    def set(cls, session: Session | None) -> None:
        cls.current = session

    @classmethod
    def get(cls) -> Session:
        if cls.current is None:
            raise RuntimeError("Factories need the 'session' fixture.")
        return cls.current


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Rows are flushed, not committed; tests commit explicitly when needed."""

    class Meta:
        abstract = True
        sqlalchemy_session_factory = SQLAlchemySession.get
        sqlalchemy_session_persistence = "flush"
