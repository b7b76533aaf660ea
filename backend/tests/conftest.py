"""Shared fixtures: one app per session, one SAVEPOINT per test.

Units of work commit through ``db.session``; inside a test that session is
bound to a connection whose outer transaction is rolled back at teardown, so
``commit()`` only releases a SAVEPOINT and nothing leaks between cases.
"""

from __future__ import annotations

import os

import pytest
from accounts.container import get_container
from accounts.core.config import TestingConfig
from accounts.core.extensions import db as _db
from accounts.factory import create_app
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker


class TestConfig(TestingConfig):
    """In-memory SQLite, in-memory mailer, inline tasks, tiny avatar limit."""

    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SECRET_KEY = "test-secret"
    JWT_ACCESS_SECRET = "test-access-secret"
    JWT_REFRESH_SECRET = "test-refresh-secret"
    APP_NAME = "Accounts"
    APP_URL = "http://frontend.test"
    CORS_ORIGINS = "http://localhost:5173"
    REDIS_URL = ""
    MEDIA_URL_PREFIX = "/assets"
    AVATAR_MAX_BYTES = 1024
    LOG_LEVEL = "WARNING"


@pytest.fixture(scope="session")
def app(tmp_path_factory):
    os.environ.pop("DATABASE_URL", None)
    TestConfig.MEDIA_ROOT = str(tmp_path_factory.mktemp("media"))
    return create_app(TestConfig, instance_relative_config=False)


@pytest.fixture(scope="session")
def db(app):
    """Create the schema once and keep an app context pushed for the session."""
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """
    Shared connection for every test session.

    pysqlite never emits ``BEGIN`` itself, which would let the first
    ``RELEASE SAVEPOINT`` commit for real; drive the transaction explicitly.
    """
    conn = db.engine.connect()
    if conn.dialect.name == "sqlite":
        conn.connection.driver_connection.isolation_level = None
        event.listen(conn, "begin", lambda c: c.exec_driver_sql("BEGIN"))
    yield conn
    conn.close()


@pytest.fixture()
def session(db, connection):
    """
    Scoped session joined to an outer transaction on ``connection``.

    ``join_transaction_mode="create_savepoint"`` makes every session-level
    transaction a SAVEPOINT: ``commit()`` releases it, ``rollback()`` rolls
    back to it, and the outer transaction is discarded after the test.
    """
    outer = connection.begin()
    scoped = scoped_session(
        sessionmaker(bind=connection, autoflush=False, join_transaction_mode="create_savepoint")
    )

    app_session = db.session
    app_session.remove()
    db.session = scoped
    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = app_session
        outer.rollback()


@pytest.fixture()
def client(app, session):
    return app.test_client()


@pytest.fixture()
def container(app):
    with app.app_context():
        return get_container()


@pytest.fixture()
def outbox(container):
    """Messages captured by the in-memory mailer, emptied around each test."""
    container.mailer.clear()
    yield container.mailer.outbox
    container.mailer.clear()


@pytest.fixture(scope="session")
def faker():
    from faker import Faker

    Faker.seed(1337)
    return Faker()


@pytest.fixture(autouse=True)
def _factories_session(session):
    """Point factory-boy at the per-test session."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield
    SQLAlchemySession.set(None)
