"""Service fixtures wired to in-memory doubles."""

from __future__ import annotations

from datetime import timedelta

import pytest
from accounts.infra.jwt import PyJWTTokenSigner
from accounts.infra.security import FernetActionTokenCipher, WerkzeugPasswordHasher
from accounts.infra.storage import LocalMediaStorage
from accounts.services._shared.ports import (
    InlineTaskDispatcher,
    InMemoryMailer,
    InMemoryRefreshTokenStore,
    TokenSignerConfig,
)
from accounts.services.auth import ActionTokens, AuthService
from accounts.services.notifications import EmailNotifier
from accounts.services.users import UsersService
from cryptography.fernet import Fernet


@pytest.fixture()
def signer() -> PyJWTTokenSigner:
    return PyJWTTokenSigner(
        TokenSignerConfig(
            access_secret="unit-access",
            refresh_secret="unit-refresh",
            access_ttl=timedelta(minutes=5),
            refresh_ttl=timedelta(days=1),
            issuer="accounts-unit",
        )
    )


@pytest.fixture()
def refresh_store() -> InMemoryRefreshTokenStore:
    return InMemoryRefreshTokenStore()


@pytest.fixture()
def hasher() -> WerkzeugPasswordHasher:
    return WerkzeugPasswordHasher(method="pbkdf2:sha256:1000")


@pytest.fixture()
def action_tokens() -> ActionTokens:
    return ActionTokens(cipher=FernetActionTokenCipher(Fernet.generate_key()))


@pytest.fixture()
def mailer() -> InMemoryMailer:
    return InMemoryMailer()


@pytest.fixture()
def dispatcher() -> InlineTaskDispatcher:
    return InlineTaskDispatcher()


@pytest.fixture()
def notifier(mailer, dispatcher) -> EmailNotifier:
    return EmailNotifier(
        mailer=mailer,
        dispatcher=dispatcher,
        app_name="Accounts",
        app_url="http://frontend.test/",
    )


@pytest.fixture()
def auth_service(signer, refresh_store, hasher, action_tokens, notifier) -> AuthService:
    """
    Build an AuthService wired to in-memory doubles.

    .. note::
       Users still live in the transactional SQLite session.
    """
    return AuthService(
        signer=signer,
        refresh_store=refresh_store,
        hasher=hasher,
        action_tokens=action_tokens,
        notifier=notifier,
    )


@pytest.fixture()
def media(tmp_path) -> LocalMediaStorage:
    return LocalMediaStorage(tmp_path, "/assets")


@pytest.fixture()
def users_service(hasher, refresh_store, media) -> UsersService:
    return UsersService(hasher=hasher, refresh_store=refresh_store, media=media, avatar_max_bytes=64)
