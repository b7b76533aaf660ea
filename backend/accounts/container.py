"""Composition root: builds adapters and services from the app config."""

from __future__ import annotations

import atexit
import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from flask import Flask, current_app

from accounts.core.extensions import get_redis
from accounts.infra.jwt import PyJWTTokenSigner
from accounts.infra.mail import SmtpMailer
from accounts.infra.redis import RedisRefreshTokenStore
from accounts.infra.security import FernetActionTokenCipher, WerkzeugPasswordHasher
from accounts.infra.sql import SqlRefreshTokenStore
from accounts.infra.storage import LocalMediaStorage
from accounts.infra.tasks import ThreadPoolTaskDispatcher
from accounts.services._shared.ports import (
    InlineTaskDispatcher,
    InMemoryMailer,
    InMemoryRefreshTokenStore,
    Mailer,
    MediaStorage,
    PasswordHasher,
    RefreshTokenStore,
    TaskDispatcher,
    TokenSigner,
    TokenSignerConfig,
)
from accounts.services.auth import ActionTokens, AuthService
from accounts.services.notifications import EmailNotifier
from accounts.services.users import UsersService

log = logging.getLogger(__name__)

EXTENSION_KEY = "accounts.container"


@dataclass(slots=True)
class ServiceContainer:
    """Everything the HTTP and CLI layers need, built once per app."""

    signer: TokenSigner
    refresh_store: RefreshTokenStore
    hasher: PasswordHasher
    mailer: Mailer
    dispatcher: TaskDispatcher
    media: MediaStorage
    notifier: EmailNotifier
    auth: AuthService
    users: UsersService


# --------------------------------------------------------------------------- #
# Builders
# --------------------------------------------------------------------------- #


def build_refresh_store(config: Any) -> RefreshTokenStore:
    """
    Select the refresh token store from ``REFRESH_TOKEN_BACKEND``.

    :raises ValueError: For an unknown backend name.
    """
    backend = str(config.get("REFRESH_TOKEN_BACKEND", "sql")).lower()
    if backend == "sql":
        return SqlRefreshTokenStore()
    if backend == "redis":
        return RedisRefreshTokenStore(get_redis())
    if backend == "memory":
        return InMemoryRefreshTokenStore()
    raise ValueError(f"Unknown REFRESH_TOKEN_BACKEND {backend!r}")


def build_mailer(config: Any) -> Mailer:
    backend = str(config.get("MAIL_BACKEND", "smtp")).lower()
    if backend == "memory":
        return InMemoryMailer()
    if backend == "smtp":
        return SmtpMailer(
            host=config["MAIL_HOST"],
            port=int(config["MAIL_PORT"]),
            sender=config["MAIL_SENDER"],
            username=config.get("MAIL_USERNAME", ""),
            password=config.get("MAIL_PASSWORD", ""),
            use_tls=bool(config.get("MAIL_USE_TLS", True)),
            timeout=int(config.get("MAIL_TIMEOUT", 10)),
        )
    raise ValueError(f"Unknown MAIL_BACKEND {backend!r}")


def build_dispatcher(config: Any) -> TaskDispatcher:
    kind = str(config.get("TASK_DISPATCHER", "thread")).lower()
    if kind == "inline":
        return InlineTaskDispatcher()
    if kind == "thread":
        return ThreadPoolTaskDispatcher(max_workers=int(config.get("TASK_MAX_WORKERS", 4)))
    raise ValueError(f"Unknown TASK_DISPATCHER {kind!r}")


def build_container(config: Any) -> ServiceContainer:
    """
    Wire the object graph.

    :param config: A Flask config mapping.
    :returns: Fully built :class:`ServiceContainer`.
    """
    signer = PyJWTTokenSigner(
        TokenSignerConfig(
            access_secret=config["JWT_ACCESS_SECRET"],
            refresh_secret=config["JWT_REFRESH_SECRET"],
            access_ttl=timedelta(seconds=int(config["JWT_ACCESS_EXPIRES"])),
            refresh_ttl=timedelta(seconds=int(config["JWT_REFRESH_EXPIRES"])),
            issuer=config["JWT_ISSUER"],
        )
    )
    refresh_store = build_refresh_store(config)
    hasher = WerkzeugPasswordHasher()
    action_tokens = ActionTokens(
        cipher=FernetActionTokenCipher.from_config(
            action_key=config.get("ACTION_TOKEN_KEY", ""),
            secret_key=config["SECRET_KEY"],
        ),
        verify_ttl=timedelta(seconds=int(config["VERIFY_TOKEN_TTL"])),
        reset_ttl=timedelta(seconds=int(config["RESET_TOKEN_TTL"])),
    )
    mailer = build_mailer(config)
    dispatcher = build_dispatcher(config)
    media = LocalMediaStorage(config["MEDIA_ROOT"], config["MEDIA_URL_PREFIX"])
    notifier = EmailNotifier(
        mailer=mailer,
        dispatcher=dispatcher,
        app_name=config["APP_NAME"],
        app_url=config["APP_URL"],
    )
    return ServiceContainer(
        signer=signer,
        refresh_store=refresh_store,
        hasher=hasher,
        mailer=mailer,
        dispatcher=dispatcher,
        media=media,
        notifier=notifier,
        auth=AuthService(
            signer=signer,
            refresh_store=refresh_store,
            hasher=hasher,
            action_tokens=action_tokens,
            notifier=notifier,
        ),
        users=UsersService(
            hasher=hasher,
            refresh_store=refresh_store,
            media=media,
            avatar_max_bytes=int(config["AVATAR_MAX_BYTES"]),
        ),
    )


# --------------------------------------------------------------------------- #
# Flask integration
# --------------------------------------------------------------------------- #


def init_app(app: Flask) -> None:
    """
    Build the container and store it under ``app.extensions``.

    The dispatcher is drained at interpreter exit so queued e-mails are not
    dropped when a worker stops.
    """
    container = build_container(app.config)
    app.extensions[EXTENSION_KEY] = container
    atexit.register(container.dispatcher.shutdown)
    log.info(
        "container.ready",
        extra={"backend": str(app.config.get("REFRESH_TOKEN_BACKEND", "sql")).lower()},
    )


def get_container() -> ServiceContainer:
    """Return the container of the current app."""
    container = current_app.extensions.get(EXTENSION_KEY)
    if container is None:
        raise RuntimeError("Service container is not initialized. Call container.init_app().")
    return container
