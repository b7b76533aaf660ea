"""
accounts.services._shared.ports
===============================

*Ports* (hexagonal interfaces) that the account services depend on.

Modules
-------
- :mod:`token_signer`: :class:`~.TokenSigner` for access/refresh JWTs.
- :mod:`refresh_token_store`: :class:`~.RefreshTokenStore` plus the
  in-memory double used by unit tests.
- :mod:`password_hasher`: :class:`~.PasswordHasher`.
- :mod:`action_token_cipher`: :class:`~.ActionTokenCipher` for one-time
  e-mail verification and password reset tokens.
- :mod:`mailer`: :class:`~.Mailer` and :class:`~.InMemoryMailer`.
- :mod:`task_dispatcher`: :class:`~.TaskDispatcher` and the inline variant.
- :mod:`media_storage`: :class:`~.MediaStorage` for avatar uploads.

Concrete adapters live under ``accounts.infra``.
"""

from __future__ import annotations

from .action_token_cipher import ActionTokenCipher
from .mailer import InMemoryMailer, Mailer, OutgoingEmail
from .media_storage import MediaStorage
from .password_hasher import PasswordHasher
from .refresh_token_store import (
    InMemoryRefreshTokenStore,
    RefreshTokenRecord,
    RefreshTokenStore,
)
from .task_dispatcher import InlineTaskDispatcher, TaskDispatcher
from .token_signer import (
    ACCESS,
    REFRESH,
    AccessTokenClaims,
    IssuedToken,
    RefreshTokenClaims,
    TokenSigner,
    TokenSignerConfig,
)

__all__ = [
    "ACCESS",
    "REFRESH",
    "AccessTokenClaims",
    "ActionTokenCipher",
    "InMemoryMailer",
    "InMemoryRefreshTokenStore",
    "InlineTaskDispatcher",
    "IssuedToken",
    "Mailer",
    "MediaStorage",
    "OutgoingEmail",
    "PasswordHasher",
    "RefreshTokenClaims",
    "RefreshTokenRecord",
    "RefreshTokenStore",
    "TaskDispatcher",
    "TokenSigner",
    "TokenSignerConfig",
]
