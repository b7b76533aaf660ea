"""Fernet adapter for :class:`~accounts.services._shared.ports.ActionTokenCipher`."""

from __future__ import annotations

import base64
import hashlib

from cryptography.fernet import Fernet, InvalidToken

from accounts.services._shared.errors import TokenInvalidError
from accounts.services._shared.ports import ActionTokenCipher


def derive_key(secret: str) -> bytes:
    """Derive a Fernet key from an arbitrary application secret."""
    return base64.urlsafe_b64encode(hashlib.sha256(secret.encode()).digest())


class FernetActionTokenCipher(ActionTokenCipher):
    """
    Authenticated symmetric encryption (AES-128-CBC + HMAC-SHA256).

    Output tokens are URL-safe base64 and can be embedded in links as-is.

    :param key: A Fernet key (32 url-safe base64-encoded bytes).
    """

    def __init__(self, key: str | bytes) -> None:
        self._fernet = Fernet(key)

    @classmethod
    def from_config(cls, *, action_key: str, secret_key: str) -> FernetActionTokenCipher:
        """Use ``action_key`` when set, otherwise derive one from ``secret_key``."""
        return cls(action_key or derive_key(secret_key))

    def encrypt(self, payload: str) -> str:
        return self._fernet.encrypt(payload.encode()).decode()

    def decrypt(self, token: str) -> str:
        if not token:
            raise TokenInvalidError()
        try:
            return self._fernet.decrypt(token.encode()).decode()
        except (InvalidToken, UnicodeError) as exc:
            raise TokenInvalidError() from exc
