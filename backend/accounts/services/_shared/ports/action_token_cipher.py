from __future__ import annotations

from typing import Protocol


class ActionTokenCipher(Protocol):
    """
    Symmetric, authenticated encryption for one-time action tokens.

    ``decrypt`` raises ``TokenInvalidError`` for tampered or foreign input.
    """

    def encrypt(self, payload: str) -> str: ...

    def decrypt(self, token: str) -> str: ...
