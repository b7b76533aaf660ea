from __future__ import annotations

from typing import Protocol


class PasswordHasher(Protocol):
    """One-way password hashing. Plain-text passwords are never stored."""

    def hash(self, password: str) -> str: ...

    def verify(self, password_hash: str, password: str) -> bool: ...
