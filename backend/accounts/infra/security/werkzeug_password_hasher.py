from __future__ import annotations

from dataclasses import dataclass

from werkzeug.security import check_password_hash, generate_password_hash

from accounts.services._shared.ports import PasswordHasher


@dataclass(slots=True, frozen=True)
class WerkzeugPasswordHasher(PasswordHasher):
    """
    :class:`PasswordHasher` backed by ``werkzeug.security``.

    :param method: Werkzeug hashing method string (e.g. ``"scrypt"``).
    """

    method: str = "scrypt"

    def hash(self, password: str) -> str:
        return generate_password_hash(password, method=self.method)

    def verify(self, password_hash: str, password: str) -> bool:
        if not password_hash or not password:
            return False
        return check_password_hash(password_hash, password)
