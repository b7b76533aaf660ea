"""Self-contained one-time tokens for e-mail verification and password reset.

A token is the encryption of ``"<subject>_<ISO-8601 expiry>"``. Nothing is
stored server-side, so a token stays redeemable until it expires.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from accounts.services._shared.errors import (
    InvalidIDFormatError,
    TokenExpiredError,
    TokenInvalidError,
)
from accounts.services._shared.ports import ActionTokenCipher

SEPARATOR = "_"


@dataclass(slots=True)
class ActionTokens:
    """
    Issues and reads action tokens.

    :param cipher: Authenticated cipher protecting the payload.
    :param verify_ttl: Lifetime of e-mail verification tokens.
    :param reset_ttl: Lifetime of password reset tokens.
    """

    cipher: ActionTokenCipher
    verify_ttl: timedelta = timedelta(hours=24)
    reset_ttl: timedelta = timedelta(hours=1)

    # -------------------- encoding -------------------

    def _issue(self, subject: str, ttl: timedelta) -> str:
        expires_at = datetime.now(UTC) + ttl
        return self.cipher.encrypt(f"{subject}{SEPARATOR}{expires_at.isoformat()}")

    def _read(self, token: str) -> str:
        """
        Decrypt ``token`` and return its subject.

        :raises TokenInvalidError: Undecryptable or malformed payload.
        :raises TokenExpiredError: Embedded expiry is in the past.
        """
        payload = self.cipher.decrypt(token)
        subject, sep, raw_expiry = payload.rpartition(SEPARATOR)
        if not sep or not subject:
            raise TokenInvalidError()
        try:
            expires_at = datetime.fromisoformat(raw_expiry)
        except ValueError as exc:
            raise TokenInvalidError() from exc
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=UTC)
        if expires_at < datetime.now(UTC):
            raise TokenExpiredError()
        return subject

    # -------------------- verify e-mail --------------

    def issue_verify(self, user_id: int) -> str:
        return self._issue(str(user_id), self.verify_ttl)

    def read_verify(self, token: str) -> int:
        """
        :returns: The user id carried by the token.
        :raises InvalidIDFormatError: If the subject is not an integer.
        """
        subject = self._read(token)
        try:
            return int(subject)
        except ValueError as exc:
            raise InvalidIDFormatError() from exc

    # -------------------- reset password -------------

    def issue_reset(self, email: str) -> str:
        return self._issue(email, self.reset_ttl)

    def read_reset(self, token: str) -> str:
        """:returns: The e-mail address carried by the token."""
        return self._read(token)
