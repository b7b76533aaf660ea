from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Protocol


def _as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value.astimezone(UTC)


@dataclass(frozen=True, slots=True)
class RefreshTokenRecord:
    """
    Store-level view of a persisted refresh token.

    :ivar user_id: Owner user id.
    :ivar token: The signed refresh token string.
    :ivar expires_at: Absolute expiration (UTC).
    :ivar revoked: Whether the token has been revoked.
    :ivar id: Store-assigned identifier, ``None`` until saved.
    :ivar created_at: Persistence timestamp, ``None`` until saved.
    """

    user_id: int
    token: str
    expires_at: datetime
    revoked: bool = False
    id: int | None = None
    created_at: datetime | None = None

    def is_valid(self, now: datetime | None = None) -> bool:
        now = now or datetime.now(UTC)
        return not self.revoked and _as_utc(self.expires_at) > now


class RefreshTokenStore(Protocol):
    """
    Stateful store for refresh tokens.

    ``revoke_by_token`` MUST be atomic: among concurrent callers for the same
    live token, exactly one observes ``True``.
    """

    def save(self, record: RefreshTokenRecord) -> RefreshTokenRecord:
        """Persist a new record and return it with ``id``/``created_at`` set."""

    def find_by_token(self, token: str) -> RefreshTokenRecord | None:
        """Return the record only while it is valid (not revoked, expired or deleted)."""

    def find_by_user_id(self, user_id: int) -> list[RefreshTokenRecord]:
        """List every non-deleted record for a user, valid or not."""

    def revoke_all_by_user_id(self, user_id: int) -> int:
        """Revoke every live record of a user. :returns: Number revoked."""

    def revoke_by_token(self, token: str) -> bool:
        """Revoke one live record. :returns: True only for the caller that did it."""

    def delete_expired(self) -> int:
        """Physically remove expired records. :returns: Number removed."""

    def is_token_valid(self, token: str) -> bool:
        """Shorthand for ``find_by_token(token) is not None``."""


class InMemoryRefreshTokenStore(RefreshTokenStore):
    """
    Dict-backed refresh token store.

    .. note::
       A single ``threading.Lock`` makes every operation atomic, which is
       enough to exercise the one-winner revocation rule in unit tests.
    """

    def __init__(self) -> None:
        self._by_token: dict[str, RefreshTokenRecord] = {}
        self._seq = 0
        self._lock = threading.Lock()

    def _now(self) -> datetime:
        return datetime.now(UTC)

    def save(self, record: RefreshTokenRecord) -> RefreshTokenRecord:
        with self._lock:
            if record.token in self._by_token:
                raise ValueError("Refresh token already stored.")
            self._seq += 1
            stored = replace(
                record,
                id=self._seq,
                expires_at=_as_utc(record.expires_at),
                created_at=self._now(),
            )
            self._by_token[stored.token] = stored
            return stored

    def find_by_token(self, token: str) -> RefreshTokenRecord | None:
        with self._lock:
            record = self._by_token.get(token)
        if record is None or not record.is_valid(self._now()):
            return None
        return record

    def find_by_user_id(self, user_id: int) -> list[RefreshTokenRecord]:
        with self._lock:
            records = [r for r in self._by_token.values() if r.user_id == user_id]
        return sorted(records, key=lambda r: r.id or 0)

    def revoke_all_by_user_id(self, user_id: int) -> int:
        count = 0
        with self._lock:
            for token, record in self._by_token.items():
                if record.user_id == user_id and not record.revoked:
                    self._by_token[token] = replace(record, revoked=True)
                    count += 1
        return count

    def revoke_by_token(self, token: str) -> bool:
        with self._lock:
            record = self._by_token.get(token)
            if record is None or record.revoked:
                return False
            self._by_token[token] = replace(record, revoked=True)
            return True

    def delete_expired(self) -> int:
        now = self._now()
        with self._lock:
            expired = [t for t, r in self._by_token.items() if _as_utc(r.expires_at) <= now]
            for token in expired:
                del self._by_token[token]
        return len(expired)

    def is_token_valid(self, token: str) -> bool:
        return self.find_by_token(token) is not None
