"""Redis adapter for :class:`~accounts.services._shared.ports.RefreshTokenStore`."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from datetime import UTC, datetime

import redis  # type: ignore[import-untyped]

from accounts.services._shared.ports import RefreshTokenRecord, RefreshTokenStore


def _b(s: bytes | None, default: str = "") -> str:
    return s.decode() if s is not None else default


@dataclass(slots=True)
class RedisRefreshTokenStore(RefreshTokenStore):
    """
    Redis-backed refresh token store.

    Layout
    ------
    ``rt:<sha256(token)>``
        Hash with ``id``, ``user_id``, ``token``, ``expires_at``,
        ``created_at`` and ``revoked``; expires with the token.
    ``rt:u:<user_id>``
        Set of token digests owned by the user.
    ``rt:seq``
        Counter used to assign record ids.

    :param r: A Redis client (already connected).
    """

    r: redis.Redis

    # -------------------- helpers --------------------

    @staticmethod
    def _digest(token: str) -> str:
        return hashlib.sha256(token.encode()).hexdigest()

    @classmethod
    def _k(cls, token: str) -> str:
        return f"rt:{cls._digest(token)}"

    @staticmethod
    def _kd(digest: str) -> str:
        return f"rt:{digest}"

    @staticmethod
    def _ku(user_id: int) -> str:
        return f"rt:u:{user_id}"

    @staticmethod
    def _to_ts(dt: datetime) -> int:
        # naive values are labelled as UTC, not converted
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        return int(dt.timestamp())

    @staticmethod
    def _from_hash(h: dict[bytes, bytes]) -> RefreshTokenRecord:
        return RefreshTokenRecord(
            id=int(_b(h.get(b"id"), "0")),
            user_id=int(_b(h.get(b"user_id"), "0")),
            token=_b(h.get(b"token")),
            expires_at=datetime.fromtimestamp(int(_b(h.get(b"expires_at"), "0")), tz=UTC),
            revoked=_b(h.get(b"revoked"), "0") == "1",
            created_at=datetime.fromtimestamp(int(_b(h.get(b"created_at"), "0")), tz=UTC),
        )

    def _members(self, user_id: int) -> list[str]:
        return sorted(
            m.decode() if isinstance(m, bytes | bytearray) else str(m)
            for m in self.r.smembers(self._ku(user_id))
        )

    # -------------------- API ------------------------

    def save(self, record: RefreshTokenRecord) -> RefreshTokenRecord:
        """
        Store the record with a TTL matching its expiry.

        :raises ValueError: If the token is already stored.
        """
        now = datetime.now(UTC).replace(microsecond=0)
        exp_ts = self._to_ts(record.expires_at)
        ttl = max(1, exp_ts - self._to_ts(now))
        key = self._k(record.token)
        if self.r.exists(key):
            raise ValueError("Refresh token already stored.")

        record_id = int(self.r.incr("rt:seq"))
        pipe = self.r.pipeline(transaction=True)
        pipe.hset(
            key,
            mapping={
                "id": str(record_id),
                "user_id": str(record.user_id),
                "token": record.token,
                "expires_at": str(exp_ts),
                "created_at": str(self._to_ts(now)),
                "revoked": "1" if record.revoked else "0",
            },
        )
        pipe.expire(key, ttl)
        pipe.sadd(self._ku(record.user_id), self._digest(record.token))
        pipe.execute()
        return RefreshTokenRecord(
            id=record_id,
            user_id=record.user_id,
            token=record.token,
            expires_at=datetime.fromtimestamp(exp_ts, tz=UTC),
            revoked=record.revoked,
            created_at=now,
        )

    def find_by_token(self, token: str) -> RefreshTokenRecord | None:
        h = self.r.hgetall(self._k(token))
        if not h:
            return None
        record = self._from_hash(h)
        return record if record.is_valid() else None

    def find_by_user_id(self, user_id: int) -> list[RefreshTokenRecord]:
        records: list[RefreshTokenRecord] = []
        for digest in self._members(user_id):
            h = self.r.hgetall(self._kd(digest))
            if h:
                records.append(self._from_hash(h))
        return sorted(records, key=lambda rec: rec.id or 0)

    def _revoke_key(self, key: str) -> bool:
        """
        Flip ``revoked`` to ``1`` on ``key`` under ``WATCH``.

        A concurrent writer aborts the ``EXEC`` with :class:`redis.WatchError`;
        the loop then re-reads and, seeing ``revoked == 1``, returns ``False``.
        A hash that expired in the meantime is left alone, so ``HSET`` never
        recreates a key without its TTL.
        """
        while True:
            try:
                with self.r.pipeline() as p:
                    p.watch(key)
                    h = p.hgetall(key)
                    if not h or _b(h.get(b"revoked"), "0") == "1":
                        p.unwatch()
                        return False
                    p.multi()
                    p.hset(key, "revoked", "1")
                    p.execute()
                return True
            except redis.WatchError:
                continue

    def revoke_by_token(self, token: str) -> bool:
        return self._revoke_key(self._k(token))

    def revoke_all_by_user_id(self, user_id: int) -> int:
        return sum(1 for digest in self._members(user_id) if self._revoke_key(self._kd(digest)))

    def delete_expired(self) -> int:
        """
        Drop index entries whose hash is gone.

        Redis evicts the hashes themselves through their TTL; this only
        prunes the per-user sets.

        :returns: Number of pruned index entries.
        """
        removed = 0
        for key in self.r.scan_iter(match="rt:u:*"):
            stale = [
                m
                for m in self.r.smembers(key)
                if not self.r.exists(self._kd(m.decode() if isinstance(m, bytes) else m))
            ]
            if stale:
                removed += int(self.r.srem(key, *stale))
        return removed

    def is_token_valid(self, token: str) -> bool:
        return self.find_by_token(token) is not None
