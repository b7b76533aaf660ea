"""
Unit tests for RedisRefreshTokenStore using fakeredis.

They use fakeredis.FakeRedis so they run entirely in-memory.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import fakeredis
import pytest
from accounts.infra.redis import RedisRefreshTokenStore
from accounts.services._shared.ports import RefreshTokenRecord


def _now() -> datetime:
    """Return a timezone-aware UTC "now"."""
    return datetime.now(UTC)


@pytest.fixture
def fake_redis():
    """Provide a fresh FakeRedis instance for each test."""
    r = fakeredis.FakeRedis()
    r.flushall()
    return r


@pytest.fixture
def store(fake_redis):
    return RedisRefreshTokenStore(r=fake_redis)


def _record(user_id: int, token: str, seconds: int = 300) -> RefreshTokenRecord:
    return RefreshTokenRecord(user_id=user_id, token=token, expires_at=_now() + timedelta(seconds=seconds))


def test_save_and_find(store, fake_redis):
    saved = store.save(_record(1, "rt-1"))
    assert saved.id == 1
    assert saved.created_at is not None

    found = store.find_by_token("rt-1")
    assert found is not None
    assert found.user_id == 1
    assert found.revoked is False
    # the raw token is never used as a key
    assert not any(b"rt-1" in key for key in fake_redis.keys())


def test_hash_expires_with_token(store, fake_redis):
    store.save(_record(1, "rt-ttl", seconds=120))
    key = RedisRefreshTokenStore._k("rt-ttl")
    assert 0 < fake_redis.ttl(key) <= 120


def test_save_rejects_duplicates(store):
    store.save(_record(1, "dup"))
    with pytest.raises(ValueError):
        store.save(_record(1, "dup"))


def test_revoke_by_token_single_winner(store):
    store.save(_record(2, "rt-2"))
    assert store.revoke_by_token("rt-2") is True
    assert store.revoke_by_token("rt-2") is False
    assert store.revoke_by_token("never-stored") is False
    assert store.is_token_valid("rt-2") is False


def test_revoke_all_and_list(store):
    store.save(_record(3, "a"))
    store.save(_record(3, "b"))
    store.save(_record(4, "c"))

    assert store.revoke_all_by_user_id(3) == 2
    assert store.revoke_all_by_user_id(3) == 0
    assert [r.revoked for r in store.find_by_user_id(3)] == [True, True]
    assert store.is_token_valid("c")


def test_delete_expired_prunes_user_index(store, fake_redis):
    store.save(_record(5, "gone"))
    store.save(_record(5, "kept"))
    fake_redis.delete(RedisRefreshTokenStore._k("gone"))

    assert store.delete_expired() == 1
    assert [r.token for r in store.find_by_user_id(5)] == ["kept"]


def test_revoke_all_skips_expired_hash_without_recreating_it(store, fake_redis):
    store.save(_record(9, "rt-live"))
    store.save(_record(9, "rt-gone"))
    gone_key = store._k("rt-gone")
    fake_redis.delete(gone_key)  # TTL elapsed; index entry still present

    assert store.revoke_all_by_user_id(9) == 1
    assert fake_redis.exists(gone_key) == 0
    assert fake_redis.ttl(store._k("rt-live")) > 0
