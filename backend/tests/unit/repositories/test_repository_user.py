"""Unit tests for UserRepository."""

from __future__ import annotations

import pytest
from accounts.repositories import Pagination, UserRepository

from tests.factories.user import UserFactory


class TestUserRepository:
    """Ensure ``UserRepository`` performs core persistence operations."""

    @pytest.fixture()
    def repo(self, session):
        return UserRepository(session=session)

    def test_get_by_email_is_case_insensitive(self, repo):
        u = UserFactory(email="alice@example.com")
        fetched = repo.get_by_email("  ALICE@example.com")
        assert fetched is not None
        assert fetched.id == u.id

    def test_soft_deleted_users_are_hidden_but_reserve_email(self, repo, session):
        u = UserFactory(email="gone@example.com")
        repo.delete(u)
        session.flush()

        assert repo.get(u.id) is None
        assert repo.get_by_email("gone@example.com") is None
        assert repo.exists_by_email("gone@example.com")
        assert not repo.exists_by_email("nonexistent@example.com")

    def test_update_whitelisted_fields_only(self, repo):
        u = UserFactory(name="Old")
        repo.update(u, name="New", avatar="/assets/a.png")
        assert u.name == "New"
        assert u.avatar == "/assets/a.png"

        with pytest.raises(ValueError):
            repo.update(u, password_hash="x")
        with pytest.raises(ValueError):
            repo.update(u, is_active=False)

    def test_set_password_hash_and_activate(self, repo):
        u = UserFactory(is_active=False)
        repo.set_password_hash(u, "new-hash")
        repo.activate(u)
        assert u.password_hash == "new-hash"
        assert u.is_active is True

    def test_search_matches_name_or_email(self, repo):
        UserFactory(name="Grace Hopper", email="grace@navy.mil")
        UserFactory(name="Alan Turing", email="alan@bletchley.uk")
        UserFactory(name="Ada", email="ada@hopper-fans.org")

        page = repo.search(Pagination(page=1, limit=10, sort=["name"]), term="HOPPER")
        assert page.total == 2
        assert [u.name for u in page.items] == ["Ada", "Grace Hopper"]

    def test_paginate_sorts_and_slices(self, repo):
        for name in ["c", "a", "e", "b", "d"]:
            UserFactory(name=name)

        first = repo.search(Pagination(page=1, limit=2, sort=["-name"]))
        second = repo.search(Pagination(page=2, limit=2, sort=["-name"]))
        assert first.total == 5
        assert first.total_pages == 3
        assert [u.name for u in first.items] == ["e", "d"]
        assert [u.name for u in second.items] == ["c", "b"]

    def test_unknown_sort_field_falls_back_to_primary_key(self, repo):
        ids = [UserFactory(name=name).id for name in ["z", "y"]]
        page = repo.search(Pagination(page=1, limit=10, sort=["password_hash"]))
        assert [u.id for u in page.items] == ids
