"""Tests for the User model."""

from __future__ import annotations

import pytest
from accounts.models.user import Gender, User
from sqlalchemy.exc import IntegrityError


class TestUser:
    def test_email_normalized_and_unique(self, session):
        u1 = User(name="Alice", email="  Alice@Example.com ", password_hash="x")
        session.add(u1)
        session.flush()
        assert u1.email == "alice@example.com"

        u2 = User(name="Alice 2", email="alice@example.com", password_hash="x")
        session.add(u2)
        with pytest.raises(IntegrityError):
            session.flush()

    def test_defaults(self, session):
        u = User(name="Bob", email="bob@example.com", password_hash="x")
        session.add(u)
        session.flush()
        session.refresh(u)
        assert u.gender is Gender.UNKNOWN
        assert u.is_active is False
        assert u.is_deleted is False
        assert u.avatar is None
        assert u.created_at is not None

    def test_basic_validations(self):
        with pytest.raises(ValueError):
            User(name="u", email="", password_hash="x")
        with pytest.raises(ValueError):
            User(name="u", email="not-an-email", password_hash="x")
        with pytest.raises(ValueError):
            User(name="   ", email="c@example.com", password_hash="x")

    def test_name_trimmed(self):
        assert User(name="  Carol ", email="c@example.com", password_hash="x").name == "Carol"

    def test_activate_and_mark_deleted(self):
        u = User(name="Dan", email="dan@example.com", password_hash="x", is_active=False)
        u.activate()
        assert u.is_active is True
        u.mark_deleted()
        assert u.is_deleted is True
        assert u.deleted_at is not None
