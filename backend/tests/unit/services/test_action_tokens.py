"""Tests for verification and reset action tokens."""

from __future__ import annotations

import pytest
from accounts.services._shared.errors import (
    InvalidIDFormatError,
    TokenExpiredError,
    TokenInvalidError,
)
from freezegun import freeze_time


def test_verify_token_round_trip(action_tokens):
    assert action_tokens.read_verify(action_tokens.issue_verify(42)) == 42


def test_reset_token_keeps_underscores_in_email(action_tokens):
    token = action_tokens.issue_reset("first_last@example.com")
    assert action_tokens.read_reset(token) == "first_last@example.com"


def test_expired_tokens_rejected(action_tokens):
    with freeze_time("2026-01-01 00:00:00"):
        verify = action_tokens.issue_verify(1)
        reset = action_tokens.issue_reset("a@example.com")
    with freeze_time("2026-01-01 01:00:01"), pytest.raises(TokenExpiredError):
        action_tokens.read_reset(reset)
    with freeze_time("2026-01-01 23:59:00"):
        assert action_tokens.read_verify(verify) == 1
    with freeze_time("2026-01-02 00:00:01"), pytest.raises(TokenExpiredError):
        action_tokens.read_verify(verify)


def test_non_numeric_subject_is_invalid_id(action_tokens):
    token = action_tokens.issue_reset("someone@example.com")
    with pytest.raises(InvalidIDFormatError):
        action_tokens.read_verify(token)


@pytest.mark.parametrize("payload", ["no-separator", "_2030-01-01T00:00:00+00:00", "1_not-a-date"])
def test_malformed_payload_rejected(action_tokens, payload):
    token = action_tokens.cipher.encrypt(payload)
    with pytest.raises(TokenInvalidError):
        action_tokens.read_reset(token)
