"""Tests for the PyJWT access/refresh signer."""

from __future__ import annotations

from datetime import timedelta

import jwt
import pytest
from accounts.infra.jwt import PyJWTTokenSigner
from accounts.services._shared.errors import TokenInvalidError
from accounts.services._shared.ports import ACCESS, REFRESH, TokenSignerConfig
from freezegun import freeze_time


def _config(**overrides) -> TokenSignerConfig:
    values = {
        "access_secret": "access-secret",
        "refresh_secret": "refresh-secret",
        "access_ttl": timedelta(minutes=15),
        "refresh_ttl": timedelta(days=7),
        "issuer": "accounts-test",
    }
    values.update(overrides)
    return TokenSignerConfig(**values)


@pytest.fixture()
def signer() -> PyJWTTokenSigner:
    return PyJWTTokenSigner(_config())


def test_access_token_round_trip(signer):
    issued = signer.issue_access_token(user_id=42, email="a@example.com")
    claims = signer.validate_access_token(issued.token)

    assert claims.user_id == 42
    assert claims.email == "a@example.com"
    assert claims.token_type == ACCESS
    assert claims.subject == "42"
    assert claims.issuer == "accounts-test"
    assert claims.expires_at == issued.expires_at
    assert claims.expires_at - claims.issued_at == timedelta(minutes=15)


def test_refresh_token_round_trip(signer):
    issued = signer.issue_refresh_token(user_id=7)
    claims = signer.validate_refresh_token(issued.token)
    assert claims.user_id == 7
    assert claims.token_type == REFRESH


def test_tokens_are_not_interchangeable(signer):
    access = signer.issue_access_token(user_id=1, email="a@example.com").token
    refresh = signer.issue_refresh_token(user_id=1).token

    with pytest.raises(TokenInvalidError):
        signer.validate_refresh_token(access)
    with pytest.raises(TokenInvalidError):
        signer.validate_access_token(refresh)


def test_tokens_issued_in_same_second_differ(signer):
    with freeze_time("2026-01-01 12:00:00"):
        first = signer.issue_refresh_token(user_id=1).token
        second = signer.issue_refresh_token(user_id=1).token
    assert first != second


def test_expired_token_rejected(signer):
    with freeze_time("2026-01-01 12:00:00"):
        token = signer.issue_access_token(user_id=1, email="a@example.com").token
    with freeze_time("2026-01-01 12:16:00"), pytest.raises(TokenInvalidError):
        signer.validate_access_token(token)


def test_foreign_issuer_and_tampering_rejected(signer):
    other = PyJWTTokenSigner(_config(issuer="someone-else"))
    with pytest.raises(TokenInvalidError):
        signer.validate_access_token(other.issue_access_token(user_id=1, email="a@example.com").token)

    token = signer.issue_access_token(user_id=1, email="a@example.com").token
    with pytest.raises(TokenInvalidError):
        signer.validate_access_token(token[:-2] + ("A" if token[-2] != "A" else "B") + token[-1])

    for garbage in ["", "not-a-jwt"]:
        with pytest.raises(TokenInvalidError):
            signer.validate_access_token(garbage)


def test_same_secret_but_wrong_type_claim_rejected():
    signer = PyJWTTokenSigner(_config())
    forged = jwt.encode(
        {
            "user_id": 1,
            "email": "a@example.com",
            "token_type": REFRESH,
            "iat": 0,
            "nbf": 0,
            "exp": 4102444800,
            "iss": "accounts-test",
            "sub": "1",
            "jti": "x",
        },
        "access-secret",
        algorithm="HS256",
    )
    with pytest.raises(TokenInvalidError):
        signer.validate_access_token(forged)


@pytest.mark.parametrize(
    "overrides",
    [
        {"access_secret": ""},
        {"refresh_secret": "access-secret"},
        {"access_ttl": timedelta(0)},
    ],
)
def test_config_rejects_unsafe_values(overrides):
    with pytest.raises(ValueError):
        _config(**overrides)
