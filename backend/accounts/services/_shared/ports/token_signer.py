from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol

ACCESS = "access"
REFRESH = "refresh"


@dataclass(frozen=True, slots=True)
class TokenSignerConfig:
    """
    Immutable signing configuration.

    :param access_secret: HMAC key for access tokens.
    :param refresh_secret: HMAC key for refresh tokens; must differ from
        ``access_secret`` so one token type can never validate as the other.
    :param access_ttl: Access token lifetime.
    :param refresh_ttl: Refresh token lifetime.
    :param issuer: Value of the ``iss`` claim, checked on validation.
    """

    access_secret: str
    refresh_secret: str
    access_ttl: timedelta
    refresh_ttl: timedelta
    issuer: str

    def __post_init__(self) -> None:
        if not self.access_secret or not self.refresh_secret:
            raise ValueError("Token secrets must not be empty.")
        if self.access_secret == self.refresh_secret:
            raise ValueError("Access and refresh secrets must differ.")
        if self.access_ttl <= timedelta(0) or self.refresh_ttl <= timedelta(0):
            raise ValueError("Token lifetimes must be positive.")


@dataclass(frozen=True, slots=True)
class IssuedToken:
    token: str
    expires_at: datetime


@dataclass(frozen=True, slots=True)
class AccessTokenClaims:
    user_id: int
    email: str
    token_type: str
    issued_at: datetime
    not_before: datetime
    expires_at: datetime
    issuer: str
    subject: str


@dataclass(frozen=True, slots=True)
class RefreshTokenClaims:
    user_id: int
    token_type: str
    issued_at: datetime
    not_before: datetime
    expires_at: datetime
    issuer: str
    subject: str


class TokenSigner(Protocol):
    """
    Port for issuing and validating signed access/refresh tokens.

    Validation failures of any kind raise ``TokenInvalidError``.
    """

    def issue_access_token(self, *, user_id: int, email: str) -> IssuedToken: ...

    def issue_refresh_token(self, *, user_id: int) -> IssuedToken: ...

    def validate_access_token(self, token: str) -> AccessTokenClaims: ...

    def validate_refresh_token(self, token: str) -> RefreshTokenClaims: ...
