"""PyJWT adapter for :class:`~accounts.services._shared.ports.TokenSigner`."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

import jwt

from accounts.services._shared.errors import TokenInvalidError
from accounts.services._shared.ports import (
    ACCESS,
    REFRESH,
    AccessTokenClaims,
    IssuedToken,
    RefreshTokenClaims,
    TokenSigner,
    TokenSignerConfig,
)

ALGORITHM = "HS256"
_REQUIRED = ["user_id", "token_type", "iat", "nbf", "exp", "iss", "sub", "jti"]


def _ts(value: Any) -> datetime:
    return datetime.fromtimestamp(int(value), tz=UTC)


@dataclass(slots=True)
class PyJWTTokenSigner(TokenSigner):
    """
    HS256 signer with one secret per token type.

    Every token carries a random ``jti`` so two tokens issued for the same
    user within the same second are still distinct strings.

    :param config: Secrets, lifetimes and issuer.
    """

    config: TokenSignerConfig

    # -------------------- issuing --------------------

    def _encode(self, claims: dict[str, Any], *, secret: str, ttl: timedelta) -> IssuedToken:
        now = datetime.now(UTC).replace(microsecond=0)
        expires_at = now + ttl
        payload = {
            **claims,
            "iat": now,
            "nbf": now,
            "exp": expires_at,
            "iss": self.config.issuer,
            "sub": str(claims["user_id"]),
            "jti": uuid4().hex,
        }
        token = jwt.encode(payload, secret, algorithm=ALGORITHM)
        return IssuedToken(token=token, expires_at=expires_at)

    def issue_access_token(self, *, user_id: int, email: str) -> IssuedToken:
        return self._encode(
            {"user_id": user_id, "email": email, "token_type": ACCESS},
            secret=self.config.access_secret,
            ttl=self.config.access_ttl,
        )

    def issue_refresh_token(self, *, user_id: int) -> IssuedToken:
        return self._encode(
            {"user_id": user_id, "token_type": REFRESH},
            secret=self.config.refresh_secret,
            ttl=self.config.refresh_ttl,
        )

    # -------------------- validation -----------------

    def _decode(self, token: str, *, secret: str, expected_type: str, required: list[str]) -> dict[str, Any]:
        if not token or not isinstance(token, str):
            raise TokenInvalidError()
        try:
            data: dict[str, Any] = jwt.decode(
                token,
                secret,
                algorithms=[ALGORITHM],
                issuer=self.config.issuer,
                options={"require": required},
            )
        except jwt.InvalidTokenError as exc:
            # ExpiredSignatureError is a subclass; expiry is just another rejection here
            raise TokenInvalidError() from exc

        user_id = data.get("user_id")
        if data.get("token_type") != expected_type:
            raise TokenInvalidError()
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise TokenInvalidError()
        if data.get("sub") != str(user_id):
            raise TokenInvalidError()
        return data

    def validate_access_token(self, token: str) -> AccessTokenClaims:
        data = self._decode(
            token,
            secret=self.config.access_secret,
            expected_type=ACCESS,
            required=[*_REQUIRED, "email"],
        )
        if not isinstance(data["email"], str):
            raise TokenInvalidError()
        return AccessTokenClaims(
            user_id=data["user_id"],
            email=data["email"],
            token_type=data["token_type"],
            issued_at=_ts(data["iat"]),
            not_before=_ts(data["nbf"]),
            expires_at=_ts(data["exp"]),
            issuer=data["iss"],
            subject=data["sub"],
        )

    def validate_refresh_token(self, token: str) -> RefreshTokenClaims:
        data = self._decode(
            token,
            secret=self.config.refresh_secret,
            expected_type=REFRESH,
            required=_REQUIRED,
        )
        return RefreshTokenClaims(
            user_id=data["user_id"],
            token_type=data["token_type"],
            issued_at=_ts(data["iat"]),
            not_before=_ts(data["nbf"]),
            expires_at=_ts(data["exp"]),
            issuer=data["iss"],
            subject=data["sub"],
        )
