"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from accounts.services._shared.policies import check_email, check_password_strength

from .common import policy
from .user import UserPublicSchema


class LoginSchema(Schema):
    """Input payload for authenticating a user."""

    email = fields.String(required=True, validate=validate.Length(min=1, max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class RegisterSchema(Schema):
    """Input payload for self-service registration."""

    name = fields.String(required=True, validate=validate.Length(min=1, max=100))
    email = fields.String(required=True, validate=policy(check_email))
    password = fields.String(
        required=True,
        validate=[validate.Length(max=128), policy(check_password_strength)],
    )


class RefreshTokenSchema(Schema):
    """Body fallback when the ``X-Refresh-Token`` header is absent."""

    refresh_token = fields.String(load_default=None)


class EmailSchema(Schema):
    """Single e-mail address (resend verification, request reset)."""

    email = fields.String(required=True, validate=validate.Length(min=1, max=254))


class TokenSchema(Schema):
    """One-time action token (e-mail verification)."""

    token = fields.String(required=True, validate=validate.Length(min=1))


class ResetPasswordSchema(Schema):
    token = fields.String(required=True, validate=validate.Length(min=1))
    new_password = fields.String(
        required=True,
        validate=[validate.Length(max=128), policy(check_password_strength)],
    )


class TokenPairSchema(Schema):
    """Response payload with both tokens and their expiries."""

    access_token = fields.String(required=True)
    refresh_token = fields.String(required=True)
    access_expires_at = fields.DateTime(required=True)
    refresh_expires_at = fields.DateTime(required=True)
    token_type = fields.Constant("bearer")


class LoginResponseSchema(TokenPairSchema):
    user = fields.Nested(UserPublicSchema, required=True)
