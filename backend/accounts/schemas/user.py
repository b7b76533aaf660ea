"""User resource schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from accounts.models.user import Gender
from accounts.services._shared.policies import check_email, check_password_strength

from .common import policy

GENDERS = [g.value for g in Gender]


class UserPublicSchema(Schema):
    """Public representation of a user. Never includes the password hash."""

    id = fields.Integer(required=True)
    name = fields.String(required=True)
    email = fields.String(required=True)
    avatar = fields.String(allow_none=True)
    gender = fields.String(required=True)
    is_active = fields.Boolean(required=True)
    created_at = fields.DateTime(allow_none=True)


class UserCreateSchema(Schema):
    """Payload for creating a user from the admin surface."""

    name = fields.String(required=True, validate=validate.Length(min=1, max=100))
    email = fields.String(required=True, validate=policy(check_email))
    password = fields.String(
        required=True,
        validate=[validate.Length(max=128), policy(check_password_strength)],
    )
    gender = fields.String(load_default=Gender.UNKNOWN.value, validate=validate.OneOf(GENDERS))


class UserUpdateSchema(Schema):
    """Partial update; the avatar arrives as a multipart file, not here."""

    name = fields.String(validate=validate.Length(min=1, max=100))
    gender = fields.String(validate=validate.OneOf(GENDERS))


class PasswordChangeSchema(Schema):
    old_password = fields.String(required=True, validate=validate.Length(min=1, max=128))
    new_password = fields.String(
        required=True,
        validate=[validate.Length(max=128), policy(check_password_strength)],
    )
