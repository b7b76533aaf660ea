"""Convenience exports for API schemas."""

from __future__ import annotations

from .auth import (
    EmailSchema,
    LoginResponseSchema,
    LoginSchema,
    RefreshTokenSchema,
    RegisterSchema,
    ResetPasswordSchema,
    TokenPairSchema,
    TokenSchema,
)
from .common import MetaSchema, PaginationQuerySchema, build_meta, policy
from .user import PasswordChangeSchema, UserCreateSchema, UserPublicSchema, UserUpdateSchema

__all__ = [
    "EmailSchema",
    "LoginResponseSchema",
    "LoginSchema",
    "RefreshTokenSchema",
    "RegisterSchema",
    "ResetPasswordSchema",
    "TokenPairSchema",
    "TokenSchema",
    "MetaSchema",
    "PaginationQuerySchema",
    "build_meta",
    "policy",
    "PasswordChangeSchema",
    "UserCreateSchema",
    "UserPublicSchema",
    "UserUpdateSchema",
]
