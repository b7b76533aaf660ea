"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never import Flask or HTTP
helpers. They are the stable contract between ports, repositories and
services. The translation to RFC 7807 responses lives in
``accounts/core/errors.py``.

Every error carries a machine-readable ``code`` and a default message so the
boundary layer can render it without inspecting the concrete type.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    :param exc: The exception raised by SQLAlchemy during flush/commit.
    :type exc: IntegrityError
    :param constraint_name: Database constraint name (e.g. ``uq_users_email``).
    :type constraint_name: str
    :returns: ``True`` if the driver message mentions the constraint.
    :rtype: bool
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Subclasses override :attr:`code` and :attr:`default_message`.
    """

    code = "bad_request"
    default_message = "invalid request"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


@dataclass(slots=True, eq=False)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key, when known.
    :type key: str | int | None
    """

    entity: str
    key: str | int | None = None

    code = "not_found"

    def __str__(self) -> str:
        return f"{self.entity.lower()} not found"


@dataclass(slots=True, eq=False)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    code = "conflict"

    def __str__(self) -> str:
        return self.detail


# --------------------------------------------------------------------------- #
# Account errors
# --------------------------------------------------------------------------- #


class UserNotFoundError(NotFoundError):
    """No matching *active* account. Also used for inactive accounts on login."""

    code = "user_not_found"

    def __init__(self, key: str | int | None = None) -> None:
        NotFoundError.__init__(self, "User", key)


class EmailAlreadyExistsError(ConflictError):
    """The e-mail address is already registered."""

    code = "email_already_exists"

    def __init__(self) -> None:
        ConflictError.__init__(self, "User", "email already exists")


class PasswordMismatchError(ServiceError):
    code = "password_mismatch"
    default_message = "password does not match"


class PolicyViolationError(ServiceError):
    """Raised when an e-mail or password fails the account policy."""

    code = "validation_error"
    default_message = "invalid input provided"


# --------------------------------------------------------------------------- #
# Token errors
# --------------------------------------------------------------------------- #


class TokenInvalidError(ServiceError):
    """Bad signature, wrong type, malformed claims, or revoked per the store."""

    code = "token_invalid"
    default_message = "token is invalid or expired"


class TokenExpiredError(ServiceError):
    """A one-time action token decoded fine but is past its embedded expiry."""

    code = "token_expired"
    default_message = "token has expired"


class InvalidIDFormatError(ServiceError):
    code = "invalid_id_format"
    default_message = "invalid ID format"


# --------------------------------------------------------------------------- #
# Media errors
# --------------------------------------------------------------------------- #


class UnsupportedFileTypeError(ServiceError):
    code = "unsupported_file_type"
    default_message = "unsupported file type"


class FileTooLargeError(ServiceError):
    code = "payload_too_large"
    default_message = "file size is too large"
