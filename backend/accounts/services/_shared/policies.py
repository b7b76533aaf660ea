"""Account input policies shared by services and schemas.

Each check raises :class:`PolicyViolationError` with a human-readable message;
HTTP schemas reuse the same checks so both layers agree on the rules.
"""

from __future__ import annotations

import re

from accounts.services._shared.errors import PolicyViolationError

EMAIL_RE = re.compile(r"^[a-z0-9._%+\-]+@[a-z0-9.\-]+\.[a-z]{2,}$")
EMAIL_MIN_LENGTH = 5
EMAIL_MAX_LENGTH = 254

PASSWORD_MIN_LENGTH = 8
PASSWORD_SPECIALS = frozenset('!@#$%^&*(),.?":{}|<>')


def normalize_email(email: str) -> str:
    """Trim and lowercase an e-mail address."""
    return (email or "").strip().lower()


def check_email(email: str) -> str:
    """
    Validate and normalize an e-mail address.

    :param email: Raw address as supplied by the client.
    :type email: str
    :returns: The normalized address.
    :rtype: str
    :raises PolicyViolationError: On bad length or format.
    """
    normalized = normalize_email(email)
    if not EMAIL_MIN_LENGTH <= len(normalized) <= EMAIL_MAX_LENGTH:
        raise PolicyViolationError(
            f"email length must be between {EMAIL_MIN_LENGTH} and {EMAIL_MAX_LENGTH} characters"
        )
    if not EMAIL_RE.match(normalized):
        raise PolicyViolationError("invalid email format")
    return normalized


def check_password_strength(password: str) -> None:
    """
    Enforce the password policy on a plain-text password.

    :raises PolicyViolationError: If shorter than the minimum length or
        missing a special character.
    """
    if len(password or "") < PASSWORD_MIN_LENGTH:
        raise PolicyViolationError(
            f"password must be at least {PASSWORD_MIN_LENGTH} characters long"
        )
    if not any(ch in PASSWORD_SPECIALS for ch in password):
        raise PolicyViolationError("password must contain at least one special character")


NAME_MAX_LENGTH = 100


def check_name(name: str) -> str:
    """
    Validate a display name.

    :returns: The trimmed name.
    :raises PolicyViolationError: If blank or longer than ``NAME_MAX_LENGTH``.
    """
    trimmed = (name or "").strip()
    if not trimmed:
        raise PolicyViolationError("name is required")
    if len(trimmed) > NAME_MAX_LENGTH:
        raise PolicyViolationError(f"name must be at most {NAME_MAX_LENGTH} characters long")
    return trimmed
