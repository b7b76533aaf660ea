"""Authentication helpers for HTTP tests."""

from __future__ import annotations

import re
from types import SimpleNamespace
from urllib.parse import unquote

from tests.factories.user import DEFAULT_PASSWORD, UserFactory

_TOKEN_RE = re.compile(r"token=([^\"&<\s]+)")


def committed_user(session, **kwargs) -> SimpleNamespace:
    """Persist a user, commit, and return plain attributes.

    Returning plain values keeps tests independent of the ORM instance once
    the request cycle has touched the session.
    """

    password = kwargs.pop("password", DEFAULT_PASSWORD)
    user = UserFactory(password=password, **kwargs)
    session.commit()
    return SimpleNamespace(id=user.id, email=user.email, name=user.name, password=password)


def bearer(container, user) -> dict[str, str]:
    """Authorization header carrying a fresh access token for ``user``."""

    issued = container.signer.issue_access_token(user_id=user.id, email=user.email)
    return {"Authorization": f"Bearer {issued.token}"}


def token_from_email(html: str) -> str:
    """Extract the action token embedded in a rendered e-mail link."""

    match = _TOKEN_RE.search(html)
    assert match, "no token link in e-mail body"
    return unquote(match.group(1))
