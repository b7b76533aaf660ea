"""Transactional e-mail for the account lifecycle."""

from __future__ import annotations

import logging
from urllib.parse import urlencode

from jinja2 import Environment, PackageLoader, select_autoescape

from accounts.services._shared.ports import Mailer, OutgoingEmail, TaskDispatcher

logger = logging.getLogger(__name__)


def default_environment() -> Environment:
    """Jinja2 environment reading ``accounts/templates/email``."""
    return Environment(
        loader=PackageLoader("accounts", "templates/email"),
        autoescape=select_autoescape(["html"]),
    )


class EmailNotifier:
    """
    Renders account e-mails and hands delivery to a :class:`TaskDispatcher`.

    Rendering happens in the caller's thread so template errors surface
    immediately; delivery is fire-and-forget and at-most-once.

    :param mailer: Transport used by the background task.
    :param dispatcher: Where delivery tasks are submitted.
    :param app_name: Product name used in subjects and bodies.
    :param app_url: Front-end base URL that hosts the action pages.
    :param env: Optional Jinja2 environment (defaults to the package templates).
    """

    def __init__(
        self,
        *,
        mailer: Mailer,
        dispatcher: TaskDispatcher,
        app_name: str,
        app_url: str,
        env: Environment | None = None,
    ) -> None:
        self.mailer = mailer
        self.dispatcher = dispatcher
        self.app_name = app_name
        self.app_url = app_url.rstrip("/")
        self.env = env or default_environment()

    def _link(self, path: str, token: str) -> str:
        return f"{self.app_url}/{path}?{urlencode({'token': token})}"

    def _render(self, template: str, **context: str) -> str:
        return self.env.get_template(template).render(app_name=self.app_name, **context)

    def _dispatch(self, name: str, message: OutgoingEmail) -> None:
        self.dispatcher.submit(name, self.mailer.send, message)
        logger.info("email.queued", extra={"task": name})

    def send_verify_email(self, *, to: str, name: str, token: str) -> None:
        """Queue the verification e-mail carrying ``token``."""
        html = self._render(
            "verify_email.html",
            name=name,
            verification_url=self._link("verify-email", token),
        )
        self._dispatch(
            "email.verify",
            OutgoingEmail(to=to, subject=f"Verify User {self.app_name} Email", html=html),
        )

    def send_reset_password(self, *, to: str, name: str, token: str) -> None:
        """Queue the password-reset e-mail carrying ``token``."""
        html = self._render(
            "reset_password.html",
            name=name,
            reset_url=self._link("reset-password", token),
        )
        self._dispatch(
            "email.reset_password",
            OutgoingEmail(to=to, subject=f"Reset {self.app_name} Account Password", html=html),
        )
