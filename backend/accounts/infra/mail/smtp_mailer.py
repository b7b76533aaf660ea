from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage

from accounts.services._shared.ports import Mailer, OutgoingEmail

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class SmtpMailer(Mailer):
    """
    Sends messages through an SMTP relay, one connection per message.

    :param host: SMTP server host.
    :param port: SMTP server port.
    :param sender: ``From`` address.
    :param username: Login user; login is skipped when empty.
    :param password: Login password.
    :param use_tls: Issue ``STARTTLS`` before login.
    :param timeout: Socket timeout in seconds.
    """

    host: str
    port: int
    sender: str
    username: str = ""
    password: str = ""
    use_tls: bool = True
    timeout: int = 10

    def _build(self, message: OutgoingEmail) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = message.subject
        msg["From"] = self.sender
        msg["To"] = message.to
        msg.set_content("This message requires an HTML-capable mail client.")
        msg.add_alternative(message.html, subtype="html")
        return msg

    def send(self, message: OutgoingEmail) -> None:
        """
        Deliver ``message``.

        :raises smtplib.SMTPException: On protocol errors.
        :raises OSError: On connection errors.
        """
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            if self.use_tls:
                server.starttls()
            if self.username:
                server.login(self.username, self.password)
            server.send_message(self._build(message))
        logger.info("email.sent", extra={"backend": "smtp"})
