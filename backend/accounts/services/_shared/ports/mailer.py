from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class OutgoingEmail:
    """
    A rendered e-mail ready for delivery.

    :ivar to: Recipient address.
    :ivar subject: Subject line.
    :ivar html: HTML body.
    """

    to: str
    subject: str
    html: str


class Mailer(Protocol):
    """Delivers a single rendered e-mail; raises on transport failure."""

    def send(self, message: OutgoingEmail) -> None: ...


class InMemoryMailer(Mailer):
    """Collects messages in :attr:`outbox` instead of sending them."""

    def __init__(self) -> None:
        self.outbox: list[OutgoingEmail] = []
        self._lock = threading.Lock()

    def send(self, message: OutgoingEmail) -> None:
        with self._lock:
            self.outbox.append(message)

    def clear(self) -> None:
        with self._lock:
            self.outbox.clear()
