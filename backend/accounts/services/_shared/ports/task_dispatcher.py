from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Protocol

logger = logging.getLogger("accounts.tasks")


class TaskDispatcher(Protocol):
    """
    Fire-and-forget task submission.

    Implementations run ``fn`` at most once and never propagate its
    exceptions to the submitter; failures are logged.
    """

    def submit(self, name: str, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> None: ...

    def shutdown(self, *, wait: bool = True) -> None: ...


class InlineTaskDispatcher(TaskDispatcher):
    """Runs tasks synchronously in the caller's thread (tests, CLI)."""

    def __init__(self) -> None:
        self.completed: list[str] = []
        self.failed: list[str] = []

    def submit(self, name: str, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> None:
        try:
            fn(*args, **kwargs)
        except Exception:
            logger.exception("task.failed", extra={"task": name})
            self.failed.append(name)
        else:
            self.completed.append(name)

    def shutdown(self, *, wait: bool = True) -> None:
        return None
