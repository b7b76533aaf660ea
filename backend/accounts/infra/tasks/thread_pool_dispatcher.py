from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

from accounts.services._shared.ports import TaskDispatcher

logger = logging.getLogger("accounts.tasks")


class ThreadPoolTaskDispatcher(TaskDispatcher):
    """
    Runs tasks on a bounded :class:`~concurrent.futures.ThreadPoolExecutor`.

    Submission returns immediately; failures surface only in the log.

    :param max_workers: Pool size.
    """

    def __init__(self, max_workers: int = 4) -> None:
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="accounts-task")

    def submit(self, name: str, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> None:
        future = self._executor.submit(fn, *args, **kwargs)
        future.add_done_callback(lambda f: self._report(name, f))

    @staticmethod
    def _report(name: str, future: Future[Any]) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.error(
                "task.failed",
                extra={"task": name},
                exc_info=(type(exc), exc, exc.__traceback__),
            )

    def shutdown(self, *, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
