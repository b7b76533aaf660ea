"""Tests for the inline and thread-pool task dispatchers."""

from __future__ import annotations

import logging
import threading

from accounts import container as container_module
from accounts.infra.tasks import ThreadPoolTaskDispatcher
from accounts.services._shared.ports import InlineTaskDispatcher
from flask import Flask


def test_inline_dispatcher_runs_and_swallows_failures(caplog):
    dispatcher = InlineTaskDispatcher()
    seen = []

    def boom():
        raise RuntimeError("smtp down")

    dispatcher.submit("ok", seen.append, 1)
    with caplog.at_level(logging.ERROR, logger="accounts.tasks"):
        dispatcher.submit("broken", boom)

    assert seen == [1]
    assert dispatcher.completed == ["ok"]
    assert dispatcher.failed == ["broken"]
    assert any(r.getMessage() == "task.failed" for r in caplog.records)


def test_thread_pool_runs_off_caller_thread(caplog):
    dispatcher = ThreadPoolTaskDispatcher(max_workers=2)
    done = threading.Event()
    threads = []

    def work():
        threads.append(threading.current_thread().name)
        done.set()

    def boom():
        raise RuntimeError("nope")

    with caplog.at_level(logging.ERROR, logger="accounts.tasks"):
        dispatcher.submit("work", work)
        dispatcher.submit("boom", boom)
        dispatcher.shutdown(wait=True)

    assert done.is_set()
    assert threads[0].startswith("accounts-task")
    failures = [r for r in caplog.records if r.getMessage() == "task.failed"]
    assert len(failures) == 1
    assert failures[0].task == "boom"


def test_container_drains_dispatcher_at_exit(app, monkeypatch):
    registered = []
    monkeypatch.setattr(container_module.atexit, "register", registered.append)

    fresh = Flask("drain-check")
    fresh.config.update(app.config)
    container_module.init_app(fresh)

    dispatcher = fresh.extensions[container_module.EXTENSION_KEY].dispatcher
    assert registered == [dispatcher.shutdown]
