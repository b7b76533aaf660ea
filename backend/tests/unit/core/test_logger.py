"""Tests for the JSON log formatter."""

from __future__ import annotations

import json
import logging

from accounts.core.logger import JSONFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("accounts.test", logging.INFO, __file__, 1, "auth.login", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_emits_one_json_object_with_known_extras():
    line = JSONFormatter().format(_record(user_id=7, task="email.verify", request_id="abc"))
    payload = json.loads(line)
    assert payload["message"] == "auth.login"
    assert payload["level"] == "INFO"
    assert payload["user_id"] == 7
    assert payload["task"] == "email.verify"
    assert payload["request_id"] == "abc"


def test_formatter_drops_unknown_extras():
    payload = json.loads(JSONFormatter().format(_record(password="secret")))
    assert "password" not in payload
