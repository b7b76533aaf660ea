"""Tests for environment-driven configuration helpers."""

from __future__ import annotations

import pytest
from accounts.core.config import (
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    env_bool,
    env_int,
    get_config,
)


@pytest.mark.parametrize("raw", ["1", "true", "YES", " on ", "y"])
def test_env_bool_truthy_values(monkeypatch, raw):
    monkeypatch.setenv("FLAG", raw)
    assert env_bool("FLAG") is True


def test_env_bool_default_when_unset(monkeypatch):
    monkeypatch.delenv("FLAG", raising=False)
    assert env_bool("FLAG", default=True) is True
    monkeypatch.setenv("FLAG", "nope")
    assert env_bool("FLAG", default=True) is False


def test_env_int_parses_and_rejects_garbage(monkeypatch):
    monkeypatch.setenv("PORT", " 2525 ")
    assert env_int("PORT", 25) == 2525
    monkeypatch.setenv("PORT", "")
    assert env_int("PORT", 25) == 25
    monkeypatch.setenv("PORT", "abc")
    with pytest.raises(ValueError, match="PORT"):
        env_int("PORT", 25)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("testing", TestingConfig),
        ("production", ProductionConfig),
        ("development", DevelopmentConfig),
        ("unknown", DevelopmentConfig),
    ],
)
def test_get_config_selects_class_from_app_env(monkeypatch, name, expected):
    monkeypatch.setenv("APP_ENV", name)
    assert get_config() is expected


def test_testing_config_keeps_side_effects_local():
    assert TestingConfig.MAIL_BACKEND == "memory"
    assert TestingConfig.TASK_DISPATCHER == "inline"
    assert TestingConfig.JWT_ACCESS_SECRET != TestingConfig.JWT_REFRESH_SECRET
