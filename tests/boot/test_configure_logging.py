from __future__ import annotations

import logging

import pytest

from ziweiengine.boot.logging import LEVEL_ENV_VARS, configure_logging


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch):
    for name in LEVEL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    root = logging.getLogger()
    previous_level = root.level
    previous_handlers = list(root.handlers)
    yield
    root.handlers[:] = previous_handlers
    root.setLevel(previous_level)


def test_defaults_to_info() -> None:
    assert configure_logging() == logging.INFO
    assert logging.getLogger().level == logging.INFO


@pytest.mark.parametrize(
    ("value", "expected"),
    [("debug", logging.DEBUG), ("WARNING", logging.WARNING), ("10", logging.DEBUG), ("bogus", logging.INFO)],
)
def test_explicit_level(value: str, expected: int) -> None:
    assert configure_logging(level=value) == expected


def test_package_variable_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    monkeypatch.setenv("ZIWEIENGINE_LOG_LEVEL", "DEBUG")
    assert configure_logging() == logging.DEBUG


def test_generic_variable_is_fallback(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    assert configure_logging() == logging.ERROR


def test_explicit_level_overrides_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ZIWEIENGINE_LOG_LEVEL", "DEBUG")
    assert configure_logging(level=logging.WARNING) == logging.WARNING
