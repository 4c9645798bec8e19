"""Tests for setup_logging()."""

from __future__ import annotations

import logging

import pytest

from commitpulse.core.logging import setup_logging


@pytest.fixture(autouse=True)
def _restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_explicit_level_wins_over_env(monkeypatch):
    monkeypatch.setenv("COMMITPULSE_LOG_LEVEL", "WARNING")
    setup_logging("debug")
    assert logging.getLogger("commitpulse").level == logging.DEBUG


def test_server_access_log_is_quieted(monkeypatch):
    monkeypatch.delenv("COMMITPULSE_LOG_LEVEL", raising=False)
    setup_logging()
    assert logging.getLogger("commitpulse").level == logging.INFO
    assert logging.getLogger("uvicorn.access").level == logging.WARNING
