"""Pytest configuration for the chatter_providers test suite.

Keeps tests hermetic: the config layer is pointed at a non-existent dotenv
file and its caches are reset around every test, and the timeout cache is
cleared so environment overrides from one test never leak into the next.
"""
from __future__ import annotations

import logging
from typing import Iterator, List

import pytest

from chatter_providers.base.logging import ROOT_LOGGER_NAME
from chatter_providers.base.timeouts import reset_timeout_config
from chatter_providers.config import reset_config_cache


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Isolate every test from the developer's dotenv and config file."""
    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "missing.env"))
    monkeypatch.delenv("CHATTER_CONFIG_FILE", raising=False)
    reset_config_cache()
    reset_timeout_config()
    yield
    reset_config_cache()
    reset_timeout_config()


@pytest.fixture()
def log_records() -> Iterator[List[logging.LogRecord]]:
    """Capture records emitted under the ``chatter`` logger hierarchy.

    The package root logger does not propagate, so ``caplog`` cannot see it;
    a handler is attached directly instead.
    """
    records: List[logging.LogRecord] = []
    handler = logging.Handler(level=logging.DEBUG)
    handler.emit = records.append  # type: ignore[assignment]
    root = logging.getLogger(ROOT_LOGGER_NAME)
    previous = root.level
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)
    try:
        yield records
    finally:
        root.removeHandler(handler)
        root.setLevel(previous)
