"""Shared test fixtures and configuration."""

import logging
import os

import pytest


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Drop BOOKSEARCH_* variables so every test starts from defaults."""
    for key in list(os.environ):
        if key.upper().startswith("BOOKSEARCH_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(os.path.dirname(__file__))


@pytest.fixture(autouse=True)
def restore_root_logger():
    """configure_logging() replaces root handlers; put them back afterwards."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
