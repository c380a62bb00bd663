"""Shared fixtures for the configuration test suite."""

from __future__ import annotations

import logging
import os

import pytest

from user_management.config import CONFIG_KEYS
from user_management.config.logging_config import HANDLER_NAME


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Hide configuration variables set on the host running the tests."""
    names = [key.env_var for key in CONFIG_KEYS] + ["APP_ENV", "APP_CONFIG_FILE"]
    for name in names:
        monkeypatch.delenv(name, raising=False)
    yield
    # dotenv loading writes to os.environ directly
    for name in names:
        os.environ.pop(name, None)


@pytest.fixture
def restore_root_logger():
    """Undo handler and level changes made by configure_logging."""
    root = logging.getLogger()
    level = root.level
    yield root
    for handler in root.handlers[:]:
        if handler.get_name() == HANDLER_NAME:
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def production_environ() -> dict[str, str]:
    """Environment variables that satisfy every production check."""
    return {
        "JWT_SECRET": "k3f9a8d7c6b5e4f3a2b1c0d9e8f7a6b5",
        "DATABASE_HOST": "db.internal",
    }
