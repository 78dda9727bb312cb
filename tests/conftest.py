from __future__ import annotations

import logging
import os

import pytest
from fastapi.testclient import TestClient

from token_gate.config import Settings
from token_gate.main import create_app

TOKEN = "s3cr3t-token"

_CONFIG_VARS = ("AUTH_TOKEN", "ENV_FILE", "IS_LOCAL", "LOG_LEVEL")


@pytest.fixture
def clean_env(monkeypatch):
    """Strip config variables and restore os.environ exactly afterwards.

    load_env_overrides writes straight into os.environ, which monkeypatch
    cannot track, so the whole mapping is snapshotted.
    """
    saved = dict(os.environ)
    for key in _CONFIG_VARS:
        monkeypatch.delenv(key, raising=False)
    yield
    os.environ.clear()
    os.environ.update(saved)


@pytest.fixture
def settings() -> Settings:
    return Settings(auth_token=TOKEN)


@pytest.fixture
def client(settings) -> TestClient:
    return TestClient(create_app(settings))


@pytest.fixture
def restore_log_levels():
    """setup_logging() retunes the root and uvicorn loggers; put them back."""
    names = ("", "uvicorn", "uvicorn.error", "uvicorn.access")
    saved = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)
