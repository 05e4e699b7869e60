"""
Pytest configuration and shared fixtures for biosdk-client tests.
"""

from typing import Dict

import pytest

from core.config import DEFAULT_SERVICE_ENV, REQUEST_RESPONSE_DEBUG_ENV, ClientSettings
from factories import DEFAULT_URL, FACE_URL, FINGER_URL


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Keep host env vars and .env files out of every test."""
    monkeypatch.delenv(DEFAULT_SERVICE_ENV, raising=False)
    monkeypatch.delenv(REQUEST_RESPONSE_DEBUG_ENV, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings() -> ClientSettings:
    return ClientSettings(_env_file=None)


@pytest.fixture
def init_params() -> Dict[str, str]:
    return {
        "format.url.default": DEFAULT_URL,
        "format.url.finger-iso": FINGER_URL,
        "format.url.face-iso": FACE_URL,
        "threshold": "60",
    }
