"""Shared fixtures for the HubHook test suite."""

import pytest
from fastapi.testclient import TestClient

from hubhook.core.config import Settings, load_settings
from hubhook.main import create_app

VERIFY_TOKEN = "test-verify-token"
APP_SECRET = "test-app-secret"


def make_settings(**overrides) -> Settings:
    """Settings isolated from the environment and any local .env file."""
    values = {
        "verify_token": VERIFY_TOKEN,
        "app_secret": APP_SECRET,
    }
    values.update(overrides)
    return load_settings(_env_file=None, **values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def client(settings):
    """TestClient for the log-only (default) signature policy."""
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def strict_client():
    """TestClient that rejects deliveries with an invalid signature."""
    with TestClient(create_app(make_settings(reject_invalid_signatures=True))) as c:
        yield c
